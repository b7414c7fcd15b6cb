from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TaskType = Literal[
    "sanwi_nosul",
    "brand",
    "trend",
    "eonron_bodo",
    "jisikin",
    "forum_post",
    "report",
    "early_start",
]

MAIN_TASK_TYPES = ("brand", "trend")


# ---------------------------------------------------------------------------
#  Generation inputs (read-only snapshots)
# ---------------------------------------------------------------------------

class HospitalRecord(BaseModel):
  """병원 정보 스냅샷"""
  model_config = ConfigDict(extra="ignore", from_attributes=True)

  id: int
  name: str
  base_due_day: int = Field(ge=1, le=31)
  sanwi_nosul_days: List[int] = Field(default_factory=list, max_length=5)
  color: Optional[str] = None

  @field_validator("sanwi_nosul_days", mode="before")
  @classmethod
  def _days_or_empty(cls, value):
    return value or []


class QuotaSnapshot(BaseModel):
  """월별 작업량 스냅샷 (생성 1회 동안 불변)"""
  model_config = ConfigDict(extra="ignore", from_attributes=True, frozen=True)

  sanwi_nosul: int = Field(default=0, ge=0)
  brand: int = Field(default=0, ge=0)
  trend: int = Field(default=0, ge=0)
  eonron_bodo: int = Field(default=0, ge=0)
  jisikin: int = Field(default=0, ge=0)
  forum_post: int = Field(default=0, ge=0)
  deadline_pull_days: int = Field(default=0, ge=0)
  brand_order: int = 1
  trend_order: int = 2
  work_start_date: Optional[date] = None
  work_end_date: Optional[date] = None

  @model_validator(mode="after")
  def _check_work_period(self) -> "QuotaSnapshot":
    if (self.work_start_date is None) != (self.work_end_date is None):
      raise ValueError("work period needs both start and end dates")
    if self.work_start_date and self.work_end_date < self.work_start_date:
      raise ValueError("work period ends before it starts")
    return self

  @property
  def has_work_period(self) -> bool:
    return self.work_start_date is not None and self.work_end_date is not None


# ---------------------------------------------------------------------------
#  Transient scheduling values
# ---------------------------------------------------------------------------

class TaskInstance(BaseModel):
  """배치 전 작업 단위"""
  model_config = ConfigDict(frozen=True)

  type: TaskType
  label: str
  duration: float
  hospital_id: int
  hospital_name: str

  @property
  def is_main(self) -> bool:
    return self.type in MAIN_TASK_TYPES


class PlacedTask(BaseModel):
  """특정 날짜에 배치된 작업"""
  hospital_id: int
  hospital_name: str
  type: TaskType
  label: str
  duration: float
  start_time: str = ""
  end_time: str = ""
  is_report: bool = False


class CapacityAdjustment(BaseModel):
  """하루 가용 시간 변경 이력 (조기출근 등)"""
  model_config = ConfigDict(frozen=True)

  kind: Literal["early_start"] = "early_start"
  hours: float
  label: str


class ScheduleError(BaseModel):
  """사용자에게 보여줄 스케줄 생성 실패 정보"""
  hospital_name: str
  shortage_hours: float = 0
  tasks: List[str] = Field(default_factory=list)
  message: str


# ---------------------------------------------------------------------------
#  Writer contract
# ---------------------------------------------------------------------------

class ScheduleRowData(BaseModel):
  """저장할 스케줄 한 줄 (sequence = 당일 목록 내 위치)"""
  model_config = ConfigDict(from_attributes=True)

  hospital_id: int
  year: int
  month: int
  task_date: date
  task_type: TaskType
  task_name: str
  start_time: str
  end_time: str
  duration_hours: float
  is_report: bool = False
  sequence: int
