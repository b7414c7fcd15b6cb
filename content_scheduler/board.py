"""
Scheduling board: 생성 1회 동안 각 단계가 순서대로 수정하는 일별 상태
- 고정일 상위노출 → 메인 → 기타 → 조기출근 복구 → 보고서
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field

from .calendar_utils import clock_string, daily_capacity_hours
from .calendar_utils import opening_hour as base_opening_hour
from .config import CLIENT_DAILY_CAP_HOURS, MAIN_TASKS_PER_DAY
from .schemas import CapacityAdjustment, PlacedTask, TaskInstance


class DaySchedule(BaseModel):
  date: date
  capacity: float
  existing_hours: float = 0.0  # 다른 병원이 이미 사용 중인 시간
  reserved_hours: float = 0.0  # 보고서 자리
  tasks: List[PlacedTask] = Field(default_factory=list)
  adjustments: List[CapacityAdjustment] = Field(default_factory=list)

  @property
  def adjustment_hours(self) -> float:
    return sum(a.hours for a in self.adjustments)

  @property
  def used_hours(self) -> float:
    return sum(t.duration for t in self.tasks)

  @property
  def opening_hour(self) -> float:
    return base_opening_hour(self.date) - self.adjustment_hours

  @property
  def available_hours(self) -> float:
    return (self.capacity + self.adjustment_hours - self.existing_hours
            - self.used_hours - self.reserved_hours)

  @property
  def main_count(self) -> int:
    return sum(1 for t in self.tasks if t.type in ("brand", "trend"))

  def client_hours(self) -> float:
    return self.used_hours + self.reserved_hours

  def fits(self,
           task: TaskInstance,
           client_cap: float = CLIENT_DAILY_CAP_HOURS,
           main_cap: int = MAIN_TASKS_PER_DAY) -> bool:
    if task.is_main and self.main_count >= main_cap:
      return False
    if self.client_hours() + task.duration > client_cap:
      return False
    return task.duration <= self.available_hours

  def place(self, task: TaskInstance, is_report: bool = False) -> PlacedTask:
    start = self.opening_hour + self.existing_hours + self.used_hours
    placed = PlacedTask(hospital_id=task.hospital_id,
                        hospital_name=task.hospital_name,
                        type=task.type,
                        label=task.label,
                        duration=task.duration,
                        start_time=clock_string(start),
                        end_time=clock_string(start + task.duration),
                        is_report=is_report)
    self.tasks.append(placed)
    return placed

  def add_adjustment(self, adjustment: CapacityAdjustment) -> None:
    self.adjustments.append(adjustment)
    self._relayout()

  def _relayout(self) -> None:
    cursor = self.opening_hour + self.existing_hours
    for task in self.tasks:
      task.start_time = clock_string(cursor)
      task.end_time = clock_string(cursor + task.duration)
      cursor += task.duration

  def timeline(self, hospital_id: int, hospital_name: str) -> List[PlacedTask]:
    """조기출근 표시를 맨 앞에 둔 당일 작업 목록"""
    if not self.adjustments:
      return list(self.tasks)
    markers: List[PlacedTask] = []
    cursor = self.opening_hour
    for adjustment in self.adjustments:
      markers.append(PlacedTask(hospital_id=hospital_id,
                                hospital_name=hospital_name,
                                type=adjustment.kind,
                                label=adjustment.label,
                                duration=adjustment.hours,
                                start_time=clock_string(cursor),
                                end_time=clock_string(cursor + adjustment.hours)))
      cursor += adjustment.hours
    return markers + list(self.tasks)


class SchedulingBoard(BaseModel):
  hospital_id: int
  hospital_name: str
  due_date: date
  placement_cutoff: date
  days: List[DaySchedule]

  @classmethod
  def create(cls,
             hospital_id: int,
             hospital_name: str,
             eligible_days: Iterable[date],
             due_date: date,
             existing_hours: Optional[Mapping[date, float]] = None,
             placement_cutoff: Optional[date] = None) -> "SchedulingBoard":
    existing = existing_hours or {}
    days = [
        DaySchedule(date=d,
                    capacity=daily_capacity_hours(d),
                    existing_hours=float(existing.get(d, 0.0)))
        for d in eligible_days
    ]
    return cls(hospital_id=hospital_id,
               hospital_name=hospital_name,
               due_date=due_date,
               placement_cutoff=placement_cutoff or due_date,
               days=days)

  def day_for(self, target: date) -> Optional[DaySchedule]:
    for day in self.days:
      if day.date == target:
        return day
    return None

  def placement_days(self) -> List[DaySchedule]:
    return [d for d in self.days if d.date <= self.placement_cutoff]

  def report_day(self) -> Optional[DaySchedule]:
    return self.day_for(self.due_date)

  def total_available_hours(self) -> float:
    days: Dict[date, DaySchedule] = {d.date: d for d in self.placement_days()}
    report_day = self.report_day()
    if report_day is not None:
      days[report_day.date] = report_day
    return sum(max(d.capacity - d.existing_hours, 0.0) for d in days.values())
