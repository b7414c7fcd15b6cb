from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from typing import List, Optional


class Hospital(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    base_due_day: int
    sanwi_nosul_days: List[int] = []
    color: Optional[str] = None


class HospitalCreate(BaseModel):
    name: str
    base_due_day: int
    sanwi_nosul_days: Optional[List[int]] = None
    color: Optional[str] = None


class HospitalUpdate(BaseModel):
    name: Optional[str] = None
    base_due_day: Optional[int] = None
    sanwi_nosul_days: Optional[List[int]] = None
    color: Optional[str] = None


class MonthlyTaskUpsert(BaseModel):
    hospital_id: int
    year: int
    month: int
    sanwi_nosul: int = 0
    brand: int = 0
    trend: int = 0
    eonron_bodo: int = 1
    jisikin: int = 1
    forum_post: int = 0
    deadline_pull_days: int = 0
    brand_order: int = 1
    trend_order: int = 2
    work_start_date: Optional[str] = None  # "YYYY-MM-DD"
    work_end_date: Optional[str] = None


class VacationCreate(BaseModel):
    vacation_date: str
    description: Optional[str] = None


class Vacation(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    vacation_date: str
    description: Optional[str] = None


class ScheduleGenerateRequest(BaseModel):
    hospital_id: int
    year: int
    month: int


class ScheduleRowUpdate(BaseModel):
    task_date: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    sequence: Optional[int] = None
    is_completed: Optional[bool] = None


class DeleteResult(BaseModel):
    ok: bool
    count: int
