"""
월간 업무 스케줄러: 병원별 콘텐츠 작업을 근무일에 배치
"""

from .scheduler import HospitalNotFound, build_schedule_rows, generate_schedule, run_generation
from .schemas import HospitalRecord, QuotaSnapshot, ScheduleError

__all__ = [
    "HospitalNotFound",
    "HospitalRecord",
    "QuotaSnapshot",
    "ScheduleError",
    "build_schedule_rows",
    "generate_schedule",
    "run_generation",
]
