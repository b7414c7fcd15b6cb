from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Iterable, List, Optional, Union
import calendar

from pydantic import BaseModel

from .calendar_utils import (
    WorkdayNotFound,
    enumerate_workdays,
    format_date,
    roll_back_to_workday,
    workdays_between,
)
from .holidays import HolidayCalendar
from .schemas import QuotaSnapshot, ScheduleError
from .utils import _log_debug


class DeadlineResolution(BaseModel):
  due_date: date
  content_deadline: Optional[date] = None
  eligible_days: List[date]
  from_work_period: bool = False


def resolve_due_date(year: int,
                     month: int,
                     base_due_day: int,
                     pull_days: int,
                     leave_dates: Optional[Iterable[Any]] = None,
                     holidays: Optional[HolidayCalendar] = None) -> date:
  """마감일 계산 (당김 적용 후 주말/공휴일/연차면 그 전 근무일로 이동)"""
  adjusted_day = base_due_day - pull_days
  if adjusted_day < 1:
    raise WorkdayNotFound(
        f"마감일({base_due_day}일)에서 {pull_days}일을 당기면 {month}월을 벗어납니다")
  last_day = calendar.monthrange(year, month)[1]
  candidate = date(year, month, min(adjusted_day, last_day))
  return roll_back_to_workday(candidate, leave_dates, holidays,
                              floor=date(year, month, 1))


def content_deadline(due_date: date,
                     leave_dates: Optional[Iterable[Any]] = None,
                     holidays: Optional[HolidayCalendar] = None) -> Optional[date]:
  """콘텐츠 완료 기한 (마감일 하루 전 근무일). 월 첫 근무일이 마감이면 None."""
  try:
    return roll_back_to_workday(due_date - timedelta(days=1), leave_dates, holidays,
                                floor=due_date.replace(day=1))
  except WorkdayNotFound:
    return None


def resolve_deadline(year: int,
                     month: int,
                     hospital_name: str,
                     base_due_day: int,
                     quota: QuotaSnapshot,
                     leave_dates: Optional[Iterable[Any]] = None,
                     holidays: Optional[HolidayCalendar] = None
                     ) -> Union[DeadlineResolution, ScheduleError]:
  leave = list(leave_dates or [])

  if quota.has_work_period:
    # 작업 기간을 직접 지정한 경우: 되돌림 없이 종료일이 마감일
    start, end = quota.work_start_date, quota.work_end_date
    due = end
    eligible = workdays_between(start, end, leave, holidays)
    _log_debug(f"[DEADLINE] work period {format_date(start)}~{format_date(end)}, "
               f"{len(eligible)} workday(s)")
    return DeadlineResolution(due_date=due,
                              content_deadline=content_deadline(due, leave, holidays),
                              eligible_days=eligible,
                              from_work_period=True)

  try:
    due = resolve_due_date(year, month, base_due_day, quota.deadline_pull_days,
                           leave, holidays)
  except WorkdayNotFound as exc:
    return ScheduleError(hospital_name=hospital_name,
                         shortage_hours=0,
                         tasks=[],
                         message=str(exc))

  eligible = [d for d in enumerate_workdays(year, month, leave, holidays) if d <= due]
  _log_debug(f"[DEADLINE] {hospital_name}: due {format_date(due)}, "
             f"{len(eligible)} workday(s)")
  return DeadlineResolution(due_date=due,
                            content_deadline=content_deadline(due, leave, holidays),
                            eligible_days=eligible)
