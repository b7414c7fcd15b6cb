from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, NamedTuple, Optional, Set
import calendar

from .config import (
    SEOUL,
    ISO_DATE_RE,
    DAY_OPEN_HOUR,
    FIRST_WEEKDAY_OPEN_HOUR,
    DAY_CAPACITY_HOURS,
    FIRST_WEEKDAY_CAPACITY_HOURS,
    MAX_ROLLBACK_DAYS,
)
from .holidays import HolidayCalendar, get_default_holidays


class WorkdayNotFound(ValueError):
    """되돌림 범위 안에 근무일이 없음"""


class ClockTime(NamedTuple):
    hour: int
    minute: int


def to_kst_date(value: Any) -> date:
    """date/datetime/'YYYY-MM-DD'를 한국 시간 기준 순수 날짜로 변환"""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(SEOUL).date()
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        if ISO_DATE_RE.match(raw[:10]):
            return datetime.strptime(raw[:10], "%Y-%m-%d").date()
    raise ValueError(f"not a date: {value!r}")


def format_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def format_time(hour: int, minute: int = 0) -> str:
    return f"{hour:02d}:{minute:02d}"


def _normalize_leave(leave_dates: Optional[Iterable[Any]]) -> Set[date]:
    if not leave_dates:
        return set()
    return {to_kst_date(v) for v in leave_dates}


def is_non_workday(day: date,
                   leave_dates: Optional[Iterable[Any]] = None,
                   holidays: Optional[HolidayCalendar] = None) -> bool:
    """주말, 공휴일, 연차이면 True"""
    holidays = holidays or get_default_holidays()
    if day.weekday() >= 5:
        return True
    if holidays.is_holiday(day):
        return True
    return day in _normalize_leave(leave_dates)


def workdays_between(start: date,
                     end: date,
                     leave_dates: Optional[Iterable[Any]] = None,
                     holidays: Optional[HolidayCalendar] = None) -> List[date]:
    leave = _normalize_leave(leave_dates)
    out: List[date] = []
    current = start
    while current <= end:
        if not is_non_workday(current, leave, holidays):
            out.append(current)
        current += timedelta(days=1)
    return out


def enumerate_workdays(year: int,
                       month: int,
                       leave_dates: Optional[Iterable[Any]] = None,
                       holidays: Optional[HolidayCalendar] = None) -> List[date]:
    """특정 월의 근무일 목록 (오름차순)"""
    last_day = calendar.monthrange(year, month)[1]
    return workdays_between(date(year, month, 1), date(year, month, last_day),
                            leave_dates, holidays)


def is_first_weekday(day: date) -> bool:
    return day.weekday() == 0


def daily_capacity_hours(day: date) -> float:
    """근무 가능 시간 (월요일 7.5시간, 나머지 8.5시간)"""
    return FIRST_WEEKDAY_CAPACITY_HOURS if is_first_weekday(day) else DAY_CAPACITY_HOURS


def opening_hour(day: date) -> float:
    return float(FIRST_WEEKDAY_OPEN_HOUR if is_first_weekday(day) else DAY_OPEN_HOUR)


def roll_back_to_workday(day: date,
                         leave_dates: Optional[Iterable[Any]] = None,
                         holidays: Optional[HolidayCalendar] = None,
                         floor: Optional[date] = None) -> date:
    """주말/공휴일/연차이면 그 전 근무일로 이동. floor보다 앞으로는 가지 않는다."""
    leave = _normalize_leave(leave_dates)
    current = day
    steps = 0
    while is_non_workday(current, leave, holidays):
        current -= timedelta(days=1)
        steps += 1
        if (floor is not None and current < floor) or steps > MAX_ROLLBACK_DAYS:
            raise WorkdayNotFound(
                f"{format_date(day)} 이전에 가능한 근무일이 없습니다")
    return current


def add_hours(start_hour: float, duration_hours: float) -> ClockTime:
    """시간 더하기 (9시 + 3.5시간 = 12시 30분)"""
    total_minutes = round(start_hour * 60 + duration_hours * 60)
    return ClockTime(total_minutes // 60, total_minutes % 60)


def clock_string(hour_fraction: float) -> str:
    hour, minute = add_hours(hour_fraction, 0)
    return format_time(hour, minute)
