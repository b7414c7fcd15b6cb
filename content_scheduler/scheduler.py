"""
스케줄 생성 메인 로직
- 마감일 계산 → 작업 목록 → 사전 점검 → 배치 → 조기출근 복구 → 보고서
- 순수 계산부(generate_schedule)와 DB 입출력(run_generation)을 나눈다
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Iterable, List, Mapping, Optional, Union

from sqlalchemy.orm import Session

from . import state
from .board import DaySchedule, SchedulingBoard
from .calendar_utils import format_date
from .config import PLACE_THROUGH_DUE_DATE
from .deadline import resolve_deadline
from .holidays import HolidayCalendar, get_default_holidays
from .packer import pack, precheck_capacity
from .recovery import recover_overflow
from .report import finalize_report, reserve_report
from .schemas import HospitalRecord, QuotaSnapshot, ScheduleError, ScheduleRowData
from .task_list import build_task_list
from .utils import _log_debug


class HospitalNotFound(LookupError):
    """병원 정보 없이는 스케줄을 만들 수 없다 (ScheduleError와 별개)"""


class QuotaNotFound(LookupError):
    pass


def generate_schedule(hospital: Optional[HospitalRecord],
                      year: int,
                      month: int,
                      quota: QuotaSnapshot,
                      leave_dates: Optional[Iterable[Any]] = None,
                      existing_hours: Optional[Mapping[date, float]] = None,
                      holidays: Optional[HolidayCalendar] = None,
                      place_through_due_date: bool = PLACE_THROUGH_DUE_DATE
                      ) -> Union[List[DaySchedule], ScheduleError]:
    if hospital is None:
        raise HospitalNotFound("병원을 찾을 수 없습니다")

    holidays = holidays or get_default_holidays()
    leave = list(leave_dates or [])

    resolution = resolve_deadline(year, month, hospital.name, hospital.base_due_day,
                                  quota, leave, holidays)
    if isinstance(resolution, ScheduleError):
        return resolution

    if place_through_due_date:
        cutoff = resolution.due_date
    else:
        # 콘텐츠 완료 기한이 없으면 보고서만 들어갈 수 있다
        cutoff = resolution.content_deadline or resolution.due_date - timedelta(days=1)

    board = SchedulingBoard.create(hospital_id=hospital.id,
                                   hospital_name=hospital.name,
                                   eligible_days=resolution.eligible_days,
                                   due_date=resolution.due_date,
                                   existing_hours=existing_hours,
                                   placement_cutoff=cutoff)

    error = reserve_report(board)
    if error is not None:
        return error

    task_list = build_task_list(hospital, quota)
    error = precheck_capacity(board, task_list)
    if error is not None:
        _log_debug(f"[SCHEDULER] {hospital.name}: {error.message}")
        return error

    main_left, other_left = pack(board, task_list, hospital.sanwi_nosul_days)
    error = recover_overflow(board, main_left + other_left)
    if error is not None:
        _log_debug(f"[SCHEDULER] {hospital.name}: {error.message}")
        return error

    finalize_report(board)
    _log_debug(f"[SCHEDULER] {hospital.name}: {year}-{month:02d} "
               f"due {format_date(board.due_date)}, "
               f"{sum(len(d.tasks) for d in board.days)} task(s)")
    return board.days


def build_schedule_rows(days: Iterable[DaySchedule],
                        hospital: HospitalRecord,
                        year: int,
                        month: int) -> List[ScheduleRowData]:
    rows: List[ScheduleRowData] = []
    for day in days:
        for sequence, task in enumerate(day.timeline(hospital.id, hospital.name)):
            rows.append(ScheduleRowData(hospital_id=hospital.id,
                                        year=year,
                                        month=month,
                                        task_date=day.date,
                                        task_type=task.type,
                                        task_name=task.label,
                                        start_time=task.start_time,
                                        end_time=task.end_time,
                                        duration_hours=task.duration,
                                        is_report=task.is_report,
                                        sequence=sequence))
    return rows


def _generation_window(year: int, month: int, quota: QuotaSnapshot) -> tuple[date, date]:
    start, end = state.month_bounds(year, month)
    if quota.has_work_period:
        start = min(start, quota.work_start_date)
        end = max(end, quota.work_end_date)
    return (start, end)


def run_generation(session: Session,
                   hospital_id: int,
                   year: int,
                   month: int,
                   holidays: Optional[HolidayCalendar] = None
                   ) -> Union[List[ScheduleRowData], ScheduleError]:
    """DB에서 입력을 읽어 생성하고, 성공했을 때만 기존 스케줄을 교체한다."""
    hospital_row = state.get_hospital(session, hospital_id)
    if hospital_row is None:
        raise HospitalNotFound("병원을 찾을 수 없습니다")
    hospital = HospitalRecord.model_validate(hospital_row)

    quota_row = state.get_monthly_task(session, hospital_id, year, month)
    if quota_row is None:
        raise QuotaNotFound("해당 월의 작업량 데이터가 없습니다")
    quota = QuotaSnapshot.model_validate(quota_row)

    start, end = _generation_window(year, month, quota)
    leave = state.list_vacation_dates(session, start, end)
    existing = state.load_existing_hours(session, start, end,
                                         exclude_hospital_id=hospital_id)

    result = generate_schedule(hospital, year, month, quota, leave, existing, holidays)
    if isinstance(result, ScheduleError):
        return result

    rows = build_schedule_rows(result, hospital, year, month)
    state.save_schedule(session, hospital_id, year, month, rows)
    return rows
