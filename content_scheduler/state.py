from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, List, Optional
import calendar

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from .db import Hospital, MonthlyTask, Schedule, Vacation
from .schemas import ScheduleRowData
from .utils import _log_debug

# NOTE: DB 읽기/쓰기는 이 모듈 함수로만 처리한다.


def month_bounds(year: int, month: int) -> tuple[date, date]:
    return (date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1]))


# -------------------------
# 병원
# -------------------------
def list_hospitals(session: Session) -> List[Hospital]:
    return list(session.scalars(select(Hospital).order_by(Hospital.name)))


def get_hospital(session: Session, hospital_id: int) -> Optional[Hospital]:
    return session.get(Hospital, hospital_id)


def create_hospital(session: Session, **fields: Any) -> Hospital:
    hospital = Hospital(**fields)
    session.add(hospital)
    session.commit()
    session.refresh(hospital)
    return hospital


def update_hospital(session: Session, hospital: Hospital, **fields: Any) -> Hospital:
    for key, value in fields.items():
        setattr(hospital, key, value)
    session.commit()
    session.refresh(hospital)
    return hospital


def delete_hospital(session: Session, hospital_id: int) -> bool:
    hospital = session.get(Hospital, hospital_id)
    if hospital is None:
        return False
    session.execute(delete(Schedule).where(Schedule.hospital_id == hospital_id))
    session.execute(delete(MonthlyTask).where(MonthlyTask.hospital_id == hospital_id))
    session.delete(hospital)
    session.commit()
    return True


# -------------------------
# 월별 작업량
# -------------------------
def get_monthly_task(session: Session, hospital_id: int, year: int,
                     month: int) -> Optional[MonthlyTask]:
    return session.scalar(
        select(MonthlyTask).where(MonthlyTask.hospital_id == hospital_id,
                                  MonthlyTask.year == year,
                                  MonthlyTask.month == month))


def list_monthly_tasks(session: Session, year: int, month: int) -> List[Dict[str, Any]]:
    rows = session.execute(
        select(MonthlyTask, Hospital.name)
        .join(Hospital, MonthlyTask.hospital_id == Hospital.id)
        .where(MonthlyTask.year == year, MonthlyTask.month == month)
        .order_by(Hospital.name))
    out: List[Dict[str, Any]] = []
    for task, hospital_name in rows:
        item = {c.name: getattr(task, c.name) for c in MonthlyTask.__table__.columns}
        item["hospital_name"] = hospital_name
        out.append(item)
    return out


def upsert_monthly_task(session: Session, hospital_id: int, year: int, month: int,
                        **fields: Any) -> MonthlyTask:
    existing = get_monthly_task(session, hospital_id, year, month)
    if existing is None:
        existing = MonthlyTask(hospital_id=hospital_id, year=year, month=month)
        session.add(existing)
    for key, value in fields.items():
        setattr(existing, key, value)
    session.commit()
    session.refresh(existing)
    return existing


# -------------------------
# 연차/휴가
# -------------------------
def list_vacations(session: Session, start: date, end: date) -> List[Vacation]:
    return list(session.scalars(
        select(Vacation)
        .where(Vacation.vacation_date >= start, Vacation.vacation_date <= end)
        .order_by(Vacation.vacation_date)))


def list_vacation_dates(session: Session, start: date, end: date) -> List[date]:
    return [v.vacation_date for v in list_vacations(session, start, end)]


def add_vacation(session: Session, vacation_date: date,
                 description: Optional[str] = None) -> Vacation:
    vacation = Vacation(vacation_date=vacation_date, description=description)
    session.add(vacation)
    session.commit()
    session.refresh(vacation)
    return vacation


def delete_vacation(session: Session, vacation_id: int) -> bool:
    vacation = session.get(Vacation, vacation_id)
    if vacation is None:
        return False
    session.delete(vacation)
    session.commit()
    return True


# -------------------------
# 스케줄
# -------------------------
def load_existing_hours(session: Session, start: date, end: date,
                        exclude_hospital_id: Optional[int] = None) -> Dict[date, float]:
    """
    날짜별로 다른 병원이 이미 잡아 둔 시간 합계.
    스냅샷 읽기라서 같은 달 다른 병원의 동시 생성과는 직렬화되지 않는다.
    """
    stmt = (select(Schedule.task_date, func.sum(Schedule.duration_hours))
            .where(Schedule.task_date >= start, Schedule.task_date <= end,
                   Schedule.task_type != "early_start")
            .group_by(Schedule.task_date))
    if exclude_hospital_id is not None:
        stmt = stmt.where(Schedule.hospital_id != exclude_hospital_id)
    return {task_date: float(total or 0) for task_date, total in session.execute(stmt)}


def save_schedule(session: Session, hospital_id: int, year: int, month: int,
                  rows: Iterable[ScheduleRowData]) -> int:
    """기존 스케줄을 지우고 새 스케줄을 넣는다 (한 트랜잭션)."""
    count = 0
    try:
        session.execute(delete(Schedule).where(Schedule.hospital_id == hospital_id,
                                               Schedule.year == year,
                                               Schedule.month == month))
        for row in rows:
            session.add(Schedule(**row.model_dump()))
            count += 1
        session.commit()
    except Exception:
        session.rollback()
        raise
    _log_debug(f"[SCHEDULE STORE] hospital {hospital_id} {year}-{month:02d}: {count} row(s)")
    return count


def list_schedules(session: Session, year: int, month: int) -> List[Dict[str, Any]]:
    rows = session.execute(
        select(Schedule, Hospital.name, Hospital.base_due_day, Hospital.color,
               MonthlyTask.deadline_pull_days)
        .join(Hospital, Schedule.hospital_id == Hospital.id)
        .outerjoin(MonthlyTask, (MonthlyTask.hospital_id == Schedule.hospital_id)
                   & (MonthlyTask.year == Schedule.year)
                   & (MonthlyTask.month == Schedule.month))
        .where(Schedule.year == year, Schedule.month == month)
        .order_by(Schedule.task_date, Schedule.start_time, Schedule.sequence))
    out: List[Dict[str, Any]] = []
    for schedule, name, base_due_day, color, pull_days in rows:
        item = {c.name: getattr(schedule, c.name) for c in Schedule.__table__.columns}
        item.update({
            "hospital_name": name,
            "base_due_day": base_due_day,
            "color": color,
            "deadline_pull_days": pull_days,
        })
        out.append(item)
    return out


def get_schedule_row(session: Session, schedule_id: int) -> Optional[Schedule]:
    return session.get(Schedule, schedule_id)


def update_schedule_row(session: Session, row: Schedule, **fields: Any) -> Schedule:
    for key, value in fields.items():
        setattr(row, key, value)
    session.commit()
    session.refresh(row)
    return row


def delete_schedule(session: Session, hospital_id: int, year: int, month: int) -> int:
    result = session.execute(delete(Schedule).where(Schedule.hospital_id == hospital_id,
                                                    Schedule.year == year,
                                                    Schedule.month == month))
    session.commit()
    return result.rowcount or 0
