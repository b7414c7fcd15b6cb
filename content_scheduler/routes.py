from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import state
from .calendar_utils import format_date
from .config import API_BASE
from .db import Schedule, get_session
from .holidays import get_default_holidays
from .models import (
    Hospital,
    HospitalCreate,
    HospitalUpdate,
    MonthlyTaskUpsert,
    VacationCreate,
    Vacation,
    ScheduleGenerateRequest,
    ScheduleRowUpdate,
    DeleteResult,
)
from .scheduler import HospitalNotFound, QuotaNotFound, run_generation
from .schemas import ScheduleError
from .utils import (
    _log_debug,
    _clean_optional_str,
    _normalize_days_of_month,
    _normalize_color,
    _coerce_date,
    _coerce_hhmm,
    _validate_year_month,
)

router = APIRouter(prefix=API_BASE)
logger = logging.getLogger(__name__)


def _hospital_payload(hospital: Any) -> Dict[str, Any]:
  return Hospital.model_validate(hospital).model_dump()


def _validate_due_day(value: Any) -> int:
  try:
    day = int(value)
  except (TypeError, ValueError):
    raise HTTPException(status_code=400, detail="기본 마감일은 숫자여야 합니다.")
  if not 1 <= day <= 31:
    raise HTTPException(status_code=400, detail="기본 마감일은 1~31 사이여야 합니다.")
  return day


def _minutes(hhmm: str) -> int:
  hour, minute = hhmm.split(":")
  return int(hour) * 60 + int(minute)


def _schedule_payload(row: Dict[str, Any]) -> Dict[str, Any]:
  out = dict(row)
  out["task_date"] = format_date(row["task_date"])
  out.pop("created_at", None)
  return out


# -------------------------
# 병원 관리
# -------------------------
@router.get("/hospitals")
def list_hospitals(session: Session = Depends(get_session)):
  return [_hospital_payload(h) for h in state.list_hospitals(session)]


@router.post("/hospitals")
def create_hospital(payload: HospitalCreate, session: Session = Depends(get_session)):
  name = _clean_optional_str(payload.name)
  if not name:
    raise HTTPException(status_code=400, detail="병원명과 기본 마감일을 입력해주세요.")
  try:
    hospital = state.create_hospital(
        session,
        name=name,
        base_due_day=_validate_due_day(payload.base_due_day),
        sanwi_nosul_days=_normalize_days_of_month(payload.sanwi_nosul_days),
        color=_normalize_color(payload.color))
  except IntegrityError:
    session.rollback()
    raise HTTPException(status_code=400,
                        detail="병원 추가 실패 (중복된 이름일 수 있습니다)")
  return _hospital_payload(hospital)


@router.put("/hospitals/{hospital_id}")
def update_hospital(hospital_id: int, payload: HospitalUpdate,
                    session: Session = Depends(get_session)):
  hospital = state.get_hospital(session, hospital_id)
  if hospital is None:
    raise HTTPException(status_code=404, detail="병원을 찾을 수 없습니다.")
  fields: Dict[str, Any] = {}
  if payload.name is not None:
    name = _clean_optional_str(payload.name)
    if not name:
      raise HTTPException(status_code=400, detail="병원명을 입력해주세요.")
    fields["name"] = name
  if payload.base_due_day is not None:
    fields["base_due_day"] = _validate_due_day(payload.base_due_day)
  if payload.sanwi_nosul_days is not None:
    fields["sanwi_nosul_days"] = _normalize_days_of_month(payload.sanwi_nosul_days)
  if payload.color is not None:
    fields["color"] = _normalize_color(payload.color)
  try:
    hospital = state.update_hospital(session, hospital, **fields)
  except IntegrityError:
    session.rollback()
    raise HTTPException(status_code=400, detail="병원 수정 실패 (중복된 이름일 수 있습니다)")
  return _hospital_payload(hospital)


@router.delete("/hospitals/{hospital_id}")
def delete_hospital(hospital_id: int, session: Session = Depends(get_session)):
  if not state.delete_hospital(session, hospital_id):
    raise HTTPException(status_code=404, detail="병원을 찾을 수 없습니다.")
  return {"success": True}


# -------------------------
# 월별 작업량
# -------------------------
@router.get("/monthly-tasks/{year}/{month}")
def list_monthly_tasks(year: int, month: int, session: Session = Depends(get_session)):
  _validate_year_month(year, month)
  items = state.list_monthly_tasks(session, year, month)
  for item in items:
    for key in ("work_start_date", "work_end_date"):
      if item.get(key) is not None:
        item[key] = format_date(item[key])
    item.pop("created_at", None)
  return items


@router.post("/monthly-tasks")
def upsert_monthly_task(payload: MonthlyTaskUpsert, session: Session = Depends(get_session)):
  _validate_year_month(payload.year, payload.month)
  if state.get_hospital(session, payload.hospital_id) is None:
    raise HTTPException(status_code=404, detail="병원을 찾을 수 없습니다.")

  counts = {
      "sanwi_nosul": payload.sanwi_nosul,
      "brand": payload.brand,
      "trend": payload.trend,
      "eonron_bodo": payload.eonron_bodo,
      "jisikin": payload.jisikin,
      "forum_post": payload.forum_post,
      "deadline_pull_days": payload.deadline_pull_days,
  }
  if any(v < 0 for v in counts.values()):
    raise HTTPException(status_code=400, detail="작업 개수와 당김 일수는 0 이상이어야 합니다.")

  work_start = work_end = None
  if payload.work_start_date or payload.work_end_date:
    if not (payload.work_start_date and payload.work_end_date):
      raise HTTPException(status_code=400, detail="작업 기간의 시작/종료 날짜를 모두 입력해주세요.")
    work_start = _coerce_date(payload.work_start_date, "작업 시작일")
    work_end = _coerce_date(payload.work_end_date, "작업 종료일")
    if work_end < work_start:
      raise HTTPException(status_code=400, detail="작업 종료일이 시작일보다 빠릅니다.")

  state.upsert_monthly_task(session, payload.hospital_id, payload.year, payload.month,
                            brand_order=payload.brand_order,
                            trend_order=payload.trend_order,
                            work_start_date=work_start,
                            work_end_date=work_end,
                            **counts)
  return {"success": True}


# -------------------------
# 연차/휴가
# -------------------------
def _vacation_payload(vacation: Any) -> Dict[str, Any]:
  return Vacation(id=vacation.id,
                  vacation_date=format_date(vacation.vacation_date),
                  description=vacation.description).model_dump()


@router.get("/vacations/{year}/{month}")
def list_vacations(year: int, month: int, session: Session = Depends(get_session)):
  _validate_year_month(year, month)
  start, end = state.month_bounds(year, month)
  return [_vacation_payload(v) for v in state.list_vacations(session, start, end)]


@router.post("/vacations")
def create_vacation(payload: VacationCreate, session: Session = Depends(get_session)):
  vacation_date = _coerce_date(payload.vacation_date, "휴가 날짜")
  try:
    vacation = state.add_vacation(session, vacation_date,
                                  _clean_optional_str(payload.description))
  except IntegrityError:
    session.rollback()
    raise HTTPException(status_code=400, detail="이미 등록된 휴가 날짜입니다.")
  return _vacation_payload(vacation)


@router.delete("/vacations/{vacation_id}")
def delete_vacation(vacation_id: int, session: Session = Depends(get_session)):
  if not state.delete_vacation(session, vacation_id):
    raise HTTPException(status_code=404, detail="휴가를 찾을 수 없습니다.")
  return {"success": True}


@router.get("/holidays/{year}")
def list_holidays(year: int):
  return sorted(format_date(d) for d in get_default_holidays().for_year(year))


# -------------------------
# 스케줄
# -------------------------
@router.post("/schedules/generate")
def generate_schedule(payload: ScheduleGenerateRequest,
                      session: Session = Depends(get_session)):
  _validate_year_month(payload.year, payload.month)
  try:
    result = run_generation(session, payload.hospital_id, payload.year, payload.month)
  except HospitalNotFound as exc:
    raise HTTPException(status_code=404, detail=str(exc))
  except QuotaNotFound as exc:
    raise HTTPException(status_code=400, detail=str(exc))
  except Exception:
    logger.exception("Schedule generation error")
    raise

  if isinstance(result, ScheduleError):
    _log_debug(f"[GENERATE] rejected: {result.message}")
    return JSONResponse(status_code=400, content={"error": result.model_dump()})

  schedules: List[Dict[str, Any]] = []
  for row in result:
    item = row.model_dump()
    item["task_date"] = format_date(row.task_date)
    schedules.append(item)
  return {"success": True, "schedules": schedules}


@router.get("/schedules/{year}/{month}")
def list_schedules(year: int, month: int, session: Session = Depends(get_session)):
  _validate_year_month(year, month)
  return [_schedule_payload(row) for row in state.list_schedules(session, year, month)]


@router.patch("/schedules/{schedule_id}")
def update_schedule(schedule_id: int, payload: ScheduleRowUpdate,
                    session: Session = Depends(get_session)):
  """수동 이동(드래그앤드롭)과 완료 표시"""
  row = state.get_schedule_row(session, schedule_id)
  if row is None:
    raise HTTPException(status_code=404, detail="스케줄을 찾을 수 없습니다.")
  fields: Dict[str, Any] = {}
  if payload.task_date is not None:
    task_date = _coerce_date(payload.task_date, "작업 날짜")
    # 다른 달로 옮기면 조회/재생성 키(year, month)도 따라간다
    fields.update(task_date=task_date, year=task_date.year, month=task_date.month)
  if payload.start_time is not None:
    fields["start_time"] = _coerce_hhmm(payload.start_time, "시작 시각")
  if payload.end_time is not None:
    fields["end_time"] = _coerce_hhmm(payload.end_time, "종료 시각")
  start = fields.get("start_time", row.start_time)
  end = fields.get("end_time", row.end_time)
  if end < start:
    raise HTTPException(status_code=400, detail="종료 시각이 시작 시각보다 빠릅니다.")
  if "start_time" in fields or "end_time" in fields:
    fields["duration_hours"] = (_minutes(end) - _minutes(start)) / 60
  if payload.sequence is not None:
    if payload.sequence < 0:
      raise HTTPException(status_code=400, detail="순서는 0 이상이어야 합니다.")
    fields["sequence"] = payload.sequence
  if payload.is_completed is not None:
    fields["is_completed"] = payload.is_completed
  row = state.update_schedule_row(session, row, **fields)
  return {c.name: (format_date(getattr(row, c.name)) if c.name == "task_date"
                   else getattr(row, c.name))
          for c in Schedule.__table__.columns if c.name != "created_at"}


@router.delete("/schedules/{year}/{month}/{hospital_id}", response_model=DeleteResult)
def delete_schedule(year: int, month: int, hospital_id: int,
                    session: Session = Depends(get_session)):
  _validate_year_month(year, month)
  count = state.delete_schedule(session, hospital_id, year, month)
  return DeleteResult(ok=True, count=count)
