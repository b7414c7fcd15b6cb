from __future__ import annotations

from datetime import date

import pytest

from content_scheduler import state
from content_scheduler.scheduler import QuotaNotFound, run_generation
from content_scheduler.schemas import ScheduleError, ScheduleRowData


def _row(hospital_id, task_date, task_type="brand", duration=3.5, sequence=0):
    return ScheduleRowData(hospital_id=hospital_id, year=task_date.year,
                           month=task_date.month, task_date=task_date,
                           task_type=task_type, task_name=task_type,
                           start_time="09:00", end_time="12:30",
                           duration_hours=duration, sequence=sequence)


def test_save_schedule_replaces_previous_rows(session):
    hospital = state.create_hospital(session, name="서울치과", base_due_day=20)
    state.save_schedule(session, hospital.id, 2026, 4, [_row(hospital.id, date(2026, 4, 1))])
    state.save_schedule(session, hospital.id, 2026, 4, [
        _row(hospital.id, date(2026, 4, 2)),
        _row(hospital.id, date(2026, 4, 3), sequence=1),
    ])
    rows = state.list_schedules(session, 2026, 4)
    assert [r["task_date"] for r in rows] == [date(2026, 4, 2), date(2026, 4, 3)]
    assert rows[0]["hospital_name"] == "서울치과"


def test_existing_hours_skip_own_rows_and_early_start(session):
    mine = state.create_hospital(session, name="서울치과", base_due_day=20)
    other = state.create_hospital(session, name="부산한방병원", base_due_day=20)
    day = date(2026, 4, 1)
    state.save_schedule(session, mine.id, 2026, 4, [_row(mine.id, day)])
    state.save_schedule(session, other.id, 2026, 4, [
        _row(other.id, day, "early_start", 1.5, 0),
        _row(other.id, day, "trend", 1.5, 1),
        _row(other.id, day, "jisikin", 0.5, 2),
    ])
    hours = state.load_existing_hours(session, date(2026, 4, 1), date(2026, 4, 30),
                                      exclude_hospital_id=mine.id)
    assert hours == {day: 2.0}


def test_delete_hospital_removes_its_data(session):
    hospital = state.create_hospital(session, name="서울치과", base_due_day=20)
    state.upsert_monthly_task(session, hospital.id, 2026, 4, brand=1)
    state.save_schedule(session, hospital.id, 2026, 4, [_row(hospital.id, date(2026, 4, 1))])
    assert state.delete_hospital(session, hospital.id)
    assert state.list_schedules(session, 2026, 4) == []
    assert state.get_monthly_task(session, hospital.id, 2026, 4) is None
    assert not state.delete_hospital(session, hospital.id)


def test_run_generation_saves_rows(session, holidays):
    hospital = state.create_hospital(session, name="서울치과", base_due_day=10)
    state.upsert_monthly_task(session, hospital.id, 2026, 4, brand=1, trend=1, jisikin=1)
    state.add_vacation(session, date(2026, 4, 1), "연차")

    rows = run_generation(session, hospital.id, 2026, 4, holidays=holidays)
    assert not isinstance(rows, ScheduleError)
    saved = state.list_schedules(session, 2026, 4)
    assert len(saved) == len(rows)
    assert all(r["task_date"] != date(2026, 4, 1) for r in saved)
    assert saved[0]["task_date"] == date(2026, 4, 2)
    assert [r["task_type"] for r in saved if r["is_report"]] == ["report"]


def test_failed_generation_keeps_previous_schedule(session, holidays):
    hospital = state.create_hospital(session, name="서울치과", base_due_day=3)
    state.upsert_monthly_task(session, hospital.id, 2026, 4, brand=1)
    assert not isinstance(run_generation(session, hospital.id, 2026, 4, holidays=holidays),
                          ScheduleError)
    before = state.list_schedules(session, 2026, 4)

    state.upsert_monthly_task(session, hospital.id, 2026, 4, brand=10)
    result = run_generation(session, hospital.id, 2026, 4, holidays=holidays)
    assert isinstance(result, ScheduleError)
    assert state.list_schedules(session, 2026, 4) == before


def test_run_generation_without_quota(session, holidays):
    hospital = state.create_hospital(session, name="서울치과", base_due_day=3)
    with pytest.raises(QuotaNotFound):
        run_generation(session, hospital.id, 2026, 4, holidays=holidays)
