from __future__ import annotations

from datetime import date

from content_scheduler.board import SchedulingBoard
from content_scheduler.recovery import (
    early_start_blocks_needed,
    inject_early_starts,
    recover_overflow,
)
from content_scheduler.task_list import make_instance


def _board(hospital, days, existing=None):
    return SchedulingBoard.create(hospital_id=hospital.id,
                                  hospital_name=hospital.name,
                                  eligible_days=days,
                                  due_date=days[-1],
                                  existing_hours=existing)


def test_blocks_needed_rounds_up(hospital):
    assert early_start_blocks_needed([]) == 0
    assert early_start_blocks_needed([make_instance("brand", hospital)]) == 3
    assert early_start_blocks_needed([make_instance("trend", hospital)]) == 1


def test_early_start_skips_mondays(hospital):
    days = [date(2026, 4, 6), date(2026, 4, 7), date(2026, 4, 8)]
    board = _board(hospital, days)
    injected = inject_early_starts(board, [make_instance("brand", hospital)])
    assert injected == 2
    monday, tuesday, wednesday = board.days
    assert monday.adjustments == []
    assert tuesday.opening_hour == 7.5
    assert tuesday.adjustments[0].label == "조기출근 (브랜드)"
    assert wednesday.available_hours == 10.0


def test_recovery_places_stranded_task(hospital):
    days = [date(2026, 4, 1), date(2026, 4, 2)]
    board = _board(hospital, days, existing={d: 6.0 for d in days})
    brand = make_instance("brand", hospital)
    assert not any(d.fits(brand) for d in board.days)

    assert recover_overflow(board, [brand]) is None
    first = board.days[0]
    assert [t.type for t in first.tasks] == ["brand"]
    assert (first.tasks[0].start_time, first.tasks[0].end_time) == ("13:30", "17:00")
    timeline = first.timeline(hospital.id, hospital.name)
    assert timeline[0].type == "early_start"
    assert (timeline[0].start_time, timeline[0].end_time) == ("07:30", "09:00")


def test_recovery_keeps_main_cap(hospital):
    days = [date(2026, 4, 1)]
    board = _board(hospital, days)
    board.days[0].place(make_instance("brand", hospital))
    error = recover_overflow(board, [make_instance("trend", hospital)])
    assert error is not None
    assert error.tasks == ["트렌드"]
    assert error.shortage_hours == 1.5


def test_retry_revisits_earlier_days_for_each_task(hospital):
    days = [date(2026, 4, 1), date(2026, 4, 2)]
    board = _board(hospital, days)
    for day in board.days:
        day.place(make_instance("brand", hospital))
    pending = [make_instance("trend", hospital), make_instance("jisikin", hospital)]
    error = recover_overflow(board, pending)
    assert error is not None
    assert error.tasks == ["트렌드"]
    assert [t.type for t in board.days[0].tasks] == ["brand", "jisikin"]


def test_early_start_marker_shares_window_with_first_task(hospital):
    board = _board(hospital, [date(2026, 4, 1)])
    board.days[0].place(make_instance("jisikin", hospital))
    inject_early_starts(board, [make_instance("trend", hospital)])
    marker, first = board.days[0].timeline(hospital.id, hospital.name)
    # 표시 행은 당겨진 시간대를 가리킬 뿐, 작업도 같은 시각에 시작한다
    assert (marker.start_time, marker.end_time) == ("07:30", "09:00")
    assert first.start_time == "07:30"
