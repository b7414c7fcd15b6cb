from __future__ import annotations

from typing import Optional

from .board import SchedulingBoard
from .calendar_utils import format_date
from .schemas import PlacedTask, ScheduleError, TaskInstance
from .task_list import TASK_DEFINITIONS


def _report_error(board: SchedulingBoard) -> ScheduleError:
  return ScheduleError(hospital_name=board.hospital_name,
                       shortage_hours=0,
                       tasks=[TASK_DEFINITIONS["report"].label],
                       message=f"마감일 {format_date(board.due_date)}이 근무일이 아닙니다")


def reserve_report(board: SchedulingBoard) -> Optional[ScheduleError]:
  """마감일에 보고서 자리를 미리 잡아 둔다."""
  day = board.report_day()
  if day is None:
    return _report_error(board)
  hours = TASK_DEFINITIONS["report"].duration
  if day.available_hours < hours:
    return ScheduleError(hospital_name=board.hospital_name,
                         shortage_hours=hours - max(day.available_hours, 0.0),
                         tasks=[TASK_DEFINITIONS["report"].label],
                         message=f"마감일 {format_date(board.due_date)}에 보고서 작성 시간이 부족합니다")
  day.reserved_hours = hours
  return None


def finalize_report(board: SchedulingBoard) -> PlacedTask:
  """다른 작업 배치가 끝난 뒤 마감일 마지막 작업으로 보고서를 붙인다."""
  day = board.report_day()
  if day is None:
    raise ValueError(f"due date {format_date(board.due_date)} is not on the board")
  definition = TASK_DEFINITIONS["report"]
  day.reserved_hours = 0.0
  report = TaskInstance(type="report",
                        label=definition.label,
                        duration=definition.duration,
                        hospital_id=board.hospital_id,
                        hospital_name=board.hospital_name)
  return day.place(report, is_report=True)
