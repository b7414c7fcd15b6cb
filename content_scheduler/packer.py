from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .board import DaySchedule, SchedulingBoard
from .calendar_utils import format_date
from .schemas import ScheduleError, TaskInstance
from .task_list import TASK_DEFINITIONS, TaskList
from .utils import _log_debug


def precheck_capacity(board: SchedulingBoard,
                      task_list: TaskList) -> Optional[ScheduleError]:
  """총 필요 시간이 가용 시간을 넘으면 배치 전에 바로 실패"""
  required = task_list.total_hours + TASK_DEFINITIONS["report"].duration
  available = board.total_available_hours()
  if required <= available:
    return None
  labels = [t.label for t in task_list.instances] + [TASK_DEFINITIONS["report"].label]
  return ScheduleError(
      hospital_name=board.hospital_name,
      shortage_hours=required - available,
      tasks=labels,
      message=f"콘텐츠 작업 시간 부족: 필요 {required:g}시간, 가능 {available:g}시간")


def place_fixed_promotions(board: SchedulingBoard,
                           pending: List[TaskInstance],
                           reserved_days: Sequence[int]) -> List[TaskInstance]:
  """
  상위노출을 병원에서 지정한 일자에 먼저 배치한다.
  지정일이 근무일이 아니거나 시간이 모자라면 남겨서 돌려준다.
  """
  leftover = list(pending)
  if not reserved_days or not leftover:
    return leftover

  days = board.placement_days()
  for day_of_month in sorted(reserved_days):
    if not leftover:
      break
    day = next((d for d in days if d.date.day == day_of_month), None)
    task = leftover[0]
    if day is None:
      _log_debug(f"[PACK] 상위노출 {day_of_month}일: 근무일 아님")
      continue
    if not day.fits(task):
      _log_debug(f"[PACK] 상위노출 {format_date(day.date)}: 시간 부족 "
                 f"(남은 {day.available_hours:g}h)")
      continue
    day.place(leftover.pop(0))
  return leftover


def first_fit_pass(days: Sequence[DaySchedule],
                   pending: List[TaskInstance]) -> List[TaskInstance]:
  # 한 방향 패스: 다음 작업이 안 들어가면 다음 날로 (순서는 바꾸지 않음)
  index = 0
  for day in days:
    while index < len(pending) and day.fits(pending[index]):
      day.place(pending[index])
      index += 1
    if index >= len(pending):
      break
  return pending[index:]


def place_main_tasks(board: SchedulingBoard,
                     main: List[TaskInstance]) -> List[TaskInstance]:
  return first_fit_pass(board.placement_days(), main)


def place_other_tasks(board: SchedulingBoard,
                      other: List[TaskInstance]) -> List[TaskInstance]:
  return first_fit_pass(board.placement_days(), other)


def pack(board: SchedulingBoard,
         task_list: TaskList,
         reserved_days: Sequence[int] = ()) -> Tuple[List[TaskInstance], List[TaskInstance]]:
  """고정일 상위노출 → 메인(브랜드/트렌드) → 기타 순서로 배치. 남은 (메인, 기타) 반환."""
  other = list(task_list.other)
  if reserved_days:
    promotions = [t for t in other if t.type == "sanwi_nosul"]
    other = [t for t in other if t.type != "sanwi_nosul"]
    other.extend(place_fixed_promotions(board, promotions, reserved_days))

  main_left = place_main_tasks(board, list(task_list.main))
  other_left = place_other_tasks(board, other)
  _log_debug(f"[PACK] {board.hospital_name}: main left {len(main_left)}, "
             f"other left {len(other_left)}")
  return (main_left, other_left)
