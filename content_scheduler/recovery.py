from __future__ import annotations

import math
from typing import List, Optional, Sequence

from .board import DaySchedule, SchedulingBoard
from .calendar_utils import format_date, is_first_weekday
from .config import EARLY_START_BLOCK_HOURS
from .schemas import CapacityAdjustment, ScheduleError, TaskInstance
from .utils import _log_debug


def early_start_blocks_needed(unplaced: List[TaskInstance],
                              block_hours: float = EARLY_START_BLOCK_HOURS) -> int:
  hours = sum(t.duration for t in unplaced)
  return math.ceil(hours / block_hours) if hours > 0 else 0


def inject_early_starts(board: SchedulingBoard,
                        unplaced: List[TaskInstance],
                        block_hours: float = EARLY_START_BLOCK_HOURS) -> int:
  """월요일을 제외한 근무일 앞쪽부터 조기출근 블록을 추가. 추가한 개수 반환."""
  needed = early_start_blocks_needed(unplaced, block_hours)
  injected = 0
  for day in board.placement_days():
    if injected >= needed:
      break
    if is_first_weekday(day.date) or day.adjustments:
      continue
    pending = unplaced[min(injected, len(unplaced) - 1)]
    day.add_adjustment(CapacityAdjustment(hours=block_hours,
                                          label=f"조기출근 ({pending.label})"))
    _log_debug(f"[RECOVERY] early start {format_date(day.date)} for {pending.label}")
    injected += 1
  return injected


def retry_unplaced(days: Sequence[DaySchedule],
                   unplaced: List[TaskInstance]) -> List[TaskInstance]:
  # 작업마다 첫 날부터 다시 찾는다
  remaining: List[TaskInstance] = []
  for task in unplaced:
    day = next((d for d in days if d.fits(task)), None)
    if day is None:
      remaining.append(task)
      continue
    day.place(task)
  return remaining


def recover_overflow(board: SchedulingBoard,
                     unplaced: List[TaskInstance]) -> Optional[ScheduleError]:
  """
  상한 때문에 남은 작업을 조기출근 시간으로 다시 배치해 본다.
  그래도 남으면 부족 시간과 작업 목록을 담은 오류를 돌려준다.
  """
  if not unplaced:
    return None

  inject_early_starts(board, unplaced)
  remaining = retry_unplaced(board.placement_days(), unplaced)
  if not remaining:
    return None

  shortage = sum(t.duration for t in remaining)
  return ScheduleError(
      hospital_name=board.hospital_name,
      shortage_hours=shortage,
      tasks=[t.label for t in remaining],
      message=f"조기출근을 적용해도 {len(remaining)}개 작업({shortage:g}시간)을 "
              f"배치할 수 없습니다")
