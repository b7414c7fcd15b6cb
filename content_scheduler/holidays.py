"""
공휴일 테이블: 연도별로 조회되는 고정 공휴일 목록
- 기본 테이블(2025, 2026) 내장
- HOLIDAYS_FILE(JSON)로 연도 추가/덮어쓰기
"""

from __future__ import annotations

import json
import pathlib
from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional, Set

from .config import HOLIDAYS_FILE
from .utils import _log_debug

_DEFAULT_HOLIDAYS: Dict[int, List[str]] = {
    2025: [
        "2025-01-01",  # 신정
        "2025-01-27", "2025-01-28", "2025-01-29", "2025-01-30",  # 임시공휴일, 설날
        "2025-03-01", "2025-03-03",  # 삼일절, 대체공휴일
        "2025-05-05", "2025-05-06",  # 어린이날/부처님오신날, 대체공휴일
        "2025-06-03",  # 대통령 선거일
        "2025-06-06",  # 현충일
        "2025-08-15",  # 광복절
        "2025-10-03",  # 개천절
        "2025-10-05", "2025-10-06", "2025-10-07", "2025-10-08",  # 추석, 대체공휴일
        "2025-10-09",  # 한글날
        "2025-12-25",  # 크리스마스
    ],
    2026: [
        "2026-01-01",  # 신정
        "2026-02-16", "2026-02-17", "2026-02-18",  # 설날
        "2026-03-01", "2026-03-02",  # 삼일절
        "2026-05-05", "2026-05-24", "2026-05-25",  # 어린이날, 부처님오신날
        "2026-06-06",  # 현충일
        "2026-08-15", "2026-08-17",  # 광복절
        "2026-09-24", "2026-09-25", "2026-09-26",  # 추석
        "2026-10-03", "2026-10-05",  # 개천절
        "2026-10-09",  # 한글날
        "2026-12-25",  # 크리스마스
    ],
}


def _parse_dates(values: Iterable[str]) -> Set[date]:
    out: Set[date] = set()
    for raw in values:
        out.add(datetime.strptime(str(raw).strip(), "%Y-%m-%d").date())
    return out


class HolidayCalendar:
    """연도 → 공휴일 집합 조회 테이블"""

    def __init__(self, table: Optional[Mapping[int, Iterable[str]]] = None):
        self._by_year: Dict[int, Set[date]] = {}
        for year, values in (table or {}).items():
            self._by_year[int(year)] = _parse_dates(values)

    @classmethod
    def default(cls) -> "HolidayCalendar":
        calendar = cls(_DEFAULT_HOLIDAYS)
        if HOLIDAYS_FILE:
            calendar.update_from_file(pathlib.Path(HOLIDAYS_FILE))
        return calendar

    def update_from_file(self, path: pathlib.Path) -> None:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"holiday file must map year to dates: {path}")
        for year, values in data.items():
            self._by_year[int(year)] = _parse_dates(values)
        _log_debug(f"[HOLIDAYS] loaded {len(data)} year(s) from {path}")

    def years(self) -> List[int]:
        return sorted(self._by_year)

    def for_year(self, year: int) -> Set[date]:
        holidays = self._by_year.get(year)
        if holidays is None:
            _log_debug(f"[HOLIDAYS] no table for {year}, weekends only")
            return set()
        return holidays

    def is_holiday(self, day: date) -> bool:
        return day in self._by_year.get(day.year, ())


_default_calendar: Optional[HolidayCalendar] = None


def get_default_holidays() -> HolidayCalendar:
    global _default_calendar
    if _default_calendar is None:
        _default_calendar = HolidayCalendar.default()
    return _default_calendar
