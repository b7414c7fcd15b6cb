from __future__ import annotations

from datetime import datetime, date
from typing import Any, List, Optional, Tuple

from fastapi import HTTPException

from .config import (
    SCHEDULER_DEBUG,
    ISO_DATE_RE,
    HHMM_RE,
    HEX_COLOR_RE,
    MAX_SANWI_NOSUL_DAYS,
)


def _log_debug(message: str) -> None:
    if SCHEDULER_DEBUG:
        print(message, flush=True)


def _clean_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def _normalize_days_of_month(value: Any) -> List[int]:
    """상위노출 일자 목록 정리: 1~31 범위, 중복 제거, 오름차순."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise HTTPException(status_code=400, detail="상위노출 일자는 목록이어야 합니다.")
    out: List[int] = []
    for raw in value:
        try:
            day = int(raw)
        except (TypeError, ValueError):
            raise HTTPException(status_code=400,
                                detail="상위노출 일자는 숫자여야 합니다.")
        if not 1 <= day <= 31:
            raise HTTPException(status_code=400,
                                detail="상위노출 일자는 1~31 사이여야 합니다.")
        if day not in out:
            out.append(day)
    if len(out) > MAX_SANWI_NOSUL_DAYS:
        raise HTTPException(
            status_code=400,
            detail=f"상위노출 일자는 최대 {MAX_SANWI_NOSUL_DAYS}개까지 지정할 수 있습니다.")
    return sorted(out)


def _normalize_color(value: Optional[str]) -> Optional[str]:
    cleaned = _clean_optional_str(value)
    if cleaned is None:
        return None
    if not HEX_COLOR_RE.match(cleaned):
        raise HTTPException(status_code=400, detail="색상은 #RRGGBB 형식이어야 합니다.")
    return cleaned.lower()


def _coerce_date(value: Any, label: str = "날짜") -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, str) and ISO_DATE_RE.match(value.strip()):
        try:
            return datetime.strptime(value.strip(), "%Y-%m-%d").date()
        except ValueError:
            pass
    raise HTTPException(status_code=400, detail=f"{label} 형식이 잘못되었습니다.")


def _coerce_hhmm(value: Any, label: str = "시각") -> str:
    if isinstance(value, str) and HHMM_RE.match(value.strip()):
        return value.strip()
    raise HTTPException(status_code=400, detail=f"{label} 형식이 잘못되었습니다.")


def _validate_year_month(year: int, month: int) -> Tuple[int, int]:
    if not 1 <= month <= 12:
        raise HTTPException(status_code=400, detail="월은 1~12 사이여야 합니다.")
    if not 2000 <= year <= 2100:
        raise HTTPException(status_code=400, detail="연도 범위가 잘못되었습니다.")
    return (year, month)
