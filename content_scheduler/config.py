from __future__ import annotations

import os
import pathlib
import re
from zoneinfo import ZoneInfo

SEOUL = ZoneInfo("Asia/Seoul")
SCHEDULER_DEBUG = os.getenv("SCHEDULER_DEBUG", "0") == "1"

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
HHMM_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")

# -------------------------
# 저장소 설정
# -------------------------
BASE_DIR = pathlib.Path(__file__).resolve().parent.parent
DATABASE_URL = os.getenv("DATABASE_URL",
                         f"sqlite:///{BASE_DIR / 'content_scheduler.db'}")
SQL_ECHO = os.getenv("SQL_ECHO", "0") == "1"
HOLIDAYS_FILE = os.getenv("HOLIDAYS_FILE", "").strip()

API_BASE = os.getenv("API_BASE", "/api")
CORS_ALLOW_ORIGINS = os.getenv("CORS_ALLOW_ORIGINS", "")
cors_origins: list[str] = []
if CORS_ALLOW_ORIGINS:
    cors_origins.extend(
        [origin.strip() for origin in CORS_ALLOW_ORIGINS.split(",") if origin.strip()])

# -------------------------
# 스케줄링 규칙
# -------------------------
DAY_OPEN_HOUR = 9
FIRST_WEEKDAY_OPEN_HOUR = 10  # 월요일은 1시간 늦게 시작
DAY_CAPACITY_HOURS = 8.5
FIRST_WEEKDAY_CAPACITY_HOURS = 7.5
CLIENT_DAILY_CAP_HOURS = float(os.getenv("CLIENT_DAILY_CAP_HOURS", "6"))
MAIN_TASKS_PER_DAY = int(os.getenv("MAIN_TASKS_PER_DAY", "1"))
EARLY_START_BLOCK_HOURS = 1.5
MAX_SANWI_NOSUL_DAYS = 5
MAX_ROLLBACK_DAYS = 31
# 0이면 콘텐츠 작업은 마감 전 근무일까지만 배치 (보고서만 마감일)
PLACE_THROUGH_DUE_DATE = os.getenv("PLACE_THROUGH_DUE_DATE", "1") == "1"
