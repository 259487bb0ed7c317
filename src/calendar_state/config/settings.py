from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from platformdirs import user_log_dir

load_dotenv()

APP_NAME = "calendar-state"
APP_AUTHOR = "CalendarState"

WEEKDAYS = {"monday": 0, "sunday": 6}


@dataclass(frozen=True)
class TimeSettings:
    timezone: str
    week_start: str

    @property
    def week_start_index(self) -> int:
        """Weekday number (Monday is 0) the calendar week begins on."""

        return WEEKDAYS[self.week_start]


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    log_dir: Path


@dataclass(frozen=True)
class IndexSettings:
    verify_seed_order: bool


@dataclass(frozen=True)
class AppSettings:
    time: TimeSettings
    logging: LoggingSettings
    index: IndexSettings


def _flag_from_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _week_start_from_env(name: str, default: str = "monday") -> str:
    raw = (os.getenv(name) or default).strip().lower()
    if raw not in WEEKDAYS:
        return default
    return raw


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    time = TimeSettings(
        timezone=os.getenv("CALENDAR_STATE_TIMEZONE", "UTC"),
        week_start=_week_start_from_env("CALENDAR_STATE_WEEK_START"),
    )

    logging = LoggingSettings(
        level=os.getenv("CALENDAR_STATE_LOG_LEVEL", "INFO").upper(),
        log_dir=Path(os.getenv("CALENDAR_STATE_LOG_DIR") or user_log_dir(APP_NAME, APP_AUTHOR)),
    )

    index = IndexSettings(
        verify_seed_order=_flag_from_env("CALENDAR_STATE_VERIFY_SEED_ORDER"),
    )

    return AppSettings(time=time, logging=logging, index=index)
