from __future__ import annotations

from enum import Enum
from typing import Optional


class EntryType(str, Enum):
    TASK = "TASK"
    EVENT = "EVENT"
    SLOT = "SLOT"


class EntryStatus(str, Enum):
    DEFAULT = "Default"
    INBOX = "Inbox"
    SOMEDAY = "Someday"
    DELETED = "Deleted"


class Inclusivity(str, Enum):
    """Whether interval bounds count as inside the interval."""

    OPEN = "open"
    CLOSED = "closed"


class TimeUnit(str, Enum):
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"

    @classmethod
    def _missing_(cls, value: object) -> Optional["TimeUnit"]:
        # accept "day", "Days", ...
        if isinstance(value, str):
            normalized = value.strip().lower()
            if not normalized.endswith("s"):
                normalized += "s"
            for member in cls:
                if member.value == normalized:
                    return member
        return None
