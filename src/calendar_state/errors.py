from __future__ import annotations

from typing import Optional


class CalendarStateError(Exception):
    """Base class for every error raised by the calendar state core."""


class InvalidValue(CalendarStateError, ValueError):
    """Raised when a date/time source or an entry field cannot be interpreted."""


class InvalidRange(CalendarStateError, ValueError):
    """Raised when an interval is built with its start after its end."""


class DuplicateId(CalendarStateError, KeyError):
    """Raised when an entry id is already present in the index."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(entry_id)
        self.entry_id = entry_id

    def __str__(self) -> str:
        return f"Entry id already indexed: {self.entry_id!r}"


class InternalInconsistency(CalendarStateError, RuntimeError):
    """Raised when the ordered chain references an id with no index node."""

    def __init__(self, message: str, *, entry_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.entry_id = entry_id


__all__ = [
    "CalendarStateError",
    "DuplicateId",
    "InternalInconsistency",
    "InvalidRange",
    "InvalidValue",
]
