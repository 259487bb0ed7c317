"""In-memory, time-ordered calendar entry index."""

from __future__ import annotations

from .data import CalendarIndex, Handle, IndexNode, ValueStore
from .domain import Entry, EntryStatus, EntryType, Inclusivity, Instant, Interval, TimeUnit
from .errors import CalendarStateError, DuplicateId, InternalInconsistency, InvalidRange, InvalidValue

__all__ = [
    "CalendarIndex",
    "CalendarStateError",
    "DuplicateId",
    "Entry",
    "EntryStatus",
    "EntryType",
    "Handle",
    "Inclusivity",
    "IndexNode",
    "Instant",
    "InternalInconsistency",
    "Interval",
    "InvalidRange",
    "InvalidValue",
    "TimeUnit",
    "ValueStore",
]
