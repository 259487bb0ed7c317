"""Domain models for calendar entries and time arithmetic."""

from __future__ import annotations

from .enums import EntryStatus, EntryType, Inclusivity, TimeUnit
from .models import Entry
from .temporal import Instant, Interval

__all__ = ["Entry", "EntryStatus", "EntryType", "Inclusivity", "Instant", "Interval", "TimeUnit"]
