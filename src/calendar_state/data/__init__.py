"""Data access layer."""

from __future__ import annotations

from .cache import CalendarIndex, IndexNode
from .store import Handle, ValueStore

__all__ = ["CalendarIndex", "Handle", "IndexNode", "ValueStore"]
