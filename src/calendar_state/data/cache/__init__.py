from __future__ import annotations

from .calendar_index import CalendarIndex, IndexNode

__all__ = ["CalendarIndex", "IndexNode"]
