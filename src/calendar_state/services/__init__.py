"""Application services on top of the calendar index."""

from __future__ import annotations

from .calendar import CalendarService
from .context import ServiceContext

__all__ = ["CalendarService", "ServiceContext"]
