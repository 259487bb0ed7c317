from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence
from uuid import uuid4

from ..data import CalendarIndex
from ..domain import Entry, EntryStatus, EntryType, Instant, Interval, TimeUnit
from ..errors import InvalidRange
from .context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CalendarService:
    context: ServiceContext

    @property
    def index(self) -> CalendarIndex:
        return self.context.index

    def load(self, entries: Iterable[Entry]) -> None:
        """Replace the index contents, sorting by start then end date, newest first."""

        ordered = sorted(entries, key=_seed_key, reverse=True)
        self.index.hydrate(ordered)
        logger.info("Loaded %d entries into the calendar index", len(self.index))

    def get(self, entry_id: str) -> Optional[Entry]:
        return self.index.find_by_id(entry_id)

    def list_between(self, start: Any, end: Any) -> list[Entry]:
        return self.index.find_in_interval(Interval.of(start, end))

    def list_for(self, anchor: Any, unit: TimeUnit | str = TimeUnit.WEEKS) -> list[Entry]:
        """Entries touching the week, month or year containing ``anchor``."""

        return self.index.find_in_interval(Instant.parse(anchor).range(unit))

    def create_entry(
        self,
        *,
        title: str,
        entry_id: Optional[str] = None,
        start_date: Any = None,
        end_date: Any = None,
        deadline: Any = None,
        description: str = "",
        all_day: bool = False,
        tags: Sequence[str] = (),
        priority: int = 0,
        type: EntryType = EntryType.TASK,
        status: EntryStatus = EntryStatus.DEFAULT,
    ) -> Entry:
        entry = Entry(
            id=entry_id or str(uuid4()),
            title=title,
            description=description,
            start_date=start_date,
            end_date=end_date,
            deadline=deadline,
            all_day=all_day,
            tags=tuple(tags),
            priority=priority,
            type=type,
            status=status,
        )
        return self.index.add(entry)

    def complete(self, entry_id: str, *, review: Optional[str] = None) -> Optional[Entry]:
        changes: dict[str, Any] = {"completed": True}
        if review is not None:
            changes["review"] = review
        return self.index.update(entry_id, **changes)

    def reschedule(self, entry_id: str, start_date: Any, end_date: Any = None) -> Optional[Entry]:
        start = Instant.parse(start_date) if start_date is not None else None
        end = Instant.parse(end_date) if end_date is not None else None
        if start is not None and end is not None and start.is_after(end):
            raise InvalidRange(f"Entry {entry_id!r} cannot end before it starts")
        return self.index.update(entry_id, start_date=start, end_date=end)

    def remove(self, entry_id: str) -> bool:
        return self.index.delete(entry_id)


def _seed_key(entry: Entry) -> tuple:
    # undated entries sort last; they are not linked into the chain
    start = entry.start_date.timestamp() if entry.start_date else float("-inf")
    end = entry.end_date.timestamp() if entry.end_date else float("-inf")
    return (start, end)
