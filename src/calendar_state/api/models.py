from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import Entry, EntryStatus, EntryType, Instant
from ..domain.models import MAX_PRIORITY, MIN_PRIORITY


class EntryPayload(BaseModel):
    """Wire shape of an entry; unknown keys are rejected."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    id: str = Field(min_length=1)
    title: str = Field(default="")
    description: str = Field(default="")
    review: Optional[str] = Field(default=None)
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    deadline: Optional[str] = Field(default=None)
    all_day: bool = Field(default=False, alias="allDay")
    completed: bool = Field(default=False)
    tags: List[str] = Field(default_factory=list)
    priority: int = Field(default=MIN_PRIORITY, ge=MIN_PRIORITY, le=MAX_PRIORITY)
    type: EntryType = Field(default=EntryType.TASK)
    status: EntryStatus = Field(default=EntryStatus.DEFAULT)

    @classmethod
    def from_domain(cls, entry: Entry) -> "EntryPayload":
        return cls(
            id=entry.id,
            title=entry.title,
            description=entry.description,
            review=entry.review,
            start_date=_iso(entry.start_date),
            end_date=_iso(entry.end_date),
            deadline=_iso(entry.deadline),
            all_day=entry.all_day,
            completed=entry.completed,
            tags=list(entry.tags),
            priority=entry.priority,
            type=entry.type,
            status=entry.status,
        )

    def to_domain(self) -> Entry:
        return Entry.from_record(self.model_dump())


def _iso(value: Optional[Instant]) -> Optional[str]:
    return value.isoformat() if value else None
