from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from ..errors import InvalidValue
from .enums import EntryStatus, EntryType
from .temporal import Instant, Interval

# camelCase spellings used by client-side entry configurations
_FIELD_ALIASES = {
    "startDate": "start_date",
    "endDate": "end_date",
    "allDay": "all_day",
}
_DATE_FIELDS = ("start_date", "end_date", "deadline")
_TEXT_FIELDS = ("title", "description", "review")
_FLAG_FIELDS = ("all_day", "completed")
MIN_PRIORITY = 0
MAX_PRIORITY = 5


def _optional_instant(value: Any) -> Optional[Instant]:
    if value is None or isinstance(value, Instant):
        return value
    return Instant.parse(value)


def _normalize_tags(tags: Iterable[str]) -> Tuple[str, ...]:
    if isinstance(tags, str):
        raise InvalidValue("tags must be a collection of strings, not a single string")
    ordered: dict[str, None] = {}
    for tag in tags:
        if not isinstance(tag, str):
            raise InvalidValue(f"Tag must be a string: {tag!r}")
        ordered.setdefault(tag, None)
    return tuple(ordered)


@dataclass(frozen=True, slots=True)
class Entry:
    """Calendar event, task or free slot. Never mutated; ``update`` returns a copy."""

    id: str
    title: str = ""
    description: str = ""
    review: Optional[str] = None
    start_date: Optional[Instant] = None
    end_date: Optional[Instant] = None
    deadline: Optional[Instant] = None
    all_day: bool = False
    completed: bool = False
    tags: Tuple[str, ...] = ()
    priority: int = MIN_PRIORITY
    type: EntryType = EntryType.TASK
    status: EntryStatus = EntryStatus.DEFAULT

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise InvalidValue(f"Entry id must be a non-empty string, got {self.id!r}")
        for name in _TEXT_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, str) and not (value is None and name == "review"):
                raise InvalidValue(f"Entry {name} must be a string, got {value!r}")
        for name in _FLAG_FIELDS:
            if not isinstance(getattr(self, name), bool):
                raise InvalidValue(f"Entry {name} must be a boolean, got {getattr(self, name)!r}")
        if isinstance(self.priority, bool) or not isinstance(self.priority, int):
            raise InvalidValue(f"Entry priority must be an integer, got {self.priority!r}")
        if not MIN_PRIORITY <= self.priority <= MAX_PRIORITY:
            raise InvalidValue(f"Entry priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}, got {self.priority}")
        for name in _DATE_FIELDS:
            object.__setattr__(self, name, _optional_instant(getattr(self, name)))
        object.__setattr__(self, "tags", _normalize_tags(self.tags))
        try:
            object.__setattr__(self, "type", EntryType(self.type))
            object.__setattr__(self, "status", EntryStatus(self.status))
        except ValueError as exc:
            raise InvalidValue(str(exc)) from exc

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(item.name for item in fields(cls))

    @classmethod
    def _canonical(cls, values: Mapping[str, Any]) -> Dict[str, Any]:
        known = cls.field_names()
        canonical: Dict[str, Any] = {}
        for key, value in values.items():
            name = _FIELD_ALIASES.get(key, key)
            if name not in known:
                raise InvalidValue(f"Unknown entry field: {key!r}")
            canonical[name] = value
        return canonical

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Entry":
        values = cls._canonical(record)
        if "id" not in values:
            raise InvalidValue("Entry record is missing 'id'")
        return cls(**values)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "review": self.review,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "all_day": self.all_day,
            "completed": self.completed,
            "tags": list(self.tags),
            "priority": self.priority,
            "type": self.type.value,
            "status": self.status.value,
        }

    def update(self, **changes: Any) -> "Entry":
        values = self._canonical(changes)
        if "id" in values and values["id"] != self.id:
            raise InvalidValue(f"Entry id is immutable ({self.id!r} -> {values['id']!r})")
        return replace(self, **values)

    @property
    def is_dated(self) -> bool:
        return self.start_date is not None

    @property
    def span(self) -> Optional[Interval]:
        """Interval from start to end when both are set."""

        if self.start_date is None or self.end_date is None:
            return None
        return Interval(self.start_date, self.end_date)
