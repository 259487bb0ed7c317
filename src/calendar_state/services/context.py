from __future__ import annotations

from dataclasses import dataclass, field

from ..config import AppSettings, get_settings
from ..data import CalendarIndex, ValueStore
from ..domain import Entry


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings, the value store and the index."""

    settings: AppSettings = field(default_factory=get_settings)
    store: ValueStore[Entry] = field(default_factory=ValueStore)
    index: CalendarIndex = field(init=False)

    def __post_init__(self) -> None:
        self.index = CalendarIndex(store=self.store)
