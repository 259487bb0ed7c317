from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, List, TypeVar

T = TypeVar("T")
Listener = Callable[[T], None]


_handle_ids = itertools.count(1)


@dataclass(frozen=True, slots=True)
class Handle:
    """Opaque reference to a value slot in a :class:`ValueStore`."""

    key: int = field(default_factory=lambda: next(_handle_ids))


@dataclass
class ValueStore(Generic[T]):
    """Minimal reactive value store: values live behind handles and listeners see every write."""

    _values: Dict[Handle, T] = field(default_factory=dict)
    _listeners: Dict[Handle, List[Listener]] = field(default_factory=dict)

    def create(self, value: T) -> Handle:
        handle = Handle()
        self._values[handle] = value
        return handle

    def get(self, handle: Handle) -> T:
        try:
            return self._values[handle]
        except KeyError:
            raise KeyError(f"Unknown store handle: {handle.key}") from None

    def set(self, handle: Handle, value: T) -> None:
        if handle not in self._values:
            raise KeyError(f"Unknown store handle: {handle.key}")
        self._values[handle] = value
        for listener in list(self._listeners.get(handle, [])):
            listener(value)

    def discard(self, handle: Handle) -> None:
        self._values.pop(handle, None)
        self._listeners.pop(handle, None)

    def subscribe(self, handle: Handle, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for writes to ``handle``; returns an unsubscribe callback."""

        if handle not in self._values:
            raise KeyError(f"Unknown store handle: {handle.key}")
        self._listeners.setdefault(handle, []).append(listener)

        def _unsubscribe() -> None:
            listeners = self._listeners.get(handle, [])
            if listener in listeners:
                listeners.remove(listener)
            if not listeners:
                self._listeners.pop(handle, None)

        return _unsubscribe

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, handle: object) -> bool:
        return handle in self._values
