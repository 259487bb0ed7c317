from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

from ...config import get_settings
from ...domain import Entry, Instant, Interval
from ...errors import DuplicateId, InternalInconsistency
from ..store import Handle, ValueStore

logger = logging.getLogger(__name__)

EntryConfig = Union[Entry, Mapping[str, Any]]


def _as_entry(config: EntryConfig) -> Entry:
    if isinstance(config, Entry):
        return config
    return Entry.from_record(config)


@dataclass(slots=True)
class IndexNode:
    """Ordering record for a dated entry. Only ``next`` changes after creation."""

    id: str
    start_date: Instant
    end_date: Optional[Instant] = None
    next: Optional[str] = None

    @classmethod
    def for_entry(cls, entry: Entry) -> "IndexNode":
        if entry.start_date is None:
            raise InternalInconsistency(f"Entry {entry.id!r} has no start date to index", entry_id=entry.id)
        return cls(id=entry.id, start_date=entry.start_date, end_date=entry.end_date)

    def touches(self, interval: Interval) -> bool:
        if self.start_date.is_between(interval):
            return True
        return self.end_date is not None and self.end_date.is_between(interval)


@dataclass
class CalendarIndex:
    """In-memory entry collection ordered by start date, newest first.

    Every entry is reachable by id through ``handles``. Entries with a start date
    also get an :class:`IndexNode` in ``nodes``; starting at ``head`` and
    following ``next`` visits those nodes in non-increasing ``start_date`` order,
    with entries sharing a start date kept in insertion order.
    """

    store: ValueStore[Entry] = field(default_factory=ValueStore)
    handles: Dict[str, Handle] = field(default_factory=dict)
    nodes: Dict[str, IndexNode] = field(default_factory=dict)
    head: Optional[str] = None

    @classmethod
    def from_entries(cls, entries: Iterable[EntryConfig], *, store: Optional[ValueStore[Entry]] = None) -> "CalendarIndex":
        index = cls(store=store if store is not None else ValueStore())
        index.hydrate(entries)
        return index

    def hydrate(self, entries: Iterable[EntryConfig]) -> None:
        """Replace the contents with ``entries``, linked in the order given.

        The caller must supply entries sorted by start date (then end date)
        descending; the order is trusted, not re-sorted.
        """

        prepared = [_as_entry(config) for config in entries]
        seen: set[str] = set()
        for entry in prepared:
            if entry.id in seen:
                raise DuplicateId(entry.id)
            seen.add(entry.id)

        self.clear()
        verify = get_settings().index.verify_seed_order
        tail: Optional[IndexNode] = None
        for entry in prepared:
            self.handles[entry.id] = self.store.create(entry)
            if entry.start_date is None:
                continue
            node = IndexNode.for_entry(entry)
            self.nodes[node.id] = node
            if tail is None:
                self.head = node.id
            else:
                if verify and node.start_date.is_after(tail.start_date):
                    logger.warning("Seed entry %s starts after its predecessor %s; chain order is broken", node.id, tail.id)
                tail.next = node.id
            tail = node
        logger.debug("Hydrated calendar index with %d entries (%d dated)", len(self.handles), len(self.nodes))

    def clear(self) -> None:
        for handle in self.handles.values():
            self.store.discard(handle)
        self.handles.clear()
        self.nodes.clear()
        self.head = None

    def _node(self, entry_id: str) -> IndexNode:
        node = self.nodes.get(entry_id)
        if node is None:
            logger.error("Chain references id %s with no index node", entry_id)
            raise InternalInconsistency(f"Chain references unknown id {entry_id!r}", entry_id=entry_id)
        return node

    def _walk(self) -> Iterator[IndexNode]:
        cursor = self.head
        steps = 0
        while cursor is not None:
            steps += 1
            if steps > len(self.nodes):
                logger.error("Chain walk exceeded %d nodes; successor links form a cycle", len(self.nodes))
                raise InternalInconsistency("Chain contains a cycle", entry_id=cursor)
            node = self._node(cursor)
            yield node
            cursor = node.next

    def _insertion_point(self, start_date: Instant) -> Optional[IndexNode]:
        """Last node whose start date is on or after ``start_date``; None means insert at head."""

        predecessor: Optional[IndexNode] = None
        for node in self._walk():
            if start_date.is_after(node.start_date):
                break
            predecessor = node
        return predecessor

    def _predecessor(self, entry_id: str) -> Optional[IndexNode]:
        if self.head == entry_id:
            return None
        for node in self._walk():
            if node.next == entry_id:
                return node
        logger.error("Index node %s is not reachable from the chain head", entry_id)
        raise InternalInconsistency(f"Index node {entry_id!r} is not linked into the chain", entry_id=entry_id)

    def _link(self, node: IndexNode, predecessor: Optional[IndexNode]) -> None:
        if predecessor is None:
            node.next = self.head
            self.head = node.id
        else:
            node.next = predecessor.next
            predecessor.next = node.id
        self.nodes[node.id] = node

    def _unlink(self, entry_id: str) -> None:
        node = self.nodes.get(entry_id)
        if node is None:
            return
        predecessor = self._predecessor(entry_id)
        if predecessor is None:
            self.head = node.next
        else:
            predecessor.next = node.next
        del self.nodes[entry_id]

    def add(self, config: EntryConfig) -> Entry:
        entry = _as_entry(config)
        if entry.id in self.handles:
            raise DuplicateId(entry.id)

        if entry.start_date is None:
            self.handles[entry.id] = self.store.create(entry)
            logger.debug("Stored undated entry %s", entry.id)
            return entry

        predecessor = self._insertion_point(entry.start_date)
        self.handles[entry.id] = self.store.create(entry)
        self._link(IndexNode.for_entry(entry), predecessor)
        logger.debug("Indexed entry %s after %s", entry.id, predecessor.id if predecessor else "<head>")
        return entry

    def delete(self, entry_id: str) -> bool:
        handle = self.handles.get(entry_id)
        if handle is None:
            return False
        self._unlink(entry_id)
        del self.handles[entry_id]
        self.store.discard(handle)
        logger.debug("Deleted entry %s", entry_id)
        return True

    def update(self, entry_id: str, **changes: Any) -> Optional[Entry]:
        """Copy-on-write update.

        The entry moves in the chain only when its start date changes; an end
        date edit keeps its position among equal start dates.
        """

        handle = self.handles.get(entry_id)
        if handle is None:
            return None
        current = self.store.get(handle)
        updated = current.update(**changes)

        if updated.start_date != current.start_date:
            self._unlink(entry_id)
            if updated.start_date is not None:
                predecessor = self._insertion_point(updated.start_date)
                self._link(IndexNode.for_entry(updated), predecessor)
            logger.debug("Relinked entry %s after date change", entry_id)
        elif updated.end_date != current.end_date and entry_id in self.nodes:
            previous = self.nodes[entry_id]
            self.nodes[entry_id] = IndexNode(
                id=entry_id,
                start_date=previous.start_date,
                end_date=updated.end_date,
                next=previous.next,
            )

        self.store.set(handle, updated)
        return updated

    def find_by_id(self, entry_id: str) -> Optional[Entry]:
        handle = self.handles.get(entry_id)
        if handle is None:
            return None
        return self.store.get(handle)

    def find_in_interval(self, interval: Interval) -> List[Entry]:
        """Entries whose start or end date falls inside ``interval`` (closed), newest first."""

        matched = [node.id for node in self._walk() if node.touches(interval)]
        return [self.store.get(self._handle_for_node(entry_id)) for entry_id in matched]

    def _handle_for_node(self, entry_id: str) -> Handle:
        handle = self.handles.get(entry_id)
        if handle is None:
            logger.error("Index node %s has no stored entry", entry_id)
            raise InternalInconsistency(f"Index node {entry_id!r} has no stored entry", entry_id=entry_id)
        return handle

    def handle(self, entry_id: str) -> Optional[Handle]:
        return self.handles.get(entry_id)

    def ids(self) -> List[str]:
        """Ids of dated entries in chain order."""

        return [node.id for node in self._walk()]

    def undated(self) -> List[Entry]:
        return [self.store.get(handle) for entry_id, handle in self.handles.items() if entry_id not in self.nodes]

    def __iter__(self) -> Iterator[Entry]:
        for node in self._walk():
            yield self.store.get(self._handle_for_node(node.id))

    def __len__(self) -> int:
        return len(self.handles)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self.handles
