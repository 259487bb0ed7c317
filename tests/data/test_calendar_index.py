"""Tests for the ordered calendar index."""

from __future__ import annotations

import itertools
import logging
from typing import Optional

import pytest

from calendar_state.config import get_settings
from calendar_state.data import CalendarIndex, IndexNode, ValueStore
from calendar_state.domain import Entry, Interval
from calendar_state.errors import DuplicateId, InternalInconsistency

pytestmark = pytest.mark.unit


def _entry(entry_id: str, start: Optional[str] = None, end: Optional[str] = None, **extra) -> Entry:
    return Entry(id=entry_id, title=entry_id.upper(), start_date=start, end_date=end, **extra)


_SHUFFLED_STARTS = {
    "a": "2024-12-01",
    "b1": "2024-12-02",
    "b2": "2024-12-02",
    "b3": "2024-12-02",
    "c": "2024-12-03",
}


@pytest.fixture
def index() -> CalendarIndex:
    return CalendarIndex()


@pytest.fixture
def december(index: CalendarIndex) -> CalendarIndex:
    index.add(_entry("mid", "2024-12-20"))
    index.add(_entry("late", "2024-12-24"))
    index.add(_entry("early", "2024-12-10", "2024-12-21"))
    index.add(_entry("outside", "2024-12-26"))
    index.add(_entry("inbox"))
    return index


class TestOrdering:
    @pytest.mark.parametrize("order", list(itertools.permutations(_SHUFFLED_STARTS)))
    def test_any_add_order_is_descending_with_stable_ties(self, index, order):
        for entry_id in order:
            index.add(_entry(entry_id, _SHUFFLED_STARTS[entry_id]))

        starts = [index.nodes[entry_id].start_date for entry_id in index.ids()]
        assert all(left.is_on_or_after(right) for left, right in zip(starts, starts[1:]))
        assert len(starts) == len(order)
        ties = [entry_id for entry_id in index.ids() if entry_id.startswith("b")]
        assert ties == [entry_id for entry_id in order if entry_id.startswith("b")]

    def test_descending_by_start_date(self, index):
        for entry_id, start in [("b", "2024-12-05"), ("d", "2024-12-20"), ("a", "2024-12-01"), ("c", "2024-12-10")]:
            index.add(_entry(entry_id, start))
        assert index.ids() == ["d", "c", "b", "a"]
        assert index.head == "d"

    def test_ties_keep_insertion_order(self, index):
        index.add(_entry("a", "2024-12-20"))
        index.add(_entry("b", "2024-12-22"))
        index.add(_entry("c", "2024-12-20"))
        index.add(_entry("d", "2024-12-20"))
        assert index.ids() == ["b", "a", "c", "d"]

    def test_tie_with_head_goes_after_head(self, index):
        index.add(_entry("first", "2024-12-22"))
        index.add(_entry("second", "2024-12-22"))
        assert index.ids() == ["first", "second"]

    def test_later_entry_becomes_head(self, index):
        index.add(_entry("old", "2024-12-01"))
        index.add(_entry("new", "2024-12-02"))
        assert index.head == "new"
        assert index.nodes["new"].next == "old"
        assert index.nodes["old"].next is None

    def test_undated_entries_stay_out_of_the_chain(self, index):
        index.add(_entry("dated", "2024-12-01"))
        index.add(_entry("undated"))
        assert index.ids() == ["dated"]
        assert "undated" in index
        assert [entry.id for entry in index.undated()] == ["undated"]
        assert len(index) == 2

    def test_iteration_follows_chain(self, december):
        assert [entry.id for entry in december] == ["outside", "late", "mid", "early"]

    def test_add_accepts_mapping(self, index):
        stored = index.add({"id": "m", "title": "Mapped", "startDate": "2024-12-01"})
        assert isinstance(stored, Entry)
        assert index.find_by_id("m") == stored


class TestAddAndDelete:
    def test_duplicate_id_rejected_without_mutation(self, december):
        before = (len(december), december.ids(), len(december.store))
        with pytest.raises(DuplicateId) as excinfo:
            december.add(_entry("mid", "2024-12-01"))
        assert excinfo.value.entry_id == "mid"
        assert (len(december), december.ids(), len(december.store)) == before

    def test_duplicate_undated_id_rejected(self, december):
        with pytest.raises(DuplicateId):
            december.add(_entry("inbox", "2024-12-01"))
        assert december.find_by_id("inbox").start_date is None

    def test_add_then_delete_restores_state(self, december):
        before = (len(december), december.ids())
        december.add(_entry("temp", "2024-12-20"))
        assert december.delete("temp") is True
        assert (len(december), december.ids()) == before

    @pytest.mark.parametrize("victim", ["outside", "mid", "early"])
    def test_delete_relinks_chain(self, december, victim):
        expected = [entry_id for entry_id in december.ids() if entry_id != victim]
        assert december.delete(victim) is True
        assert december.ids() == expected
        assert december.find_by_id(victim) is None
        assert victim not in december.nodes

    def test_delete_last_node_clears_head(self, index):
        index.add(_entry("only", "2024-12-01"))
        assert index.delete("only")
        assert index.head is None
        assert index.ids() == []

    def test_delete_unknown_id(self, december):
        assert december.delete("missing") is False

    def test_delete_undated_entry(self, december):
        chain = december.ids()
        assert december.delete("inbox") is True
        assert december.find_by_id("inbox") is None
        assert december.ids() == chain

    def test_delete_releases_store_slot(self, december):
        handle = december.handle("mid")
        december.delete("mid")
        assert handle not in december.store


class TestQueries:
    def test_find_by_id(self, december):
        assert december.find_by_id("mid").title == "MID"
        assert december.find_by_id("nope") is None

    def test_find_in_interval_uses_closed_bounds(self, december):
        interval = Interval.of("2024-12-20", "2024-12-25")
        assert [entry.id for entry in december.find_in_interval(interval)] == ["late", "mid", "early"]

    def test_entry_after_interval_excluded(self, index):
        index.add(_entry("in", "2024-12-24"))
        index.add(_entry("out", "2024-12-26"))
        found = index.find_in_interval(Interval.of("2024-12-20", "2024-12-25"))
        assert [entry.id for entry in found] == ["in"]

    def test_empty_index(self, index):
        assert index.find_in_interval(Interval.of("2024-12-20", "2024-12-25")) == []

    def test_missing_node_is_an_internal_error(self, december):
        del december.nodes["mid"]
        with pytest.raises(InternalInconsistency):
            december.find_in_interval(Interval.of("2024-12-01", "2024-12-31"))

    def test_missing_handle_is_an_internal_error(self, december):
        del december.handles["late"]
        with pytest.raises(InternalInconsistency):
            december.find_in_interval(Interval.of("2024-12-01", "2024-12-31"))

    def test_cycle_is_an_internal_error(self, december):
        december.nodes["early"].next = "outside"
        with pytest.raises(InternalInconsistency):
            december.ids()


class TestUpdate:
    def test_update_is_copy_on_write(self, december):
        before = december.find_by_id("mid")
        updated = december.update("mid", title="Moved", completed=True)
        assert updated is not None and updated.title == "Moved"
        assert before.title == "MID"
        assert december.find_by_id("mid") is updated
        assert december.ids() == ["outside", "late", "mid", "early"]

    def test_update_notifies_store_listeners(self, december):
        seen: list[Entry] = []
        december.store.subscribe(december.handle("mid"), seen.append)
        december.update("mid", priority=4)
        assert [entry.priority for entry in seen] == [4]

    def test_new_start_date_relinks(self, december):
        december.update("early", start_date="2024-12-25")
        assert december.ids() == ["outside", "early", "late", "mid"]

    def test_end_date_change_keeps_position(self, index):
        index.add(_entry("a", "2024-12-20"))
        index.add(_entry("b", "2024-12-20"))
        index.add(_entry("c", "2024-12-20"))
        index.update("a", end_date="2024-12-23")
        assert index.ids() == ["a", "b", "c"]
        assert index.nodes["a"].end_date == index.find_by_id("a").end_date
        found = index.find_in_interval(Interval.of("2024-12-22", "2024-12-24"))
        assert [entry.id for entry in found] == ["a"]

    def test_end_date_change_on_undated_entry(self, december):
        december.update("inbox", end_date="2024-12-23")
        assert "inbox" not in december.nodes
        assert december.ids() == ["outside", "late", "mid", "early"]

    def test_clearing_start_date_unlinks(self, december):
        december.update("late", start_date=None)
        assert december.ids() == ["outside", "mid", "early"]
        assert december.find_by_id("late") is not None

    def test_adding_start_date_links(self, december):
        december.update("inbox", start_date="2024-12-21")
        assert december.ids() == ["outside", "late", "inbox", "mid", "early"]

    def test_update_unknown(self, december):
        assert december.update("missing", title="x") is None


class TestIndexNode:
    def test_undated_entry_cannot_be_indexed(self):
        with pytest.raises(InternalInconsistency):
            IndexNode.for_entry(_entry("inbox"))

    def test_node_copies_entry_dates(self):
        node = IndexNode.for_entry(_entry("a", "2024-12-20", "2024-12-21"))
        assert (node.id, node.next) == ("a", None)
        assert node.end_date is not None and node.end_date.format() == "2024-12-21"


class TestHydrate:
    def test_trusts_given_order(self):
        index = CalendarIndex.from_entries(
            [
                _entry("c", "2024-12-03", "2024-12-04"),
                _entry("b2", "2024-12-02", "2024-12-03"),
                _entry("b1", "2024-12-02", "2024-12-02"),
                _entry("undated"),
                _entry("a", "2024-12-01"),
            ]
        )
        assert index.ids() == ["c", "b2", "b1", "a"]
        assert len(index) == 5

    def test_later_adds_respect_seeded_chain(self):
        index = CalendarIndex.from_entries([_entry("c", "2024-12-03"), _entry("a", "2024-12-01")])
        index.add(_entry("b", "2024-12-02"))
        assert index.ids() == ["c", "b", "a"]

    def test_duplicate_seed_leaves_contents(self, december):
        before = december.ids()
        with pytest.raises(DuplicateId):
            december.hydrate([_entry("x", "2024-12-01"), _entry("x", "2024-12-02")])
        assert december.ids() == before

    def test_hydrate_replaces_contents(self, december):
        store_size = len(december.store)
        december.hydrate([_entry("solo", "2024-12-01")])
        assert december.ids() == ["solo"]
        assert len(december) == 1
        assert len(december.store) == 1 and store_size > 1

    def test_shared_store(self):
        store: ValueStore[Entry] = ValueStore()
        index = CalendarIndex.from_entries([_entry("a", "2024-12-01")], store=store)
        assert store.get(index.handle("a")).id == "a"

    def test_order_warning_when_enabled(self, monkeypatch, caplog):
        monkeypatch.setenv("CALENDAR_STATE_VERIFY_SEED_ORDER", "1")
        get_settings.cache_clear()
        with caplog.at_level(logging.WARNING, logger="calendar_state.data.cache.calendar_index"):
            CalendarIndex.from_entries([_entry("a", "2024-12-01"), _entry("b", "2024-12-05")])
        assert "starts after its predecessor" in caplog.text

    def test_no_order_warning_by_default(self, caplog):
        with caplog.at_level(logging.WARNING, logger="calendar_state.data.cache.calendar_index"):
            CalendarIndex.from_entries([_entry("a", "2024-12-01"), _entry("b", "2024-12-05")])
        assert caplog.text == ""
