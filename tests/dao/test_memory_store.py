"""Tests for the in-memory stores and snapshot files."""

import pytest

from heatsheet.dao.memory import (
    InMemoryEventStore,
    InMemoryMeetLookup,
    InMemoryRosterLookup,
    load_snapshot,
    save_snapshot,
)
from heatsheet.services.entry_errors import ConcurrentModificationError
from tests.factories import entry, event_with, layout


class TestInMemoryEventStore:
    """Tests for versioned saves."""

    def test_save_bumps_version(self):
        store = InMemoryEventStore([event_with({}, event_id="e1")])
        event = store.load_event("e1").model_copy(update={"name": "Renamed"})

        saved = store.save_events({"e1": event})

        assert saved["e1"].version == 1
        assert store.load_event("e1").name == "Renamed"

    def test_stale_version_rejects_whole_batch(self):
        store = InMemoryEventStore(
            [event_with({}, event_id="e1"), event_with({}, event_id="e2", event_number=2)]
        )
        store.save_events({"e2": store.load_event("e2")})

        stale = store.load_event("e2").model_copy(update={"version": 0})
        heats = event_with({(1, 1): [entry("a")]}).heats
        fresh = store.load_event("e1").model_copy(update={"heats": heats})

        with pytest.raises(ConcurrentModificationError) as exc:
            store.save_events({"e1": fresh, "e2": stale})

        assert exc.value.event_id == "e2"
        assert (exc.value.expected, exc.value.actual) == (0, 1)
        assert store.load_event("e1").heats == ()

    def test_events_without_id_are_keyed_by_number(self):
        store = InMemoryEventStore([event_with({}, event_id=None, event_number=3)])
        assert store.load_event("m1:3").id == "m1:3"

    def test_list_events_in_number_order(self):
        store = InMemoryEventStore(
            [
                event_with({}, event_id="b", event_number=2),
                event_with({}, event_id="a", event_number=1),
                event_with({}, event_id="z", event_number=1, meet_id="other"),
            ]
        )
        assert [e.id for e in store.list_events("m1")] == ["a", "b"]


class TestSnapshot:
    """Tests for snapshot files."""

    def test_round_trip(self, tmp_path, meet, rosters):
        path = tmp_path / "meet.json"
        events = InMemoryEventStore([event_with({(1, 2): [entry("s1")]}, event_id="e1")])
        save_snapshot(path, InMemoryMeetLookup([meet]), InMemoryRosterLookup(rosters), events)

        meets, roster_lookup, event_store = load_snapshot(path)

        assert meets.get_meet("m1").lanes_available == 8
        assert [s.id for s in roster_lookup.get_roster("RAY")] == ["r1", "r2"]
        assert roster_lookup.get_roster("RAY")[0].team == "RAY"
        assert roster_lookup.get_roster("NOPE") == []
        assert layout(event_store.load_event("e1")) == {(1, 2): ["s1"]}
