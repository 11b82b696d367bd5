"""Tests for event numbering helpers."""

from heatsheet.models import STANDARD_EVENT_LIBRARY
from heatsheet.services.entry_errors import ErrorKind
from heatsheet.services.schedule import (
    move_event,
    remove_events,
    renumber,
    schedule_library_events,
)
from tests.factories import event_with


def schedule(*names: str):
    return [
        event_with({}, name=name, event_number=i, event_id=f"e{i}")
        for i, name in enumerate(names, start=1)
    ]


def numbering(events) -> list[tuple[str, int]]:
    return [(e.id, e.event_number) for e in sorted(events, key=lambda e: e.event_number)]


class TestRenumber:
    """Tests for renumber() and remove_events()."""

    def test_closes_gaps(self):
        events = [
            event_with({}, event_number=2, event_id="a"),
            event_with({}, event_number=7, event_id="b"),
        ]
        assert numbering(renumber(events)) == [("a", 1), ("b", 2)]

    def test_remove_events(self):
        events = schedule("A", "B", "C", "D")
        assert numbering(remove_events(events, {"e2"})) == [("e1", 1), ("e3", 2), ("e4", 3)]


class TestMoveEvent:
    """Tests for move_event()."""

    def test_move_down(self):
        events, error = move_event(schedule("A", "B", "C"), "e1", 3)

        assert error is None
        assert numbering(events) == [("e2", 1), ("e3", 2), ("e1", 3)]

    def test_move_up(self):
        events, error = move_event(schedule("A", "B", "C"), "e3", 1)
        assert numbering(events) == [("e3", 1), ("e1", 2), ("e2", 3)]

    def test_out_of_range(self):
        original = schedule("A", "B")
        events, error = move_event(original, "e1", 3)

        assert error.kind == ErrorKind.VALIDATION
        assert "between 1 and 2" in error.message
        assert events is original

    def test_unknown_event(self):
        _, error = move_event(schedule("A"), "zzz", 1)
        assert error.field == "event"


class TestScheduleLibraryEvents:
    """Tests for schedule_library_events()."""

    def test_appends_after_last_number(self):
        existing = schedule("Girls 6 & Under 25m Freestyle")
        added = schedule_library_events(
            "m1", existing, ["Girls 6 & Under 25m Freestyle", "Boys 6 & Under 25m Freestyle"]
        )

        assert [(e.name, e.event_number) for e in added] == [("Boys 6 & Under 25m Freestyle", 2)]
        assert added[0].meet_id == "m1"

    def test_whole_library(self):
        added = schedule_library_events("m1", [], STANDARD_EVENT_LIBRARY)

        assert len(added) == 66
        assert [e.event_number for e in added] == list(range(1, 67))
        assert added[0].name == "Girls 6 & Under 25m Freestyle"
        assert added[1].name == "Boys 6 & Under 25m Freestyle"
