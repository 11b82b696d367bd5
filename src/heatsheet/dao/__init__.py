"""Storage collaborators for the entry engine."""

from heatsheet.dao.event_dao import EventDAO
from heatsheet.dao.memory import (
    InMemoryEventStore,
    InMemoryMeetLookup,
    InMemoryRosterLookup,
    Snapshot,
    load_snapshot,
    save_snapshot,
)
from heatsheet.dao.roster_dao import MeetDAO, RosterDAO

__all__ = [
    "EventDAO",
    "InMemoryEventStore",
    "InMemoryMeetLookup",
    "InMemoryRosterLookup",
    "MeetDAO",
    "RosterDAO",
    "Snapshot",
    "load_snapshot",
    "save_snapshot",
]
