"""Collaborator interfaces the engine is given at construction time.

The Supabase DAOs and the in-memory stores in heatsheet.dao both satisfy
these protocols.
"""

from typing import Protocol

from heatsheet.models.event import EventState
from heatsheet.models.meet import Meet
from heatsheet.models.swimmer import RosterSwimmer


class RosterLookup(Protocol):
    def get_roster(self, team_id: str) -> list[RosterSwimmer]:
        """Return a team's roster in roster order; unknown teams give []."""
        ...


class MeetLookup(Protocol):
    def get_meet(self, meet_id: str) -> Meet | None: ...


class EventStore(Protocol):
    def load_event(self, event_id: str) -> EventState | None: ...

    def list_events(self, meet_id: str) -> list[EventState]:
        """All scheduled events of a meet, ordered by event number."""
        ...

    def save_events(self, events: dict[str, EventState]) -> dict[str, EventState]:
        """Atomically write every given event or none of them.

        Raises:
            PersistenceError: The write failed; nothing was stored
            ConcurrentModificationError: An event's version is stale
        """
        ...
