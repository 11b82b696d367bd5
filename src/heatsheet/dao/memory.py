"""In-memory stores with the same contracts as the Supabase DAOs.

Used by the tests and by the CLI's --data mode, where a JSON snapshot file
stands in for the database.
"""

from pathlib import Path

from pydantic import BaseModel

from heatsheet.logging import get_logger
from heatsheet.models.event import EventState
from heatsheet.models.meet import Meet
from heatsheet.models.swimmer import RosterSwimmer
from heatsheet.services.entry_errors import ConcurrentModificationError

logger = get_logger(__name__)


class Snapshot(BaseModel):
    """Everything the engine reads or writes, as one JSON document."""

    meets: list[Meet] = []
    rosters: dict[str, list[RosterSwimmer]] = {}
    events: list[EventState] = []


class InMemoryRosterLookup:
    def __init__(self, rosters: dict[str, list[RosterSwimmer]] | None = None):
        self.rosters = rosters or {}

    def get_roster(self, team_id: str) -> list[RosterSwimmer]:
        return [s.model_copy(update={"team": team_id}) for s in self.rosters.get(team_id, [])]


class InMemoryMeetLookup:
    def __init__(self, meets: list[Meet] | None = None):
        self.meets = {m.id: m for m in meets or []}

    def get_meet(self, meet_id: str) -> Meet | None:
        return self.meets.get(meet_id)


class InMemoryEventStore:
    """Event store keyed by event id, with version checks on save."""

    def __init__(self, events: list[EventState] | None = None):
        self.events: dict[str, EventState] = {}
        for event in events or []:
            key = event.id or f"{event.meet_id}:{event.event_number}"
            self.events[key] = event.model_copy(update={"id": key})

    def load_event(self, event_id: str) -> EventState | None:
        return self.events.get(event_id)

    def list_events(self, meet_id: str) -> list[EventState]:
        return sorted(
            (e for e in self.events.values() if e.meet_id == meet_id),
            key=lambda e: e.event_number,
        )

    def save_events(self, events: dict[str, EventState]) -> dict[str, EventState]:
        """Apply every event or none: versions are all checked before any write."""
        for key, event in events.items():
            stored = self.events.get(key)
            stored_version = stored.version if stored else 0
            if event.version != stored_version:
                raise ConcurrentModificationError(key, event.version, stored_version)

        saved = {
            key: event.model_copy(update={"id": key, "version": event.version + 1})
            for key, event in events.items()
        }
        self.events.update(saved)
        logger.debug("events_saved", count=len(saved))
        return saved


def load_snapshot(
    path: Path,
) -> tuple[InMemoryMeetLookup, InMemoryRosterLookup, InMemoryEventStore]:
    """Build in-memory stores from a snapshot file."""
    snapshot = Snapshot.model_validate_json(path.read_text(encoding="utf-8"))
    return (
        InMemoryMeetLookup(snapshot.meets),
        InMemoryRosterLookup(snapshot.rosters),
        InMemoryEventStore(snapshot.events),
    )


def save_snapshot(
    path: Path,
    meets: InMemoryMeetLookup,
    rosters: InMemoryRosterLookup,
    events: InMemoryEventStore,
) -> None:
    snapshot = Snapshot(
        meets=list(meets.meets.values()),
        rosters=rosters.rosters,
        events=list(events.events.values()),
    )
    path.write_text(snapshot.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
