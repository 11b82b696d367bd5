"""Single-entry operations: add, edit and remove one swimmer in one event."""

from pydantic import BaseModel

from heatsheet.logging import get_logger
from heatsheet.models.event import EventState, SwimmerEntry
from heatsheet.models.meet import Meet
from heatsheet.models.swimmer import RosterSwimmer
from heatsheet.services import conflicts
from heatsheet.services.entry_errors import (
    EntryError,
    PersistenceError,
    from_exception,
    validation_error,
)
from heatsheet.services.heat_table import HeatTable
from heatsheet.services.placement import LaneAllocator, Placement
from heatsheet.services.ports import EventStore
from heatsheet.services.reconciliation import event_key

logger = get_logger(__name__)


class EntryResult(BaseModel):
    """Outcome of a single-entry operation."""

    event: EventState | None = None
    heat_number: int | None = None
    lane_number: int | None = None
    error: EntryError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: EntryError) -> "EntryResult":
        return cls(error=error)


class EntryListing(BaseModel):
    """One row of the current-entries list."""

    swimmer_id: str
    swimmer_name: str
    team: str | None
    event_id: str | None
    event_number: int
    event_name: str
    heat_number: int
    lane_number: int


def place_entry(
    meet: Meet,
    event: EventState,
    entry: SwimmerEntry,
    heat_number: int | None = None,
    lane_number: int | None = None,
    editing_swimmer_id: str | None = None,
) -> EntryResult:
    """Compute an event with one more entry, without saving anything.

    When editing_swimmer_id is set, that swimmer's current spot is vacated
    first and does not count as a duplicate.
    """
    table = HeatTable.from_event(event, meet.lanes_available)
    if editing_swimmer_id is not None:
        table = table.remove_swimmer(editing_swimmer_id)

    placement = Placement.from_optional(heat_number, lane_number)
    error = conflicts.check(
        table,
        [entry],
        placement.heat_number,
        placement.lane_number,
        editing_swimmer_id=editing_swimmer_id,
    )
    if error:
        return EntryResult.failed(error)

    outcome = LaneAllocator(meet).place(table, [entry], placement)
    if not outcome.ok:
        return EntryResult.failed(outcome.error)
    return EntryResult(
        event=outcome.table.apply_to(event),
        heat_number=outcome.heat_number,
        lane_number=outcome.lane_number,
    )


def _not_entered(event: EventState, swimmer_id: str) -> EntryError:
    return validation_error(
        f"Swimmer {swimmer_id} is not entered in {event}.",
        field="swimmer",
        swimmer_id=swimmer_id,
        event_number=event.event_number,
    )


def list_entries(events: list[EventState], team: str | None = None) -> list[EntryListing]:
    """Every entry across events, by event number then swimmer name."""
    listings = [
        EntryListing(
            swimmer_id=swimmer.id,
            swimmer_name=swimmer.full_name,
            team=swimmer.team,
            event_id=event.id,
            event_number=event.event_number,
            event_name=event.name,
            heat_number=heat_number,
            lane_number=lane_number,
        )
        for event in events
        for heat_number, lane_number, swimmer in event.entries()
        if team is None or swimmer.team == team
    ]
    return sorted(listings, key=lambda e: (e.event_number, e.swimmer_name))


class EntryService:
    """Store-backed single-entry operations."""

    def __init__(self, event_store: EventStore):
        self.event_store = event_store

    def add_entry(
        self,
        meet: Meet,
        event_id: str,
        swimmer: RosterSwimmer,
        team: str | None = None,
        heat_number: int | None = None,
        lane_number: int | None = None,
    ) -> EntryResult:
        """Enter a roster swimmer into an event.

        Both heat and lane given means that exact slot; otherwise the
        allocator picks one.
        """
        return self._place_and_save(meet, event_id, swimmer, team, heat_number, lane_number)

    def update_entry(
        self,
        meet: Meet,
        event_id: str,
        swimmer_id: str,
        swimmer: RosterSwimmer,
        team: str | None = None,
        heat_number: int | None = None,
        lane_number: int | None = None,
    ) -> EntryResult:
        """Replace an existing entry, possibly moving it to a new slot."""
        return self._place_and_save(
            meet, event_id, swimmer, team, heat_number, lane_number, editing_swimmer_id=swimmer_id
        )

    def remove_entry(self, event_id: str, swimmer_id: str) -> EntryResult:
        """Take a swimmer out of an event; emptied lanes and heats disappear."""
        event, error = self._load(event_id)
        if error:
            return EntryResult.failed(error)
        if event.find_swimmer(swimmer_id) is None:
            return EntryResult.failed(_not_entered(event, swimmer_id))

        # Lane limits play no part in removal
        table = HeatTable(event_number=event.event_number, lanes_available=1, heats=event.heats)
        updated = table.remove_swimmer(swimmer_id).apply_to(event)
        result = self._save(updated)
        if result.ok:
            logger.info("entry_removed", event_id=event_id, swimmer_id=swimmer_id)
        return result

    def _place_and_save(
        self,
        meet: Meet,
        event_id: str,
        swimmer: RosterSwimmer,
        team: str | None,
        heat_number: int | None,
        lane_number: int | None,
        editing_swimmer_id: str | None = None,
    ) -> EntryResult:
        team = team or swimmer.team
        if team and not meet.allows_team(team):
            return EntryResult.failed(
                validation_error(f"Team {team} is not competing in {meet}.", field="team")
            )

        event, error = self._load(event_id)
        if error:
            return EntryResult.failed(error)
        if editing_swimmer_id is not None and event.find_swimmer(editing_swimmer_id) is None:
            return EntryResult.failed(_not_entered(event, editing_swimmer_id))

        placed = place_entry(
            meet,
            event,
            SwimmerEntry.from_roster(swimmer, team=team),
            heat_number,
            lane_number,
            editing_swimmer_id=editing_swimmer_id,
        )
        if not placed.ok:
            logger.info(
                "entry_rejected",
                event_id=event_id,
                swimmer_id=swimmer.id,
                kind=placed.error.kind.value,
            )
            return placed

        saved = self._save(placed.event)
        if not saved.ok:
            return saved
        logger.info(
            "entry_updated" if editing_swimmer_id else "entry_added",
            event_id=event_id,
            swimmer_id=swimmer.id,
            heat=placed.heat_number,
            lane=placed.lane_number,
        )
        return saved.model_copy(
            update={"heat_number": placed.heat_number, "lane_number": placed.lane_number}
        )

    def _load(self, event_id: str) -> tuple[EventState | None, EntryError | None]:
        try:
            event = self.event_store.load_event(event_id)
        except PersistenceError as e:
            return None, from_exception(e)
        if event is None:
            return None, validation_error(f"Event {event_id} not found.", field="event")
        return event, None

    def _save(self, event: EventState) -> EntryResult:
        key = event_key(event)
        try:
            saved = self.event_store.save_events({key: event})
        except PersistenceError as e:
            logger.error("entry_save_failed", event=key, error=str(e))
            return EntryResult.failed(from_exception(e))
        return EntryResult(event=saved[key])
