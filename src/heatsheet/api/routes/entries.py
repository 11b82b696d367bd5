"""Entry endpoints: bulk import and single-entry add, edit and remove.

Engine errors come back as values; these routes only translate them to
HTTP statuses (see heatsheet.api.errors).
"""

from typing import Any

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from heatsheet import get_logger
from heatsheet.api.dependencies import EventStoreDep, MeetLookupDep, RosterLookupDep
from heatsheet.api.errors import entry_http_error
from heatsheet.models import EventState, Meet, RosterSwimmer
from heatsheet.services.entry_errors import PersistenceError, from_exception
from heatsheet.services.entry_service import EntryResult, EntryService
from heatsheet.services.import_schemas import rows_from_records
from heatsheet.services.ports import EventStore, MeetLookup, RosterLookup
from heatsheet.services.reconciliation import ReconcileResult, ReconciliationEngine

logger = get_logger(__name__)

router = APIRouter(tags=["entries"])


# =============================================================================
# REQUEST/RESPONSE SCHEMAS
# =============================================================================


class ImportRequest(BaseModel):
    """Request body for a bulk import: one mapping per entry line."""

    rows: list[dict[str, Any]]


class EntryCreate(BaseModel):
    """Request body for entering a roster swimmer into an event."""

    swimmer_id: str
    team: str
    heat_number: int | None = Field(default=None, ge=1)
    lane_number: int | None = Field(default=None, ge=1)


class EntryUpdate(BaseModel):
    """Request body for moving an entry; no heat/lane means re-place automatically."""

    heat_number: int | None = Field(default=None, ge=1)
    lane_number: int | None = Field(default=None, ge=1)


class EntryResponse(BaseModel):
    """Where the swimmer landed, plus the saved event."""

    heat_number: int | None
    lane_number: int | None
    event: EventState


# =============================================================================
# HELPERS
# =============================================================================


def _get_meet(meets: MeetLookup, meet_id: str) -> Meet:
    try:
        meet = meets.get_meet(meet_id)
    except PersistenceError as e:
        raise entry_http_error([from_exception(e)]) from e
    if meet is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Meet not found")
    return meet


def _get_event_and_meet(
    events: EventStore, meets: MeetLookup, event_id: str
) -> tuple[EventState, Meet]:
    try:
        event = events.load_event(event_id)
    except PersistenceError as e:
        raise entry_http_error([from_exception(e)]) from e
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event, _get_meet(meets, event.meet_id)


def _get_swimmer(rosters: RosterLookup, team: str, swimmer_id: str) -> RosterSwimmer:
    try:
        roster = rosters.get_roster(team)
    except PersistenceError as e:
        raise entry_http_error([from_exception(e)]) from e
    swimmer = next((s for s in roster if s.id == swimmer_id), None)
    if swimmer is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Swimmer {swimmer_id} not found on team {team}",
        )
    return swimmer


def _entry_response(result: EntryResult) -> EntryResponse:
    if not result.ok:
        raise entry_http_error([result.error])
    return EntryResponse(
        heat_number=result.heat_number,
        lane_number=result.lane_number,
        event=result.event,
    )


# =============================================================================
# BULK IMPORT
# =============================================================================


@router.post("/meets/{meet_id}/entries/import", response_model=ReconcileResult)
def import_entries(
    meet_id: str,
    data: ImportRequest,
    meets: MeetLookupDep,
    rosters: RosterLookupDep,
    events: EventStoreDep,
    dry_run: bool = Query(default=False),
) -> ReconcileResult:
    """Apply a batch of entry lines to a meet. All rows land or none do."""
    meet = _get_meet(meets, meet_id)
    rows, row_errors = rows_from_records(data.rows)

    engine = ReconciliationEngine(rosters, events)
    result = engine.import_entries(meet, rows, dry_run=dry_run, row_errors=row_errors)
    if not result.success:
        logger.info("import_rejected", meet_id=meet_id, errors=len(result.errors))
        raise entry_http_error(result.errors, result.warnings)

    logger.info(
        "import_accepted",
        meet_id=meet_id,
        placements=len(result.placements),
        dry_run=dry_run,
    )
    return result


# =============================================================================
# SINGLE ENTRIES
# =============================================================================


@router.post(
    "/events/{event_id}/entries",
    response_model=EntryResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_entry(
    event_id: str,
    data: EntryCreate,
    meets: MeetLookupDep,
    rosters: RosterLookupDep,
    events: EventStoreDep,
) -> EntryResponse:
    """Enter a swimmer; both heat and lane given means that exact slot."""
    _, meet = _get_event_and_meet(events, meets, event_id)
    swimmer = _get_swimmer(rosters, data.team, data.swimmer_id)

    result = EntryService(events).add_entry(
        meet,
        event_id,
        swimmer,
        team=data.team,
        heat_number=data.heat_number,
        lane_number=data.lane_number,
    )
    return _entry_response(result)


@router.put("/events/{event_id}/entries/{swimmer_id}", response_model=EntryResponse)
def update_entry(
    event_id: str,
    swimmer_id: str,
    data: EntryUpdate,
    meets: MeetLookupDep,
    rosters: RosterLookupDep,
    events: EventStoreDep,
) -> EntryResponse:
    """Move an existing entry to another slot."""
    event, meet = _get_event_and_meet(events, meets, event_id)
    current = next((s for _, _, s in event.entries() if s.id == swimmer_id), None)
    if current is None or current.team is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found")
    swimmer = _get_swimmer(rosters, current.team, swimmer_id)

    result = EntryService(events).update_entry(
        meet,
        event_id,
        swimmer_id,
        swimmer,
        team=current.team,
        heat_number=data.heat_number,
        lane_number=data.lane_number,
    )
    return _entry_response(result)


@router.delete("/events/{event_id}/entries/{swimmer_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_entry(event_id: str, swimmer_id: str, events: EventStoreDep) -> None:
    """Take a swimmer out of an event."""
    result = EntryService(events).remove_entry(event_id, swimmer_id)
    if not result.ok:
        if result.error.field in ("event", "swimmer"):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error.message)
        raise entry_http_error([result.error])
