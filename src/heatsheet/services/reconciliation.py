"""All-or-nothing bulk application of imported entry rows.

A run moves Validating -> Committing -> Done when every row is valid and
places cleanly, and Validating -> Rejected otherwise. A rejected run
returns only errors; no event state leaves the engine and nothing is saved.

Order of work:
    1. Resolve each row's swimmer against the team roster (case-insensitive
       first + last name) and its event by event number. In a dual meet the
       row's team must be the home or away team. Every row is checked;
       problems are collected, not raised.
    2. Manual rows (heat and lane both given) go first, in input order, so
       their exact slots are reserved before anything automatic runs.
    3. Automatic rows follow, per event in input order, with a heat cursor
       that only moves forward. A relay swimmer still joins a lane of their
       own team in an earlier heat while it has room.
"""

from collections import defaultdict
from enum import StrEnum

from pydantic import BaseModel

from heatsheet.logging import get_logger
from heatsheet.models.event import EventState, SwimmerEntry
from heatsheet.models.meet import Meet
from heatsheet.models.swimmer import RosterSwimmer
from heatsheet.services import conflicts
from heatsheet.services.eligibility import is_eligible
from heatsheet.services.entry_errors import (
    EntryError,
    PersistenceError,
    eligibility_mismatch,
    from_exception,
    validation_error,
)
from heatsheet.services.heat_table import HeatTable
from heatsheet.services.import_schemas import ImportRow
from heatsheet.services.placement import LaneAllocator, Placement, PlacementMode
from heatsheet.services.ports import EventStore, RosterLookup

logger = get_logger(__name__)


class ReconcileState(StrEnum):
    DONE = "done"
    REJECTED = "rejected"


class RowPlacement(BaseModel):
    """Where one import row ended up."""

    row_number: int
    event_number: int
    swimmer_id: str
    heat_number: int
    lane_number: int
    mode: PlacementMode


class ReconcileResult(BaseModel):
    """Result of a reconciliation run."""

    state: ReconcileState
    events: dict[str, EventState] = {}
    placements: list[RowPlacement] = []
    errors: list[EntryError] = []
    warnings: list[EntryError] = []
    saved: bool = False

    @property
    def success(self) -> bool:
        return self.state == ReconcileState.DONE

    @classmethod
    def rejected(cls, errors: list[EntryError], warnings: list[EntryError]) -> "ReconcileResult":
        return cls(state=ReconcileState.REJECTED, errors=errors, warnings=warnings)


class _ResolvedRow(BaseModel):
    row: ImportRow
    swimmer: SwimmerEntry
    event: EventState


def event_key(event: EventState) -> str:
    return event.id or f"{event.meet_id}:{event.event_number}"


class ReconciliationEngine:
    """Applies import rows to a meet's heat sheets."""

    def __init__(self, roster_lookup: RosterLookup, event_store: EventStore | None = None):
        self.roster_lookup = roster_lookup
        self.event_store = event_store

    # =========================================================================
    # Store-backed entry point
    # =========================================================================

    def import_entries(
        self,
        meet: Meet,
        rows: list[ImportRow],
        dry_run: bool = False,
        row_errors: list[EntryError] | None = None,
    ) -> ReconcileResult:
        """Load the meet's events, reconcile, and save atomically on success.

        Args:
            meet: The meet being entered
            rows: Parsed import rows
            dry_run: Reconcile without saving
            row_errors: Errors from parsing the input; any of them rejects
                the run, but the parsed rows are still checked so every
                problem is reported at once

        Returns:
            ReconcileResult; saved is True only if the store accepted the write
        """
        if self.event_store is None:
            raise RuntimeError("import_entries needs an event store")

        try:
            events = self.event_store.list_events(meet.id)
        except PersistenceError as e:
            logger.error("reconcile_load_failed", meet_id=meet.id, error=str(e))
            return ReconcileResult.rejected([from_exception(e)], [])

        result = self.reconcile(meet, events, rows)
        if row_errors:
            errors = sorted([*row_errors, *result.errors], key=lambda e: e.row_number or 0)
            logger.info(
                "reconcile_rejected", meet_id=meet.id, errors=len(errors), first_error=errors[0]
            )
            return ReconcileResult.rejected(errors, result.warnings)
        if not result.success or dry_run or not result.events:
            return result

        try:
            saved = self.event_store.save_events(result.events)
        except PersistenceError as e:
            logger.error("reconcile_save_failed", meet_id=meet.id, error=str(e))
            return ReconcileResult.rejected([from_exception(e)], result.warnings)

        logger.info("reconcile_committed", meet_id=meet.id, events=len(saved))
        return result.model_copy(update={"events": saved, "saved": True})

    # =========================================================================
    # Pure reconciliation
    # =========================================================================

    def reconcile(
        self, meet: Meet, events: list[EventState], rows: list[ImportRow]
    ) -> ReconcileResult:
        """Compute the updated events for a batch of rows without saving."""
        logger.info("reconcile_started", meet_id=meet.id, rows=len(rows))

        resolved, errors, warnings = self._resolve(meet, events, rows)

        allocator = LaneAllocator(meet)
        tables: dict[str, HeatTable] = {}
        placements: list[RowPlacement] = []

        def table_for(event: EventState) -> HeatTable:
            key = event_key(event)
            if key not in tables:
                tables[key] = HeatTable.from_event(event, meet.lanes_available)
            return tables[key]

        def apply(item: _ResolvedRow, placement: Placement, from_heat: int = 1) -> int | None:
            key = event_key(item.event)
            table = table_for(item.event)
            error = conflicts.check(
                table, [item.swimmer], placement.heat_number, placement.lane_number
            )
            outcome = None
            if error is None:
                outcome = allocator.place(table, [item.swimmer], placement, from_heat=from_heat)
                error = outcome.error
            if error is not None:
                errors.append(error.for_row(item.row.row_number))
                return None
            tables[key] = outcome.table
            placements.append(
                RowPlacement(
                    row_number=item.row.row_number,
                    event_number=item.event.event_number,
                    swimmer_id=item.swimmer.id,
                    heat_number=outcome.heat_number,
                    lane_number=outcome.lane_number,
                    mode=placement.mode,
                )
            )
            return outcome.heat_number

        # Manual rows reserve their slots first
        for item in resolved:
            if item.row.is_manual:
                apply(item, Placement.manual(item.row.heat_number, item.row.lane_number))

        if errors:
            logger.info(
                "reconcile_rejected", meet_id=meet.id, errors=len(errors), first_error=errors[0]
            )
            return ReconcileResult.rejected(errors, warnings)

        automatic: dict[str, list[_ResolvedRow]] = defaultdict(list)
        for item in resolved:
            if not item.row.is_manual:
                automatic[event_key(item.event)].append(item)

        for items in automatic.values():
            cursor = 1
            for item in items:
                heat_number = apply(item, Placement.automatic(), from_heat=cursor)
                if heat_number is not None:
                    cursor = max(cursor, heat_number)

        if errors:
            logger.info(
                "reconcile_rejected", meet_id=meet.id, errors=len(errors), first_error=errors[0]
            )
            return ReconcileResult.rejected(errors, warnings)

        by_key = {event_key(e): e for e in events}
        updated = {key: table.apply_to(by_key[key]) for key, table in tables.items()}
        logger.info(
            "reconcile_done", meet_id=meet.id, events=len(updated), placements=len(placements)
        )
        return ReconcileResult(
            state=ReconcileState.DONE,
            events=updated,
            placements=placements,
            warnings=warnings,
        )

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def _resolve(
        self, meet: Meet, events: list[EventState], rows: list[ImportRow]
    ) -> tuple[list[_ResolvedRow], list[EntryError], list[EntryError]]:
        """Match rows to roster swimmers and scheduled events."""
        event_map = {e.event_number: e for e in events}
        roster_cache: dict[str, list[RosterSwimmer]] = {}
        resolved: list[_ResolvedRow] = []
        errors: list[EntryError] = []
        warnings: list[EntryError] = []

        for row in rows:
            if not meet.allows_team(row.team):
                errors.append(
                    validation_error(
                        f"Team {row.team} is not competing in {meet}.",
                        field="team",
                        row_number=row.row_number,
                    )
                )
                continue

            try:
                swimmer = self._find_swimmer(row, roster_cache)
            except PersistenceError as e:
                errors.append(from_exception(e).for_row(row.row_number))
                continue

            if swimmer is None:
                errors.append(
                    validation_error(
                        f'Swimmer "{row.swimmer_label}" on team "{row.team}" not found.',
                        field="swimmer",
                        row_number=row.row_number,
                    )
                )

            event = event_map.get(row.event_number)
            if event is None:
                errors.append(
                    validation_error(
                        f"Event #{row.event_number} not found in this meet.",
                        field="event_number",
                        row_number=row.row_number,
                        event_number=row.event_number,
                    )
                )

            if swimmer is None or event is None:
                continue

            if not is_eligible(swimmer, event.name):
                warnings.append(
                    eligibility_mismatch(swimmer.full_name, str(event)).model_copy(
                        update={
                            "row_number": row.row_number,
                            "event_number": event.event_number,
                            "swimmer_id": swimmer.id,
                        }
                    )
                )

            resolved.append(
                _ResolvedRow(
                    row=row,
                    swimmer=SwimmerEntry.from_roster(swimmer, team=row.team),
                    event=event,
                )
            )

        return resolved, errors, warnings

    def _find_swimmer(
        self, row: ImportRow, cache: dict[str, list[RosterSwimmer]]
    ) -> RosterSwimmer | None:
        if row.team not in cache:
            cache[row.team] = self.roster_lookup.get_roster(row.team)
        return next(
            (s for s in cache[row.team] if s.matches_name(row.first_name, row.last_name)),
            None,
        )
