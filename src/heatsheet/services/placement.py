"""Lane allocation: put one swimmer (or one relay group) into a heat and lane."""

from collections.abc import Sequence
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from heatsheet.logging import get_logger
from heatsheet.models.event import SwimmerEntry
from heatsheet.models.meet import Meet
from heatsheet.services.entry_errors import (
    EntryError,
    capacity_exceeded,
    slot_occupied,
    validation_error,
)
from heatsheet.services.heat_table import HeatTable, PlacementPolicy

logger = get_logger(__name__)


class PlacementMode(StrEnum):
    MANUAL = "manual"
    AUTOMATIC = "automatic"


class Placement(BaseModel):
    """Where a caller wants a group to go."""

    model_config = ConfigDict(frozen=True)

    mode: PlacementMode = PlacementMode.AUTOMATIC
    heat_number: int | None = None
    lane_number: int | None = None

    @classmethod
    def manual(cls, heat_number: int, lane_number: int) -> "Placement":
        return cls(mode=PlacementMode.MANUAL, heat_number=heat_number, lane_number=lane_number)

    @classmethod
    def automatic(cls) -> "Placement":
        return cls(mode=PlacementMode.AUTOMATIC)

    @classmethod
    def from_optional(cls, heat_number: int | None, lane_number: int | None) -> "Placement":
        """Manual only when both heat and lane are given."""
        if heat_number is not None and lane_number is not None:
            return cls.manual(heat_number, lane_number)
        return cls.automatic()


class PlacementResult(BaseModel):
    """Outcome of a placement: a new table and its slot, or an error."""

    model_config = ConfigDict(frozen=True)

    table: HeatTable | None = None
    heat_number: int | None = None
    lane_number: int | None = None
    error: EntryError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: EntryError) -> "PlacementResult":
        return cls(error=error)


def policy_for(meet: Meet, team: str | None) -> PlacementPolicy:
    """Home swimmers prefer odd lanes, everyone else even, in dual meets."""
    if not meet.has_home_away:
        return PlacementPolicy.SEQUENTIAL
    if team == meet.home_team_id:
        return PlacementPolicy.ODD_FIRST
    return PlacementPolicy.EVEN_FIRST


class LaneAllocator:
    """Places swimmer groups into a HeatTable for one meet."""

    def __init__(self, meet: Meet):
        self.meet = meet

    def place(
        self,
        table: HeatTable,
        group: Sequence[SwimmerEntry],
        placement: Placement,
        from_heat: int = 1,
    ) -> PlacementResult:
        """Place a group, returning a new normalized table.

        Args:
            table: Current heat sheet; never modified
            group: One swimmer, or up to a lane's worth of relay swimmers
            placement: Manual slot or automatic
            from_heat: First heat automatic placement may open an empty lane in

        Returns:
            PlacementResult carrying the new table or the error
        """
        error = self._check_group(table, group)
        if error:
            return PlacementResult.failed(error)

        if placement.mode == PlacementMode.MANUAL:
            return self.place_manual(table, group, placement.heat_number, placement.lane_number)
        return self.place_automatic(table, group, from_heat=from_heat)

    def place_manual(
        self,
        table: HeatTable,
        group: Sequence[SwimmerEntry],
        heat_number: int | None,
        lane_number: int | None,
    ) -> PlacementResult:
        if not heat_number or heat_number < 1:
            return PlacementResult.failed(
                validation_error(
                    f"Invalid heat number: {heat_number}",
                    field="heat_number",
                    event_number=table.event_number,
                )
            )
        if not lane_number or lane_number < 1 or lane_number > table.lanes_available:
            return PlacementResult.failed(
                capacity_exceeded(table.event_number, lane_number or 0, table.lanes_available)
            )
        if table.room_in(heat_number, lane_number) < len(group):
            logger.info(
                "placement_conflict",
                event_number=table.event_number,
                heat=heat_number,
                lane=lane_number,
            )
            return PlacementResult.failed(
                slot_occupied(table.event_number, heat_number, lane_number, relay=table.is_relay)
            )

        placed = table.add_swimmers(heat_number, lane_number, group).normalize()
        return self._placed(placed, group, heat_number, lane_number, PlacementMode.MANUAL)

    def place_automatic(
        self,
        table: HeatTable,
        group: Sequence[SwimmerEntry],
        from_heat: int = 1,
    ) -> PlacementResult:
        team = group[0].team
        policy = policy_for(self.meet, team)
        slot = table.first_free_lane(policy, group_size=len(group), team=team, from_heat=from_heat)
        if slot is None:
            table, heat_number = table.append_new_heat()
            slot = heat_number, policy.starting_lane(table.lanes_available)
            logger.debug("heat_opened", event_number=table.event_number, heat=heat_number)

        heat_number, lane_number = slot
        placed = table.add_swimmers(heat_number, lane_number, group).normalize()
        return self._placed(placed, group, heat_number, lane_number, PlacementMode.AUTOMATIC)

    def _check_group(self, table: HeatTable, group: Sequence[SwimmerEntry]) -> EntryError | None:
        if not group:
            return validation_error("No swimmers to place", field="swimmer")
        if len(group) > table.lane_capacity:
            return validation_error(
                f"{len(group)} swimmers cannot share a lane in Event #{table.event_number} "
                f"(lane holds {table.lane_capacity})",
                field="swimmer",
                event_number=table.event_number,
            )
        return None

    def _placed(
        self,
        table: HeatTable,
        group: Sequence[SwimmerEntry],
        heat_number: int,
        lane_number: int,
        mode: PlacementMode,
    ) -> PlacementResult:
        logger.debug(
            "entry_placed",
            event_number=table.event_number,
            heat=heat_number,
            lane=lane_number,
            mode=mode.value,
            swimmers=[s.id for s in group],
        )
        return PlacementResult(table=table, heat_number=heat_number, lane_number=lane_number)
