"""In-memory heat sheet of one event.

HeatTable is a frozen value built from an EventState. Every operation that
changes it returns a new table; the original is never touched, so a failed
placement can simply drop the candidate table.

Invariants restored by prune() and normalize() before a table is written
back to an EventState:
    - heats sorted by heat_number, lanes sorted by lane_number
    - no heat without lanes, no lane without swimmers
"""

from collections.abc import Sequence
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from heatsheet.models.event import EventState, Heat, Lane, SwimmerEntry


class PlacementPolicy(StrEnum):
    """Lane preference used by automatic placement."""

    SEQUENTIAL = "sequential"  # Lowest free lane first
    ODD_FIRST = "odd_first"  # Home team in a dual meet
    EVEN_FIRST = "even_first"  # Away team in a dual meet

    def lane_passes(self, lanes_available: int) -> list[list[int]]:
        """Lane numbers to try, grouped into scan passes.

        Each pass is scanned across every heat before the next pass starts,
        so a dual-meet swimmer only lands on the other parity once no heat
        has a lane of their own parity left.
        """
        odd = list(range(1, lanes_available + 1, 2))
        even = list(range(2, lanes_available + 1, 2))
        if self == PlacementPolicy.ODD_FIRST:
            return [odd, even]
        if self == PlacementPolicy.EVEN_FIRST:
            return [even, odd]
        return [list(range(1, lanes_available + 1))]

    def starting_lane(self, lanes_available: int) -> int:
        """Lane used when a fresh heat has to be opened."""
        if self == PlacementPolicy.EVEN_FIRST and lanes_available >= 2:
            return 2
        return 1


class HeatTable(BaseModel):
    """Heats and lanes of one event, plus the pool limits that apply to it."""

    model_config = ConfigDict(frozen=True)

    event_number: int
    lanes_available: int
    lane_capacity: int = 1
    heats: tuple[Heat, ...] = ()

    @classmethod
    def from_event(cls, event: EventState, lanes_available: int) -> "HeatTable":
        return cls(
            event_number=event.event_number,
            lanes_available=lanes_available,
            lane_capacity=event.lane_capacity,
            heats=event.heats,
        )

    def apply_to(self, event: EventState) -> EventState:
        """Write this table back onto an event, in canonical form."""
        return event.model_copy(update={"heats": self.prune().normalize().heats})

    @property
    def is_relay(self) -> bool:
        return self.lane_capacity > 1

    # =========================================================================
    # Queries
    # =========================================================================

    def heat(self, heat_number: int) -> Heat | None:
        return next((h for h in self.heats if h.heat_number == heat_number), None)

    def find_lane(self, heat_number: int, lane_number: int) -> Lane | None:
        heat = self.heat(heat_number)
        return heat.lane(lane_number) if heat else None

    def find_swimmer(self, swimmer_id: str) -> tuple[int, int] | None:
        """Return (heat_number, lane_number) holding the swimmer, if any."""
        for heat in self.heats:
            for lane in heat.lanes:
                if lane.has_swimmer(swimmer_id):
                    return heat.heat_number, lane.lane_number
        return None

    def swimmer_ids(self) -> list[str]:
        return [s.id for heat in self.heats for lane in heat.lanes for s in lane.swimmers]

    def room_in(self, heat_number: int, lane_number: int) -> int:
        """How many more swimmers the lane can take."""
        lane = self.find_lane(heat_number, lane_number)
        used = len(lane.swimmers) if lane else 0
        return max(self.lane_capacity - used, 0)

    @property
    def heat_numbers(self) -> list[int]:
        return sorted(h.heat_number for h in self.heats)

    @property
    def next_heat_number(self) -> int:
        return max(self.heat_numbers, default=0) + 1

    def first_free_lane(
        self,
        policy: PlacementPolicy,
        group_size: int = 1,
        team: str | None = None,
        from_heat: int = 1,
    ) -> tuple[int, int] | None:
        """Find the first lane that can take a group under a placement policy.

        For relays, a partly filled lane already holding the same team is
        preferred over an empty lane, in any heat. Heats before from_heat are
        skipped only when looking for an empty lane. Returns None when no
        existing heat has room, so the caller can open a new heat.
        """
        heats = sorted(self.heats, key=lambda h: h.heat_number)
        if self.is_relay and team is not None:
            for heat in heats:
                for lane in sorted(heat.lanes, key=lambda ln: ln.lane_number):
                    if (
                        not lane.is_empty
                        and lane.lane_number <= self.lanes_available
                        and lane.teams == {team}
                        and self.lane_capacity - len(lane.swimmers) >= group_size
                    ):
                        return heat.heat_number, lane.lane_number

        if group_size > self.lane_capacity:
            return None
        open_heats = [h for h in heats if h.heat_number >= from_heat]
        for lane_numbers in policy.lane_passes(self.lanes_available):
            for heat in open_heats:
                occupied = heat.occupied_lanes
                for lane_number in lane_numbers:
                    if lane_number not in occupied:
                        return heat.heat_number, lane_number
        return None

    # =========================================================================
    # Transformations (each returns a new table)
    # =========================================================================

    def _with_heat(self, heat: Heat) -> "HeatTable":
        others = tuple(h for h in self.heats if h.heat_number != heat.heat_number)
        return self.model_copy(update={"heats": (*others, heat)})

    def reserve_lane(self, heat_number: int, lane_number: int) -> tuple["HeatTable", Lane]:
        """Get a lane, creating its heat and/or the lane itself if missing.

        Idempotent: reserving an existing lane returns it unchanged.
        """
        heat = self.heat(heat_number) or Heat(heat_number=heat_number)
        lane = heat.lane(lane_number)
        if lane is not None:
            return self, lane
        lane = Lane(lane_number=lane_number)
        heat = heat.model_copy(update={"lanes": (*heat.lanes, lane)})
        return self._with_heat(heat), lane

    def add_swimmers(
        self, heat_number: int, lane_number: int, swimmers: Sequence[SwimmerEntry]
    ) -> "HeatTable":
        """Put swimmers into a lane. Capacity is the caller's concern."""
        table, lane = self.reserve_lane(heat_number, lane_number)
        filled = lane.model_copy(update={"swimmers": (*lane.swimmers, *swimmers)})
        heat = table.heat(heat_number)
        lanes = tuple(filled if ln.lane_number == lane_number else ln for ln in heat.lanes)
        return table._with_heat(heat.model_copy(update={"lanes": lanes}))

    def append_new_heat(self) -> tuple["HeatTable", int]:
        """Open an empty heat numbered one past the current highest."""
        heat_number = self.next_heat_number
        return self._with_heat(Heat(heat_number=heat_number)), heat_number

    def remove_swimmer(self, swimmer_id: str) -> "HeatTable":
        """Drop a swimmer from wherever they are, pruning what empties out."""
        heats = tuple(
            heat.model_copy(
                update={
                    "lanes": tuple(
                        lane.model_copy(
                            update={
                                "swimmers": tuple(s for s in lane.swimmers if s.id != swimmer_id)
                            }
                        )
                        for lane in heat.lanes
                    )
                }
            )
            for heat in self.heats
        )
        return self.model_copy(update={"heats": heats}).prune()

    def prune(self) -> "HeatTable":
        """Remove empty lanes, then heats left without lanes."""
        heats = []
        for heat in self.heats:
            lanes = tuple(lane for lane in heat.lanes if not lane.is_empty)
            if lanes:
                heats.append(heat.model_copy(update={"lanes": lanes}))
        return self.model_copy(update={"heats": tuple(heats)})

    def normalize(self) -> "HeatTable":
        """Sort heats by number and lanes within each heat by number."""
        heats = tuple(
            heat.model_copy(
                update={"lanes": tuple(sorted(heat.lanes, key=lambda ln: ln.lane_number))}
            )
            for heat in sorted(self.heats, key=lambda h: h.heat_number)
        )
        return self.model_copy(update={"heats": heats})
