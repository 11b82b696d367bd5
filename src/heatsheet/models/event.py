"""Scheduled event models: heats, lanes and the swimmers placed in them.

All of these are frozen values. Operations that change a heat sheet build a
new EventState rather than editing one in place.

Serialized shape (by_alias):
    {meetId, eventNumber, name, version,
     heats: [{heatNumber, lanes: [{laneNumber, swimmers: [{id, firstName,
     lastName, team, seedTime}]}]}]}
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from heatsheet.models.swimmer import Gender, RosterSwimmer

NO_TIME = "NT"
INDIVIDUAL_LANE_CAPACITY = 1
RELAY_LANE_CAPACITY = 4

_VALUE_CONFIG = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class SwimmerEntry(BaseModel):
    """A roster swimmer copied into a lane at assignment time."""

    model_config = _VALUE_CONFIG

    id: str
    first_name: str
    last_name: str
    team: str | None = None
    seed_time: str = NO_TIME
    age: int | None = None
    gender: Gender | None = None

    @classmethod
    def from_roster(cls, swimmer: RosterSwimmer, team: str | None = None) -> "SwimmerEntry":
        return cls(
            id=swimmer.id,
            first_name=swimmer.first_name,
            last_name=swimmer.last_name,
            team=team or swimmer.team,
            age=swimmer.age,
            gender=swimmer.gender,
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Lane(BaseModel):
    """One lane of a heat."""

    model_config = _VALUE_CONFIG

    lane_number: int = Field(ge=1)
    swimmers: tuple[SwimmerEntry, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.swimmers

    @property
    def teams(self) -> set[str | None]:
        return {s.team for s in self.swimmers}

    def has_swimmer(self, swimmer_id: str) -> bool:
        return any(s.id == swimmer_id for s in self.swimmers)


class Heat(BaseModel):
    """One race of an event."""

    model_config = _VALUE_CONFIG

    heat_number: int = Field(ge=1)
    lanes: tuple[Lane, ...] = ()

    def lane(self, lane_number: int) -> Lane | None:
        return next((lane for lane in self.lanes if lane.lane_number == lane_number), None)

    @property
    def occupied_lanes(self) -> set[int]:
        return {lane.lane_number for lane in self.lanes if not lane.is_empty}


class EventState(BaseModel):
    """A scheduled event of a meet together with its heat sheet."""

    model_config = _VALUE_CONFIG

    id: str | None = None
    meet_id: str
    event_number: int = Field(ge=1)
    name: str
    heats: tuple[Heat, ...] = ()
    version: int = 0

    @property
    def is_relay(self) -> bool:
        return "relay" in self.name.lower()

    @property
    def lane_capacity(self) -> int:
        return RELAY_LANE_CAPACITY if self.is_relay else INDIVIDUAL_LANE_CAPACITY

    def find_swimmer(self, swimmer_id: str) -> tuple[int, int] | None:
        """Return (heat_number, lane_number) holding the swimmer, if any."""
        for heat in self.heats:
            for lane in heat.lanes:
                if lane.has_swimmer(swimmer_id):
                    return heat.heat_number, lane.lane_number
        return None

    def entries(self) -> list[tuple[int, int, SwimmerEntry]]:
        """Flatten the heat sheet into (heat, lane, swimmer) triples."""
        return [
            (heat.heat_number, lane.lane_number, swimmer)
            for heat in self.heats
            for lane in heat.lanes
            for swimmer in lane.swimmers
        ]

    def to_document(self) -> dict:
        """Serialize to the stored document shape (camelCase, no id)."""
        return self.model_dump(by_alias=True, exclude={"id"}, exclude_none=True, mode="json")

    def __str__(self) -> str:
        return f"E{self.event_number} {self.name}"
