"""Pydantic models for meets, rosters and heat sheets."""

from heatsheet.models.event import (
    INDIVIDUAL_LANE_CAPACITY,
    NO_TIME,
    RELAY_LANE_CAPACITY,
    EventState,
    Heat,
    Lane,
    SwimmerEntry,
)
from heatsheet.models.event_library import STANDARD_EVENT_LIBRARY
from heatsheet.models.meet import DEFAULT_LANES_AVAILABLE, Meet, Team
from heatsheet.models.swimmer import Gender, RosterSwimmer

__all__ = [
    # Event
    "EventState",
    "Heat",
    "INDIVIDUAL_LANE_CAPACITY",
    "Lane",
    "NO_TIME",
    "RELAY_LANE_CAPACITY",
    "STANDARD_EVENT_LIBRARY",
    "SwimmerEntry",
    # Meet
    "DEFAULT_LANES_AVAILABLE",
    "Meet",
    "Team",
    # Swimmer
    "Gender",
    "RosterSwimmer",
]
