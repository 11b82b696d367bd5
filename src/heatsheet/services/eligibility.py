"""Derive age and gender eligibility from free-text event names."""

import re
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from heatsheet.models.event import EventState
from heatsheet.models.swimmer import Gender, RosterSwimmer

MIN_AGE = 0
MAX_AGE = 100


class GenderClass(StrEnum):
    """Who an event is open to."""

    MALE = "male"
    FEMALE = "female"
    MIXED = "mixed"


# Leading tokens that restrict an event to one gender
GENDER_TOKENS: dict[str, GenderClass] = {
    "girls": GenderClass.FEMALE,
    "girl": GenderClass.FEMALE,
    "women": GenderClass.FEMALE,
    "female": GenderClass.FEMALE,
    "ladies": GenderClass.FEMALE,
    "boys": GenderClass.MALE,
    "boy": GenderClass.MALE,
    "men": GenderClass.MALE,
    "male": GenderClass.MALE,
}

# "9-10", "6 & Under", "13 & Over" or a bare "13". Numbers glued to or
# followed by a distance unit ("50m", "25 yd") are not ages.
AGE_PATTERN = re.compile(
    r"\b(\d+)(?:\s*-\s*(\d+))?(?:\s*&\s*(under|over))?\b"
    r"(?!\s*(?:m|y|yd|yds|yards?|meters?|metres?)\b)",
    re.IGNORECASE,
)


class Eligibility(BaseModel):
    """Age band and gender class of an event."""

    model_config = ConfigDict(frozen=True)

    min_age: int = MIN_AGE
    max_age: int = MAX_AGE
    gender_class: GenderClass = GenderClass.MIXED

    def admits(self, age: int, gender: Gender | None) -> bool:
        if not self.min_age <= age <= self.max_age:
            return False
        if self.gender_class == GenderClass.MIXED:
            return True
        if gender is None:
            return False
        expected = Gender.FEMALE if self.gender_class == GenderClass.FEMALE else Gender.MALE
        return gender == expected


def _gender_class(event_name: str) -> GenderClass:
    parts = event_name.strip().lower().split()
    if not parts:
        return GenderClass.MIXED
    token = parts[0].removesuffix("'s").strip(".,:;-")
    return GENDER_TOKENS.get(token, GenderClass.MIXED)


def classify(event_name: str) -> Eligibility:
    """Parse an event name into its eligibility band.

    Examples:
        "Girls 9-10 50m Freestyle"  -> 9..10, female
        "Boys 6 & Under 25m Back"   -> 0..6, male
        "Mixed 13 200m Medley Relay" -> 13..13, mixed
        "Open 100m Freestyle"       -> 0..100, mixed

    Names with no recognizable age band get the widest band so that no
    swimmer is hidden from every event.
    """
    gender_class = _gender_class(event_name)
    match = AGE_PATTERN.search(event_name)
    if not match:
        return Eligibility(gender_class=gender_class)

    first = int(match.group(1))
    second = match.group(2)
    bound = (match.group(3) or "").lower()

    if bound == "under":
        return Eligibility(min_age=MIN_AGE, max_age=first, gender_class=gender_class)
    if bound == "over":
        return Eligibility(min_age=first, max_age=MAX_AGE, gender_class=gender_class)
    if second is not None:
        low, high = sorted((first, int(second)))
        return Eligibility(min_age=low, max_age=high, gender_class=gender_class)
    return Eligibility(min_age=first, max_age=first, gender_class=gender_class)


def is_eligible(swimmer: RosterSwimmer, event_name: str) -> bool:
    return classify(event_name).admits(swimmer.age, swimmer.gender)


def eligible_events(swimmer: RosterSwimmer, events: list[EventState]) -> list[EventState]:
    """Filter a meet's events to those a swimmer may enter, in event order.

    Only a display filter: manual placements outside the band are allowed.
    """
    return sorted(
        (e for e in events if is_eligible(swimmer, e.name)),
        key=lambda e: e.event_number,
    )
