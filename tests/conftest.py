"""Shared fixtures: meets and rosters."""

import pytest

from heatsheet.models import Meet, RosterSwimmer


@pytest.fixture
def meet() -> Meet:
    """An invitational with 8 lanes."""
    return Meet(id="m1", name="Fall Invitational", lanes_available=8)


@pytest.fixture
def dual_meet() -> Meet:
    """A 6-lane dual meet: WCC at home, RAY away."""
    return Meet(
        id="m2",
        name="WCC vs RAY",
        lanes_available=6,
        home_team_id="WCC",
        away_team_id="RAY",
    )


@pytest.fixture
def rosters() -> dict[str, list[RosterSwimmer]]:
    return {
        "WCC": [
            RosterSwimmer(id="s1", first_name="Ava", last_name="Smith", age=10, gender="F"),
            RosterSwimmer(id="s2", first_name="Mia", last_name="Jones", age=9, gender="F"),
            RosterSwimmer(id="s3", first_name="Leo", last_name="Brown", age=10, gender="M"),
            RosterSwimmer(id="s4", first_name="Zoe", last_name="Clark", age=14, gender="F"),
        ],
        "RAY": [
            RosterSwimmer(id="r1", first_name="Ella", last_name="Gray", age=10, gender="F"),
            RosterSwimmer(id="r2", first_name="Noah", last_name="King", age=10, gender="M"),
        ],
    }
