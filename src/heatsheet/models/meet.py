"""Meet and team models."""

import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_LANES_AVAILABLE = 8


class Team(BaseModel):
    """A club entered in meets. The id doubles as the roster key (e.g. 'WCC')."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str
    full_name: str | None = None

    def __str__(self) -> str:
        return self.full_name or self.id


class Meet(BaseModel):
    """A swim meet.

    A dual meet sets both home and away teams; the allocator then separates
    the two teams across odd and even lanes.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str | None = None
    name: str
    meet_date: datetime.date | None = Field(default=None, alias="date")
    lanes_available: int = Field(default=DEFAULT_LANES_AVAILABLE, ge=1, le=12)
    home_team_id: str | None = Field(default=None, alias="homeTeam")
    away_team_id: str | None = Field(default=None, alias="awayTeam")

    @property
    def has_home_away(self) -> bool:
        return bool(self.home_team_id and self.away_team_id)

    def allows_team(self, team_id: str) -> bool:
        """Dual meets only take the home and away teams; invitationals take anyone."""
        if not self.home_team_id:
            return True
        return team_id in (self.home_team_id, self.away_team_id)

    def __str__(self) -> str:
        return self.name
