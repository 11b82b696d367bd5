"""Data Access Objects for team rosters and meets."""

from postgrest.exceptions import APIError
from supabase import Client

from heatsheet.config import get_settings
from heatsheet.dao.base import BaseDAO
from heatsheet.models.meet import Meet
from heatsheet.models.swimmer import RosterSwimmer
from heatsheet.services.entry_errors import PersistenceError


class RosterDAO(BaseDAO[RosterSwimmer]):
    """Rosters are one row per team with the swimmers as a JSON array."""

    table_name = "rosters"
    model_class = RosterSwimmer

    def __init__(self, client: Client | None = None):
        super().__init__(client)

    def get_roster(self, team_id: str) -> list[RosterSwimmer]:
        """Swimmers of a team in stored order; an unknown team has none."""
        try:
            result = self.table.select("swimmers").eq("team_id", team_id).execute()
        except APIError as e:
            raise PersistenceError(f"Failed to read roster for {team_id}: {e.message}") from e

        if not result.data:
            return []
        swimmers = result.data[0].get("swimmers") or []
        return [self._to_model({**s, "team": team_id}) for s in swimmers]


class MeetDAO(BaseDAO[Meet]):
    """DAO for meets."""

    table_name = "meets"
    model_class = Meet

    def __init__(self, client: Client | None = None):
        super().__init__(client)

    def get_meet(self, meet_id: str) -> Meet | None:
        return self.get_by_id(meet_id)

    def _to_model(self, row: dict) -> Meet:
        return Meet(
            id=row["id"],
            name=row["name"],
            meet_date=row.get("date"),
            lanes_available=row.get("lanes_available") or get_settings().default_lanes_available,
            home_team_id=row.get("home_team"),
            away_team_id=row.get("away_team"),
        )
