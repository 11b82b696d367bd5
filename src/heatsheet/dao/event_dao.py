"""Data Access Object for scheduled meet events and their heat sheets."""

from postgrest.exceptions import APIError
from supabase import Client

from heatsheet.dao.base import BaseDAO
from heatsheet.logging import get_logger
from heatsheet.models.event import EventState
from heatsheet.services.entry_errors import ConcurrentModificationError, PersistenceError

logger = get_logger(__name__)

# Postgres function that writes a batch of events in one transaction and
# rejects stale versions (see supabase/migrations).
SAVE_EVENTS_RPC = "save_meet_events"
STALE_VERSION_CODE = "40001"


class EventDAO(BaseDAO[EventState]):
    """DAO for meet events. Heats are stored as one JSON document per event."""

    table_name = "meet_events"
    model_class = EventState

    def __init__(self, client: Client | None = None):
        super().__init__(client)

    def load_event(self, event_id: str) -> EventState | None:
        return self.get_by_id(event_id)

    def list_events(self, meet_id: str) -> list[EventState]:
        """All events of a meet, ordered by event number."""
        try:
            result = (
                self.table.select("*").eq("meet_id", meet_id).order("event_number").execute()
            )
        except APIError as e:
            raise PersistenceError(f"Failed to list events for meet {meet_id}: {e.message}") from e
        return [self._to_model(row) for row in result.data]

    def save_events(self, events: dict[str, EventState]) -> dict[str, EventState]:
        """Write all events in a single transaction.

        Each event's version must match the stored version; the function
        bumps it on success.

        Raises:
            ConcurrentModificationError: Some event changed since it was read
            PersistenceError: The write failed; nothing was stored
        """
        payload = [{"id": key, **self._to_db(event)} for key, event in events.items()]
        try:
            result = self.client.rpc(SAVE_EVENTS_RPC, {"events": payload}).execute()
        except APIError as e:
            if e.code == STALE_VERSION_CODE:
                raise self._stale(e, events) from e
            raise PersistenceError(f"Failed to save events: {e.message}") from e

        saved = {row["id"]: self._to_model(row) for row in result.data}
        logger.info("events_saved", count=len(saved))
        return saved

    def _stale(self, error: APIError, events: dict[str, EventState]) -> ConcurrentModificationError:
        # The function reports "<event id>:<stored version>" in the hint
        event_id, _, actual = (error.hint or "").partition(":")
        expected = events[event_id].version if event_id in events else -1
        return ConcurrentModificationError(event_id or "?", expected, int(actual or -1))

    def _to_model(self, row: dict) -> EventState:
        return EventState(
            id=row.get("id"),
            meet_id=row["meet_id"],
            event_number=row["event_number"],
            name=row["name"],
            heats=row.get("heats") or (),
            version=row.get("version") or 0,
        )

    def _to_db(self, model: EventState) -> dict:
        document = model.to_document()
        return {
            "meet_id": model.meet_id,
            "event_number": model.event_number,
            "name": model.name,
            "heats": document["heats"],
            "version": model.version,
        }
