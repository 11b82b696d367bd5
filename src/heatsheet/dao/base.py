"""Base DAO with Supabase client connection."""

from typing import Generic, TypeVar

from postgrest.exceptions import APIError
from pydantic import BaseModel
from supabase import Client, create_client

from heatsheet.config import get_settings
from heatsheet.services.entry_errors import PersistenceError

T = TypeVar("T", bound=BaseModel)


class SupabaseClient:
    """Singleton Supabase client manager."""

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """Get or create the Supabase client."""
        if cls._instance is None:
            settings = get_settings()
            if not settings.has_supabase:
                raise RuntimeError(
                    "SUPABASE_URL and SUPABASE_KEY environment variables must be set"
                )
            key = settings.supabase_service_role_key or settings.supabase_key
            cls._instance = create_client(settings.supabase_url, key.get_secret_value())

        return cls._instance


class BaseDAO(Generic[T]):
    """Base Data Access Object over one Supabase table."""

    table_name: str
    model_class: type[T]

    def __init__(self, client: Client | None = None):
        """Initialize the DAO.

        Args:
            client: Supabase client. If not provided, uses the singleton.
        """
        self.client = client or SupabaseClient.get_client()

    @property
    def table(self):
        return self.client.table(self.table_name)

    def get_by_id(self, id: str) -> T | None:
        """Get a single record by ID.

        Raises:
            PersistenceError: The query failed
        """
        try:
            result = self.table.select("*").eq("id", id).execute()
        except APIError as e:
            raise PersistenceError(f"Failed to read {self.table_name} {id}: {e.message}") from e

        if not result.data:
            return None

        return self._to_model(result.data[0])

    def _to_model(self, row: dict) -> T:
        """Convert a database row to a model instance.

        Override this method for custom mapping logic.
        """
        return self.model_class.model_validate(row)

    def _to_db(self, model: T) -> dict:
        """Convert a model instance to a database row.

        Override this method for custom mapping logic.
        """
        return model.model_dump(mode="json", exclude_none=True)
