"""FastAPI dependencies for dependency injection.

Routes depend on the storage ports, not on concrete DAOs, so tests can
swap in MagicMocks or the in-memory stores via app.dependency_overrides:

    app.dependency_overrides[get_event_store] = lambda: InMemoryEventStore(events)
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from supabase import Client, create_client

from heatsheet.config import Settings, get_settings
from heatsheet.dao.event_dao import EventDAO
from heatsheet.dao.roster_dao import MeetDAO, RosterDAO
from heatsheet.services.ports import EventStore, MeetLookup, RosterLookup


def get_settings_dep() -> Settings:
    """Get application settings (dependency wrapper)."""
    return get_settings()


SettingsDep = Annotated[Settings, Depends(get_settings_dep)]


@lru_cache
def get_supabase_client(supabase_url: str, supabase_key: str) -> Client:
    """Create cached Supabase client."""
    return create_client(supabase_url, supabase_key)


def get_supabase(settings: SettingsDep) -> Client:
    """Get Supabase client for database operations."""
    if not settings.has_supabase:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is not configured",
        )
    key = settings.supabase_service_role_key or settings.supabase_key
    return get_supabase_client(settings.supabase_url, key.get_secret_value())


SupabaseDep = Annotated[Client, Depends(get_supabase)]


def get_event_store(client: SupabaseDep) -> EventStore:
    return EventDAO(client)


def get_roster_lookup(client: SupabaseDep) -> RosterLookup:
    return RosterDAO(client)


def get_meet_lookup(client: SupabaseDep) -> MeetLookup:
    return MeetDAO(client)


EventStoreDep = Annotated[EventStore, Depends(get_event_store)]
RosterLookupDep = Annotated[RosterLookup, Depends(get_roster_lookup)]
MeetLookupDep = Annotated[MeetLookup, Depends(get_meet_lookup)]
