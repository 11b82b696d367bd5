"""Fixtures for API tests."""

import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient

# Load environment variables before importing app
load_dotenv()

from heatsheet.api.app import create_app  # noqa: E402
from heatsheet.api.dependencies import (  # noqa: E402
    get_event_store,
    get_meet_lookup,
    get_roster_lookup,
)
from heatsheet.dao.memory import (  # noqa: E402
    InMemoryEventStore,
    InMemoryMeetLookup,
    InMemoryRosterLookup,
)
from tests.factories import entry, event_with  # noqa: E402


@pytest.fixture
def event_store() -> InMemoryEventStore:
    """Two events of meet m1; event 1 already has one swimmer in heat 1 lane 1."""
    return InMemoryEventStore(
        [
            event_with({(1, 1): [entry("x1")]}, event_id="e1"),
            event_with({}, name="Mixed 9-10 200m Free Relay", event_number=2, event_id="e2"),
        ]
    )


@pytest.fixture
def client(meet, dual_meet, rosters, event_store) -> TestClient:
    """Provide a test client backed by in-memory stores."""
    app = create_app()

    app.dependency_overrides[get_event_store] = lambda: event_store
    app.dependency_overrides[get_roster_lookup] = lambda: InMemoryRosterLookup(rosters)
    app.dependency_overrides[get_meet_lookup] = lambda: InMemoryMeetLookup([meet, dual_meet])

    return TestClient(app)
