"""Tests for entry and eligibility API endpoints."""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from heatsheet.api.dependencies import get_event_store, get_supabase
from heatsheet.services.entry_errors import PersistenceError
from tests.factories import layout


def import_row(first: str, last: str, event_number: int = 1, **kw) -> dict:
    return {
        "team": "WCC",
        "first_name": first,
        "last_name": last,
        "event_number": event_number,
        **kw,
    }


class TestHealth:
    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_ready_checks_every_table(self, client: TestClient):
        supabase = MagicMock()
        client.app.dependency_overrides[get_supabase] = lambda: supabase

        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["tables"] == {"meets": "ok", "rosters": "ok", "meet_events": "ok"}
        assert [c.args[0] for c in supabase.table.call_args_list] == [
            "meets",
            "rosters",
            "meet_events",
        ]

    def test_not_ready_when_a_table_fails(self, client: TestClient):
        supabase = MagicMock()
        broken = MagicMock()
        broken.select.return_value.limit.return_value.execute.side_effect = APIError(
            {"message": "relation does not exist", "code": "42P01", "hint": None, "details": None}
        )
        supabase.table.side_effect = lambda name: broken if name == "rosters" else MagicMock()
        client.app.dependency_overrides[get_supabase] = lambda: supabase

        response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["detail"]["tables"]["rosters"] == "unavailable"
        assert response.json()["detail"]["tables"]["meets"] == "ok"


class TestEligibilityEndpoint:
    """Test GET /api/v1/eligibility."""

    def test_classify(self, client: TestClient):
        response = client.get("/api/v1/eligibility", params={"name": "Boys 6 & Under 25m Back"})

        assert response.status_code == 200
        assert response.json() == {"min_age": 0, "max_age": 6, "gender_class": "male"}

    def test_name_required(self, client: TestClient):
        response = client.get("/api/v1/eligibility")
        assert response.status_code == 422


class TestImportEndpoint:
    """Test POST /api/v1/meets/{meet_id}/entries/import."""

    def test_import_commits(self, client: TestClient, event_store):
        payload = {"rows": [import_row("Ava", "Smith"), import_row("Mia", "Jones", 1)]}

        response = client.post("/api/v1/meets/m1/entries/import", json=payload)

        assert response.status_code == 200, response.text
        body = response.json()
        assert body["state"] == "done"
        assert body["saved"] is True
        assert body["events"]["e1"]["eventNumber"] == 1
        assert layout(event_store.load_event("e1")) == {
            (1, 1): ["x1"],
            (1, 2): ["s1"],
            (1, 3): ["s2"],
        }

    def test_dry_run(self, client: TestClient, event_store):
        payload = {"rows": [import_row("Ava", "Smith")]}

        response = client.post(
            "/api/v1/meets/m1/entries/import", params={"dry_run": True}, json=payload
        )

        assert response.status_code == 200
        assert response.json()["saved"] is False
        assert event_store.load_event("e1").version == 0

    def test_unknown_swimmer_rejected(self, client: TestClient, event_store):
        payload = {
            "rows": [
                import_row("Ava", "Smith"),
                import_row("Nobody", "Here"),
                import_row("Mia", "Jones"),
            ]
        }

        response = client.post("/api/v1/meets/m1/entries/import", json=payload)

        assert response.status_code == 422
        errors = response.json()["detail"]["errors"]
        assert len(errors) == 1
        assert errors[0]["row_number"] == 2
        assert event_store.load_event("e1").version == 0

    def test_slot_conflict_is_409(self, client: TestClient):
        payload = {"rows": [import_row("Ava", "Smith", heat_number=1, lane_number=1)]}

        response = client.post("/api/v1/meets/m1/entries/import", json=payload)

        assert response.status_code == 409
        assert response.json()["detail"]["errors"][0]["kind"] == "slot_occupied"

    def test_bad_row_reported(self, client: TestClient):
        payload = {"rows": [import_row("Ava", "Smith", event_number="x")]}

        response = client.post("/api/v1/meets/m1/entries/import", json=payload)

        assert response.status_code == 422
        assert response.json()["detail"]["errors"][0]["field"] == "event_number"

    def test_unknown_meet(self, client: TestClient):
        response = client.post("/api/v1/meets/nope/entries/import", json={"rows": []})
        assert response.status_code == 404

    def test_store_failure_is_503(self, client: TestClient):
        store = MagicMock()
        store.list_events.side_effect = PersistenceError("database down")
        client.app.dependency_overrides[get_event_store] = lambda: store

        response = client.post(
            "/api/v1/meets/m1/entries/import", json={"rows": [import_row("Ava", "Smith")]}
        )

        assert response.status_code == 503


class TestSingleEntryEndpoints:
    """Test add, move and remove of one entry."""

    def test_add_entry(self, client: TestClient, event_store):
        response = client.post(
            "/api/v1/events/e1/entries", json={"swimmer_id": "s1", "team": "WCC"}
        )

        assert response.status_code == 201, response.text
        body = response.json()
        assert (body["heat_number"], body["lane_number"]) == (1, 2)
        assert body["event"]["version"] == 1
        assert layout(event_store.load_event("e1"))[(1, 2)] == ["s1"]

    def test_add_duplicate_is_409(self, client: TestClient):
        client.post("/api/v1/events/e1/entries", json={"swimmer_id": "s1", "team": "WCC"})
        response = client.post(
            "/api/v1/events/e1/entries", json={"swimmer_id": "s1", "team": "WCC"}
        )

        assert response.status_code == 409
        assert response.json()["detail"]["errors"][0]["kind"] == "duplicate_entry"

    def test_add_lane_beyond_pool(self, client: TestClient):
        response = client.post(
            "/api/v1/events/e1/entries",
            json={"swimmer_id": "s1", "team": "WCC", "heat_number": 1, "lane_number": 9},
        )

        assert response.status_code == 409
        assert response.json()["detail"]["errors"][0]["kind"] == "capacity_exceeded"

    def test_add_zero_heat_rejected(self, client: TestClient, event_store):
        response = client.post(
            "/api/v1/events/e1/entries",
            json={"swimmer_id": "s1", "team": "WCC", "heat_number": 0, "lane_number": 3},
        )

        assert response.status_code == 422
        assert event_store.load_event("e1").version == 0

    def test_move_to_negative_lane_rejected(self, client: TestClient, event_store):
        client.post("/api/v1/events/e1/entries", json={"swimmer_id": "s1", "team": "WCC"})

        response = client.put(
            "/api/v1/events/e1/entries/s1", json={"heat_number": 1, "lane_number": -1}
        )

        assert response.status_code == 422
        assert layout(event_store.load_event("e1"))[(1, 2)] == ["s1"]

    def test_add_unknown_swimmer(self, client: TestClient):
        response = client.post(
            "/api/v1/events/e1/entries", json={"swimmer_id": "zz", "team": "WCC"}
        )
        assert response.status_code == 404

    def test_add_unknown_event(self, client: TestClient):
        response = client.post(
            "/api/v1/events/nope/entries", json={"swimmer_id": "s1", "team": "WCC"}
        )
        assert response.status_code == 404

    def test_relay_lane_shared(self, client: TestClient, event_store):
        for swimmer_id in ("s1", "s2"):
            response = client.post(
                "/api/v1/events/e2/entries",
                json={
                    "swimmer_id": swimmer_id,
                    "team": "WCC",
                    "heat_number": 1,
                    "lane_number": 3,
                },
            )
            assert response.status_code == 201

        assert layout(event_store.load_event("e2")) == {(1, 3): ["s1", "s2"]}

    def test_move_entry(self, client: TestClient, event_store):
        client.post("/api/v1/events/e1/entries", json={"swimmer_id": "s1", "team": "WCC"})

        response = client.put(
            "/api/v1/events/e1/entries/s1", json={"heat_number": 2, "lane_number": 4}
        )

        assert response.status_code == 200, response.text
        assert layout(event_store.load_event("e1")) == {(1, 1): ["x1"], (2, 4): ["s1"]}

    def test_remove_entry(self, client: TestClient, event_store):
        client.post("/api/v1/events/e1/entries", json={"swimmer_id": "s1", "team": "WCC"})

        response = client.delete("/api/v1/events/e1/entries/s1")

        assert response.status_code == 204
        assert layout(event_store.load_event("e1")) == {(1, 1): ["x1"]}

    def test_remove_missing_entry(self, client: TestClient):
        response = client.delete("/api/v1/events/e1/entries/ghost")
        assert response.status_code == 404
