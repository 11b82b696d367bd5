"""Health check endpoints."""

from fastapi import APIRouter, HTTPException, status
from postgrest.exceptions import APIError

from heatsheet.api.dependencies import SettingsDep, SupabaseDep
from heatsheet.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

# Every table the assignment engine reads or writes
ENGINE_TABLES = ("meets", "rosters", "meet_events")


@router.get("/health")
def health_check() -> dict:
    """Basic health check."""
    return {"status": "healthy"}


@router.get("/health/ready")
def readiness_check(settings: SettingsDep, client: SupabaseDep) -> dict:
    """Ready once each engine table answers a one-row query.

    A failing table gives 503 with the per-table status as detail.
    """
    tables: dict[str, str] = {}
    for table in ENGINE_TABLES:
        try:
            client.table(table).select("*").limit(1).execute()
        except APIError as e:
            logger.warning("table_unavailable", table=table, error=e.message)
            tables[table] = "unavailable"
        else:
            tables[table] = "ok"

    if any(state != "ok" for state in tables.values()):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": "not_ready", "tables": tables},
        )

    return {
        "status": "ready",
        "environment": settings.environment.value,
        "default_lanes_available": settings.default_lanes_available,
        "tables": tables,
    }
