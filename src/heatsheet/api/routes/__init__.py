"""API route modules."""

from heatsheet.api.routes.eligibility import router as eligibility_router
from heatsheet.api.routes.entries import router as entries_router
from heatsheet.api.routes.health import router as health_router

__all__ = [
    "eligibility_router",
    "entries_router",
    "health_router",
]
