"""Event name classification endpoint."""

from fastapi import APIRouter, Query

from heatsheet.services.eligibility import Eligibility, classify

router = APIRouter(prefix="/eligibility", tags=["eligibility"])


@router.get("", response_model=Eligibility)
def classify_event_name(name: str = Query(..., min_length=1)) -> Eligibility:
    """Age band and gender class parsed from an event name."""
    return classify(name)
