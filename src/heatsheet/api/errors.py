"""Translate engine error values into HTTP responses."""

from fastapi import HTTPException, status

from heatsheet.services.entry_errors import EntryError, ErrorKind


def status_for(errors: list[EntryError]) -> int:
    """Pick one status for a batch of errors, most severe cause first.

    Store failures win over conflicts, and conflicts over plain validation
    problems.
    """
    kinds = {e.kind for e in errors}
    if ErrorKind.PERSISTENCE in kinds:
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if ErrorKind.CONCURRENT_MODIFICATION in kinds or any(e.is_conflict for e in errors):
        return status.HTTP_409_CONFLICT
    if any(e.field == "event" for e in errors):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_422_UNPROCESSABLE_ENTITY


def entry_http_error(
    errors: list[EntryError], warnings: list[EntryError] | None = None
) -> HTTPException:
    return HTTPException(
        status_code=status_for(errors),
        detail={
            "errors": [e.model_dump(mode="json", exclude_none=True) for e in errors],
            "warnings": [w.model_dump(mode="json", exclude_none=True) for w in warnings or []],
        },
    )
