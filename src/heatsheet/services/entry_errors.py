"""Error values returned by the entry assignment engine.

Engine operations never raise for expected failures. They return an
EntryError (or a list of them) inside a result object, and the caller
decides how to surface it. Storage adapters raise the exceptions at the
bottom of this module; the engine converts those to values as well.
"""

from enum import StrEnum

from pydantic import BaseModel


class Severity(StrEnum):
    """Error severity levels."""

    ERROR = "error"
    WARNING = "warning"


class ErrorKind(StrEnum):
    """What went wrong."""

    VALIDATION = "validation"  # Missing field, unparsable row, unknown swimmer/event
    ELIGIBILITY_MISMATCH = "eligibility_mismatch"  # Advisory only
    DUPLICATE_ENTRY = "duplicate_entry"  # Swimmer already in the event
    SLOT_OCCUPIED = "slot_occupied"  # Lane taken (or relay lane full)
    CAPACITY_EXCEEDED = "capacity_exceeded"  # Lane number beyond the pool
    PERSISTENCE = "persistence"  # Store read/write failed
    CONCURRENT_MODIFICATION = "concurrent_modification"  # Stale event version


CONFLICT_KINDS = frozenset(
    {ErrorKind.DUPLICATE_ENTRY, ErrorKind.SLOT_OCCUPIED, ErrorKind.CAPACITY_EXCEEDED}
)


class EntryError(BaseModel):
    """A single engine error or warning."""

    kind: ErrorKind
    message: str
    severity: Severity = Severity.ERROR
    row_number: int | None = None
    field: str | None = None
    event_number: int | None = None
    heat_number: int | None = None
    lane_number: int | None = None
    swimmer_id: str | None = None

    @property
    def is_conflict(self) -> bool:
        return self.kind in CONFLICT_KINDS

    def for_row(self, row_number: int) -> "EntryError":
        """Copy of this error tagged with an import row number."""
        return self.model_copy(update={"row_number": row_number})

    def __str__(self) -> str:
        prefix = f"Line {self.row_number}: " if self.row_number is not None else ""
        return f"{prefix}{self.message}"


def validation_error(message: str, field: str = "row", **context) -> EntryError:
    return EntryError(kind=ErrorKind.VALIDATION, message=message, field=field, **context)


def duplicate_entry(swimmer_name: str, swimmer_id: str, event_number: int) -> EntryError:
    return EntryError(
        kind=ErrorKind.DUPLICATE_ENTRY,
        message=f"{swimmer_name} is already entered in Event #{event_number}.",
        field="swimmer",
        swimmer_id=swimmer_id,
        event_number=event_number,
    )


def slot_occupied(
    event_number: int, heat_number: int, lane_number: int, relay: bool = False
) -> EntryError:
    state = "full" if relay else "occupied"
    return EntryError(
        kind=ErrorKind.SLOT_OCCUPIED,
        message=(
            f"Conflict: Lane {lane_number} in Event #{event_number}, "
            f"Heat {heat_number} is {state}."
        ),
        field="lane_number",
        event_number=event_number,
        heat_number=heat_number,
        lane_number=lane_number,
    )


def capacity_exceeded(event_number: int, lane_number: int, lanes_available: int) -> EntryError:
    return EntryError(
        kind=ErrorKind.CAPACITY_EXCEEDED,
        message=f"Invalid lane {lane_number}. Only {lanes_available} lanes are available.",
        field="lane_number",
        event_number=event_number,
        lane_number=lane_number,
    )


def eligibility_mismatch(swimmer_name: str, event_label: str) -> EntryError:
    return EntryError(
        kind=ErrorKind.ELIGIBILITY_MISMATCH,
        message=f"{swimmer_name} is outside the age/gender band of {event_label}.",
        severity=Severity.WARNING,
        field="event_number",
    )


class PersistenceError(Exception):
    """The event store failed to read or write."""


class ConcurrentModificationError(PersistenceError):
    """A save was based on a stale event version."""

    def __init__(self, event_id: str, expected: int, actual: int):
        self.event_id = event_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Event {event_id} was modified by someone else "
            f"(based on version {expected}, store has {actual})"
        )


def from_exception(exc: PersistenceError) -> EntryError:
    """Convert a storage exception into an error value."""
    kind = (
        ErrorKind.CONCURRENT_MODIFICATION
        if isinstance(exc, ConcurrentModificationError)
        else ErrorKind.PERSISTENCE
    )
    return EntryError(kind=kind, message=str(exc), field="store")
