"""Keep a meet's event numbers dense (1..N) as the schedule changes."""

from heatsheet.models.event import EventState
from heatsheet.services.entry_errors import EntryError, validation_error


def renumber(events: list[EventState]) -> list[EventState]:
    """Renumber events 1..N in their current order."""
    ordered = sorted(events, key=lambda e: e.event_number)
    return [
        e if e.event_number == i else e.model_copy(update={"event_number": i})
        for i, e in enumerate(ordered, start=1)
    ]


def move_event(
    events: list[EventState], event_id: str, new_number: int
) -> tuple[list[EventState], EntryError | None]:
    """Move one event to a new position, shifting the others.

    Returns:
        Tuple of (renumbered events, error); on error the input is returned
    """
    ordered = sorted(events, key=lambda e: e.event_number)
    if not 1 <= new_number <= len(ordered):
        return events, validation_error(
            f"Please enter a valid event number between 1 and {len(ordered)}.",
            field="event_number",
        )
    moving = next((e for e in ordered if e.id == event_id), None)
    if moving is None:
        return events, validation_error(f"Event {event_id} not found.", field="event")

    ordered.remove(moving)
    ordered.insert(new_number - 1, moving)
    return [
        e if e.event_number == i else e.model_copy(update={"event_number": i})
        for i, e in enumerate(ordered, start=1)
    ], None


def remove_events(events: list[EventState], event_ids: set[str]) -> list[EventState]:
    """Drop events from the schedule and close the numbering gaps."""
    return renumber([e for e in events if e.id not in event_ids])


def schedule_library_events(
    meet_id: str, existing: list[EventState], names: list[str]
) -> list[EventState]:
    """New events for library names not yet scheduled, numbered after the last one.

    Only the new events are returned; existing ones are untouched.
    """
    scheduled = {e.name for e in existing}
    next_number = max((e.event_number for e in existing), default=0) + 1
    added: list[EventState] = []
    for name in names:
        if name in scheduled:
            continue
        scheduled.add(name)
        added.append(EventState(meet_id=meet_id, event_number=next_number, name=name))
        next_number += 1
    return added
