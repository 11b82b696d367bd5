"""Conflict detection ahead of any heat sheet change.

These checks only read the table. They report the first problem found as
an EntryError value, or None when the entry can go ahead.
"""

from collections.abc import Sequence

from heatsheet.models.event import SwimmerEntry
from heatsheet.services.entry_errors import (
    EntryError,
    capacity_exceeded,
    duplicate_entry,
    slot_occupied,
)
from heatsheet.services.heat_table import HeatTable


def find_duplicate(
    table: HeatTable,
    group: Sequence[SwimmerEntry],
    editing_swimmer_id: str | None = None,
) -> EntryError | None:
    """Report a swimmer of the group who is already somewhere in the event.

    editing_swimmer_id names the entry being edited; its current spot does
    not count as a duplicate.
    """
    entered = set(table.swimmer_ids())
    entered.discard(editing_swimmer_id)
    for swimmer in group:
        if swimmer.id in entered:
            return duplicate_entry(swimmer.full_name, swimmer.id, table.event_number)
    return None


def find_slot_conflict(
    table: HeatTable,
    heat_number: int,
    lane_number: int,
    group_size: int = 1,
) -> EntryError | None:
    """Report a manual slot that is out of range, taken, or (relay) full."""
    if lane_number < 1 or lane_number > table.lanes_available:
        return capacity_exceeded(table.event_number, lane_number, table.lanes_available)
    if table.room_in(heat_number, lane_number) < group_size:
        return slot_occupied(table.event_number, heat_number, lane_number, relay=table.is_relay)
    return None


def check(
    table: HeatTable,
    group: Sequence[SwimmerEntry],
    heat_number: int | None = None,
    lane_number: int | None = None,
    editing_swimmer_id: str | None = None,
) -> EntryError | None:
    """Run every check that applies to a pending entry.

    Slot checks only run for manual placements (both heat and lane given).
    """
    error = find_duplicate(table, group, editing_swimmer_id)
    if error:
        return error
    if heat_number is not None and lane_number is not None:
        return find_slot_conflict(table, heat_number, lane_number, len(group))
    return None
