"""Tests for the HeatTable value and its placement policies."""

from heatsheet.services.heat_table import HeatTable, PlacementPolicy
from tests.factories import entry, event_with, layout


def table_of(slots, lanes_available: int = 8, lane_capacity: int = 1) -> HeatTable:
    event = event_with(slots)
    return HeatTable(
        event_number=event.event_number,
        lanes_available=lanes_available,
        lane_capacity=lane_capacity,
        heats=event.heats,
    )


class TestPlacementPolicy:
    """Tests for lane scan order."""

    def test_sequential_single_pass(self):
        assert PlacementPolicy.SEQUENTIAL.lane_passes(4) == [[1, 2, 3, 4]]

    def test_odd_first(self):
        assert PlacementPolicy.ODD_FIRST.lane_passes(6) == [[1, 3, 5], [2, 4, 6]]

    def test_even_first(self):
        assert PlacementPolicy.EVEN_FIRST.lane_passes(5) == [[2, 4], [1, 3, 5]]

    def test_starting_lane(self):
        """A new heat starts at lane 2 for even-preferring swimmers."""
        assert PlacementPolicy.EVEN_FIRST.starting_lane(6) == 2
        assert PlacementPolicy.EVEN_FIRST.starting_lane(1) == 1
        assert PlacementPolicy.ODD_FIRST.starting_lane(6) == 1
        assert PlacementPolicy.SEQUENTIAL.starting_lane(6) == 1


class TestFirstFreeLane:
    """Tests for HeatTable.first_free_lane()."""

    def test_empty_table_has_no_free_lane(self):
        """No heats means the caller must open one."""
        assert table_of({}).first_free_lane(PlacementPolicy.SEQUENTIAL) is None

    def test_lowest_free_lane(self):
        table = table_of({(1, 1): [entry("a")], (1, 3): [entry("b")]})
        assert table.first_free_lane(PlacementPolicy.SEQUENTIAL) == (1, 2)

    def test_full_heat_moves_on(self):
        table = table_of({(1, 1): [entry("a")], (1, 2): [entry("b")], (2, 1): [entry("c")]}, 2)
        assert table.first_free_lane(PlacementPolicy.SEQUENTIAL) == (2, 2)

    def test_preferred_parity_scanned_across_heats_first(self):
        """An odd lane in heat 2 beats an even lane in heat 1."""
        table = table_of(
            {(1, 1): [entry("a")], (1, 3): [entry("b")], (2, 2): [entry("c")]},
            lanes_available=4,
        )
        assert table.first_free_lane(PlacementPolicy.ODD_FIRST) == (2, 1)

    def test_falls_back_to_other_parity(self):
        table = table_of({(1, 2): [entry("a")], (1, 4): [entry("b")]}, lanes_available=4)
        assert table.first_free_lane(PlacementPolicy.EVEN_FIRST) == (1, 1)

    def test_from_heat_skips_earlier_heats(self):
        table = table_of({(1, 1): [entry("a")], (2, 1): [entry("b")]}, lanes_available=2)
        assert table.first_free_lane(PlacementPolicy.SEQUENTIAL, from_heat=2) == (2, 2)

    def test_relay_joins_same_team_lane(self):
        """A partly filled relay lane of the same team is used first."""
        table = table_of(
            {(1, 1): [entry("a", "RAY")], (1, 2): [entry("b", "WCC")]}, lane_capacity=4
        )
        assert table.first_free_lane(PlacementPolicy.SEQUENTIAL, team="WCC") == (1, 2)

    def test_relay_joins_team_lane_before_from_heat(self):
        """from_heat only limits empty lanes; a team's lane in an earlier heat still fills."""
        table = table_of(
            {(1, 1): [entry("a", "WCC")], (1, 2): [entry("b", "RAY")], (2, 1): [entry("c", "SUN")]},
            lanes_available=2,
            lane_capacity=4,
        )
        assert table.first_free_lane(PlacementPolicy.SEQUENTIAL, team="WCC", from_heat=2) == (1, 1)
        assert table.first_free_lane(PlacementPolicy.SEQUENTIAL, team="NEW", from_heat=2) == (2, 2)

    def test_relay_does_not_join_other_team(self):
        table = table_of({(1, 1): [entry("a", "RAY")]}, lane_capacity=4)
        assert table.first_free_lane(PlacementPolicy.SEQUENTIAL, team="WCC") == (1, 2)


class TestTransformations:
    """Tests for the table-returning operations."""

    def test_add_swimmers_returns_new_table(self):
        table = table_of({})
        updated = table.add_swimmers(1, 3, [entry("a")])
        assert layout(table) == {}
        assert layout(updated) == {(1, 3): ["a"]}

    def test_reserve_lane_is_idempotent(self):
        table = table_of({(1, 1): [entry("a")]})
        same, lane = table.reserve_lane(1, 1)
        assert same is table
        assert [s.id for s in lane.swimmers] == ["a"]

    def test_append_new_heat(self):
        table, heat_number = table_of({(1, 1): [entry("a")]}).append_new_heat()
        assert heat_number == 2
        assert table.heat_numbers == [1, 2]

    def test_remove_swimmer_prunes_empty_heat(self):
        table = table_of({(1, 1): [entry("a")], (2, 1): [entry("b")]})
        assert layout(table.remove_swimmer("b")) == {(1, 1): ["a"]}

    def test_remove_keeps_relay_teammates(self):
        table = table_of({(1, 1): [entry("a"), entry("b")]}, lane_capacity=4)
        assert layout(table.remove_swimmer("a")) == {(1, 1): ["b"]}

    def test_apply_to_normalizes_order(self):
        """Heats and lanes come back sorted, without empties."""
        event = event_with({(2, 4): [entry("c")], (1, 5): [entry("b")], (1, 2): [entry("a")]})
        table = HeatTable.from_event(event, 8)
        table, _ = table.reserve_lane(3, 1)
        updated = table.apply_to(event)

        assert [h.heat_number for h in updated.heats] == [1, 2]
        assert [ln.lane_number for ln in updated.heats[0].lanes] == [2, 5]
        assert updated.id == event.id

    def test_room_in(self):
        table = table_of({(1, 1): [entry("a"), entry("b")]}, lane_capacity=4)
        assert table.room_in(1, 1) == 2
        assert table.room_in(1, 2) == 4
        assert table.room_in(9, 9) == 4
