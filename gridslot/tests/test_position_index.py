"""
Tests for PositionIndex occupancy queries.

Tests:
- Single and double width occupancy
- Exclusion of the card being relocated
- Forward, unbounded scanning
"""

from ..engine_core.position_index import PositionIndex


class TestOccupancy:
    """Tests for is_occupied and occupant."""

    def test_empty_grid_is_free(self):
        index = PositionIndex([])
        assert not index.is_occupied(0)
        assert index.occupant(0) is None

    def test_single_width_covers_one_slot(self, card_factory):
        index = PositionIndex([card_factory("a", 0)])
        assert index.is_occupied(0)
        assert not index.is_occupied(1)

    def test_double_width_covers_both_columns(self, card_factory):
        wide = card_factory("a", 2, width=2)
        index = PositionIndex([wide])

        assert index.is_occupied(2)
        assert index.is_occupied(3)
        assert not index.is_occupied(1)
        assert not index.is_occupied(4)
        assert index.occupant(3) == wide

    def test_exclude_id_ignores_card(self, card_factory):
        index = PositionIndex([card_factory("a", 0, width=2)])
        assert not index.is_occupied(0, exclude_id="a")
        assert not index.is_occupied(1, exclude_id="a")
        assert index.is_occupied(1, exclude_id="other")


class TestFindNextFree:
    """Tests for single-slot scanning."""

    def test_returns_start_when_free(self):
        assert PositionIndex([]).find_next_free(5) == 5

    def test_negative_start_clamped(self):
        assert PositionIndex([]).find_next_free(-3) == 0

    def test_skips_occupied_slots(self, card_factory):
        cards = [card_factory("a", 0), card_factory("b", 1, template_type="Card 2")]
        assert PositionIndex(cards).find_next_free(0) == 2

    def test_skips_double_width_span(self, card_factory):
        cards = [card_factory("a", 2, width=2)]
        assert PositionIndex(cards).find_next_free(2) == 4
        assert PositionIndex(cards).find_next_free(3) == 4

    def test_scan_is_unbounded(self, card_factory):
        cards = [card_factory(f"c{i}", i) for i in range(50)]
        assert PositionIndex(cards).find_next_free(0) == 50

    def test_never_wraps_around(self, card_factory):
        # Slot 0 is free but behind the start
        cards = [card_factory("a", 4), card_factory("b", 5)]
        assert PositionIndex(cards).find_next_free(4) == 6

    def test_exclude_id_frees_own_slot(self, card_factory):
        cards = [card_factory("a", 0)]
        assert PositionIndex(cards).find_next_free(0, exclude_id="a") == 0


class TestFindNextFreeDoubleSlot:
    """Tests for aligned pair scanning."""

    def test_empty_grid_starts_at_zero(self):
        assert PositionIndex([]).find_next_free_double_slot(0) == 0

    def test_odd_start_rounds_up(self):
        assert PositionIndex([]).find_next_free_double_slot(1) == 2
        assert PositionIndex([]).find_next_free_double_slot(-1) == 0

    def test_half_filled_row_is_skipped(self, card_factory):
        # Slot 1 free but slot 0 is not, and slot 3 blocks row 1
        cards = [card_factory("a", 0), card_factory("b", 3)]
        assert PositionIndex(cards).find_next_free_double_slot(0) == 4

    def test_free_row_ahead_of_occupied(self, card_factory):
        cards = [card_factory("a", 3)]
        assert PositionIndex(cards).find_next_free_double_slot(0) == 0
        assert PositionIndex(cards).find_next_free_double_slot(2) == 4

    def test_result_is_always_even(self, card_factory):
        cards = [card_factory(f"c{i}", i) for i in range(0, 9, 3)]
        slot = PositionIndex(cards).find_next_free_double_slot(0)
        assert slot % 2 == 0
        assert slot == 4

    def test_exclude_id(self, card_factory):
        cards = [card_factory("a", 0, width=2)]
        assert PositionIndex(cards).find_next_free_double_slot(0, exclude_id="a") == 0
