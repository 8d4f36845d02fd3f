"""
Tests for place_task, insertion_index and compress_widths.

The numbered scenarios are the reference drops for the scheduling board.
"""

import pytest

from planner.slot_layout import (
    CapacityExceededError,
    SlotFullError,
    compress_widths,
    insertion_index,
    place_task,
)
from tests.helpers import layout, make_task


class TestReferenceScenarios:
    def test_drop_into_empty_slot_starts_at_zero(self):
        """Scenario 1: the only task sits at column 0 whatever the target."""
        result = place_task([], make_task("N"), target_column=2)
        assert layout(result) == [("N", 0, 1)]

    def test_drop_before_full_width_task_compresses_it(self):
        """Scenario 2: A (width 4) shrinks to 3 behind the new task."""
        existing = [make_task("A", 0, width=4)]
        result = place_task(existing, make_task("N", width=1), target_column=0)
        assert layout(result) == [("N", 0, 1), ("A", 1, 3)]

    def test_fourth_task_fills_last_column(self):
        """Scenario 3: no compression when the total is exactly 4."""
        existing = [make_task("A", 0), make_task("B", 1), make_task("C", 2)]
        result = place_task(existing, make_task("N"), target_column=3)
        assert layout(result) == [("A", 0, 1), ("B", 1, 1), ("C", 2, 1), ("N", 3, 1)]

    def test_fifth_task_rejected_and_slot_unchanged(self):
        """Scenario 4: place_task re-validates and raises."""
        existing = [make_task(name, i) for i, name in enumerate("ABCD")]
        snapshot = layout(existing)
        with pytest.raises(CapacityExceededError, match="too many tasks for 4 columns"):
            place_task(existing, make_task("N"), target_column=1)
        assert layout(existing) == snapshot


class TestInsertionIndex:
    OTHERS = [make_task("A", 0, width=2), make_task("B", 2, width=2)]

    @pytest.mark.parametrize(
        "target,expected",
        [(0, 0), (1, 1), (2, 1), (3, 2)],
    )
    def test_index_for_target(self, target, expected):
        assert insertion_index(self.OTHERS, target) == expected

    def test_empty_slot(self):
        assert insertion_index([], 3) == 0


class TestCompressWidths:
    def test_no_compression_when_fits(self):
        order = [make_task("A", width=2), make_task("B", width=2)]
        assert compress_widths(order) == {"A": 2, "B": 2}

    def test_largest_task_shrinks_first(self):
        order = [make_task("A", width=3), make_task("B", width=2), make_task("N", width=1)]
        assert compress_widths(order) == {"A": 1, "B": 2, "N": 1}

    def test_excess_spreads_to_next_largest(self):
        order = [make_task("A", width=3), make_task("B", width=3), make_task("N", width=2)]
        # excess 4: A 3->1, B 3->1, N 2->2
        assert compress_widths(order) == {"A": 1, "B": 1, "N": 2}

    def test_equal_widths_shrink_leftmost_first(self):
        order = [make_task("A", width=2), make_task("B", width=2), make_task("N", width=1)]
        assert compress_widths(order) == {"A": 1, "B": 2, "N": 1}

    def test_fractional_widths(self):
        order = [make_task("A", width=2.5), make_task("N", width=2)]
        assert compress_widths(order) == {"A": 2.0, "N": 2}

    def test_never_below_one(self):
        order = [make_task(name, width=4) for name in "ABCD"]
        assert compress_widths(order) == {name: 1 for name in "ABCD"}


class TestPlaceTask:
    def test_inputs_not_modified(self):
        existing = [make_task("A", 0, width=4)]
        incoming = make_task("N", 3, width=2)
        place_task(existing, incoming, target_column=0)
        assert layout(existing) == [("A", 0, 4)]
        assert (incoming.column_start, incoming.width) == (3, 2)

    def test_drop_between_tasks(self):
        existing = [make_task("A", 0, width=2), make_task("B", 2, width=2)]
        result = place_task(existing, make_task("N", width=1), target_column=1)
        # excess 1 comes out of A, the leftmost of the two widest
        assert layout(result) == [("A", 0, 1), ("N", 1, 1), ("B", 2, 2)]

    def test_move_within_slot_replaces_old_copy(self):
        existing = [make_task("A", 0), make_task("B", 1), make_task("C", 2)]
        result = place_task(existing, existing[0], target_column=3)
        assert layout(result) == [("B", 0, 1), ("C", 1, 1), ("A", 2, 1)]

    def test_move_in_full_slot_rejected(self):
        existing = [make_task(name, i) for i, name in enumerate("ABCD")]
        with pytest.raises(SlotFullError):
            place_task(existing, existing[3], target_column=0)

    def test_unsorted_input_is_ordered_by_column(self):
        existing = [make_task("C", 2), make_task("A", 0), make_task("B", 1)]
        result = place_task(existing, make_task("N"), target_column=3)
        assert [t.id for t in result] == ["A", "B", "C", "N"]

    def test_tied_column_start_ordered_by_id(self):
        existing = [make_task("b", 0), make_task("a", 0)]
        result = place_task(existing, make_task("N"), target_column=3)
        assert [t.id for t in result] == ["a", "b", "N"]

    def test_payload_and_title_survive(self):
        existing = [make_task("A", 0, width=4, title="Design review")]
        existing[0].payload["task_id"] = "T-9"
        result = place_task(existing, make_task("N"), target_column=3)
        moved = next(t for t in result if t.id == "A")
        assert moved.title == "Design review"
        assert moved.payload == {"task_id": "T-9"}
