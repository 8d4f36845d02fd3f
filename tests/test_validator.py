"""
Tests for validate_drop and the rejection types.
"""

import pytest

from planner.slot_layout import (
    CapacityExceededError,
    DropRejected,
    SlotFullError,
    validate_drop,
)
from tests.helpers import make_task


def _full_slot():
    return [make_task(name, column_start=i) for i, name in enumerate("ABCD")]


class TestValidateDrop:
    """Acceptance is by task count, not summed width."""

    def test_empty_slot_accepts(self):
        decision = validate_drop([], make_task("N"))
        assert decision.accepted
        assert decision.reason is None
        assert decision.code is None

    def test_three_tasks_accept_a_fourth(self):
        existing = [make_task(name, column_start=i) for i, name in enumerate("ABC")]
        assert validate_drop(existing, make_task("N")).accepted

    def test_wide_tasks_still_accept(self):
        """Three tasks summing to 4 columns can still shrink to make room."""
        existing = [
            make_task("A", 0, width=2),
            make_task("B", 2, width=1),
            make_task("C", 3, width=1),
        ]
        assert validate_drop(existing, make_task("N", width=3)).accepted

    def test_fifth_task_rejected(self):
        decision = validate_drop(_full_slot(), make_task("N"))
        assert not decision.accepted
        assert decision.reason == "too many tasks for 4 columns"
        assert decision.code == "capacity_exceeded"

    def test_move_inside_full_slot_rejected(self):
        existing = _full_slot()
        decision = validate_drop(existing, existing[0])
        assert not decision.accepted
        assert decision.reason == "slot full"
        assert decision.code == "slot_full"

    def test_move_inside_slot_with_room_accepted(self):
        existing = [make_task(name, column_start=i) for i, name in enumerate("ABC")]
        assert validate_drop(existing, existing[1]).accepted

    def test_does_not_modify_inputs(self):
        existing = _full_slot()
        snapshot = [t.to_dict() for t in existing]
        validate_drop(existing, make_task("N"))
        assert [t.to_dict() for t in existing] == snapshot


class TestDropDecision:
    def test_accepted_does_not_raise(self):
        validate_drop([], make_task("N")).raise_for_rejection()

    def test_capacity_rejection_raises(self):
        decision = validate_drop(_full_slot(), make_task("N"))
        with pytest.raises(CapacityExceededError) as exc_info:
            decision.raise_for_rejection()
        assert exc_info.value.reason == "too many tasks for 4 columns"
        assert exc_info.value.code == "capacity_exceeded"

    def test_slot_full_rejection_raises(self):
        existing = _full_slot()
        with pytest.raises(SlotFullError) as exc_info:
            validate_drop(existing, existing[2]).raise_for_rejection()
        assert isinstance(exc_info.value, DropRejected)
        assert exc_info.value.code == "slot_full"

    def test_to_dict(self):
        decision = validate_drop(_full_slot(), make_task("N"))
        assert decision.to_dict() == {
            "accepted": False,
            "reason": "too many tasks for 4 columns",
            "code": "capacity_exceeded",
        }
