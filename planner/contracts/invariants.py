"""
Slot Invariants - semantic checks on a slot arrangement.

Invariants run in production, not just tests: the slot manager refuses to
persist an arrangement that fails any of them.
"""

from planner.config import MAX_TASKS_PER_SLOT, SLOT_COLUMNS

# Float widths accumulate rounding error when summed
TOLERANCE = 1e-9


class InvariantViolation(Exception):
    """Raised when a slot invariant is violated."""

    pass


# =============================================================================
# INVARIANT FUNCTIONS
# =============================================================================


def check_bounds(tasks) -> None:
    """
    INVARIANT: every task lies inside the slot.

    0 <= column_start and column_start + width <= 4.
    """
    for task in tasks:
        if task.column_start < -TOLERANCE:
            raise InvariantViolation(
                f"Task {task.id!r} starts left of the slot: {task.column_start}"
            )
        if task.column_start + task.width > SLOT_COLUMNS + TOLERANCE:
            raise InvariantViolation(
                f"Task {task.id!r} ends past column {SLOT_COLUMNS}: "
                f"{task.column_start} + {task.width}"
            )


def check_no_overlap(tasks) -> None:
    """
    INVARIANT: no two [column_start, column_start + width) ranges intersect.
    """
    ordered = sorted(tasks, key=lambda t: t.column_start)
    for left, right in zip(ordered, ordered[1:], strict=False):
        if left.column_start + left.width > right.column_start + TOLERANCE:
            raise InvariantViolation(f"Tasks {left.id!r} and {right.id!r} overlap")


def check_capacity(tasks) -> None:
    """
    INVARIANT: widths sum to at most 4.
    """
    total = sum(task.width for task in tasks)
    if total > SLOT_COLUMNS + TOLERANCE:
        raise InvariantViolation(f"Slot widths sum to {total}, over {SLOT_COLUMNS}")


def check_task_count(tasks) -> None:
    """
    INVARIANT: at most 4 tasks per slot.
    """
    if len(tasks) > MAX_TASKS_PER_SLOT:
        raise InvariantViolation(f"Slot holds {len(tasks)} tasks, max {MAX_TASKS_PER_SLOT}")


ALL_INVARIANTS = [
    check_task_count,
    check_bounds,
    check_no_overlap,
    check_capacity,
]


# =============================================================================
# ENFORCEMENT
# =============================================================================


def enforce_slot_invariants(tasks) -> list[str]:
    """
    Run all invariants. Returns list of violations. Empty = pass.
    """
    violations = []
    for invariant in ALL_INVARIANTS:
        try:
            invariant(tasks)
        except InvariantViolation as e:
            violations.append(f"INVARIANT_VIOLATION: {e}")
    return violations


def check_slot_invariants(tasks) -> None:
    """
    Strict enforcement - raises on first violation.

    Raises:
        InvariantViolation: If any invariant fails
    """
    for invariant in ALL_INVARIANTS:
        invariant(tasks)


def check_ordinal_stability(before, after, moved_id) -> None:
    """
    INVARIANT: a drop never swaps two tasks it did not move.

    before/after are arrangements of the same slot; moved_id is the dropped
    task and is ignored.
    """
    after_sorted = sorted(after, key=lambda t: t.column_start)
    after_rank = {task.id: rank for rank, task in enumerate(after_sorted)}
    untouched = [
        t
        for t in sorted(before, key=lambda t: (t.column_start, str(t.id)))
        if t.id != moved_id and t.id in after_rank
    ]
    for left, right in zip(untouched, untouched[1:], strict=False):
        if after_rank[left.id] > after_rank[right.id]:
            raise InvariantViolation(f"Drop of {moved_id!r} swapped {left.id!r} and {right.id!r}")
