"""
Slot Layout Module

Arranges the tasks of one half-day slot across four one-hour columns.

Objects:
- SlotTask (id, column_start, width in hours)
- SlotKey (employee, date, half-day)

Operations:
- resolve_column: pointer x-coordinate -> column 0-3
- validate_drop: may the slot take another task?
- place_task: insert at the ordinal position, compress widths to fit
- left_pack: close gaps after a removal, widths untouched

Invariants:
- 0 <= column_start and column_start + width <= 4 for every task
- Task ranges never overlap
- Widths sum to at most 4
- At most 4 tasks per slot
"""

from .columns import SlotBounds, resolve_column
from .engine import compress_widths, insertion_index, left_pack, place_task
from .models import HalfDay, SlotKey, SlotTask, group_by_slot
from .occupancy import (
    auto_column_start,
    auto_width,
    column_occupancy,
    find_next_available_column,
    is_within_bounds,
    migrate_to_columns,
)
from .slot_manager import AssignmentNotFound, CapacityReport, DropOutcome, SlotManager
from .validator import (
    CapacityExceededError,
    DropDecision,
    DropRejected,
    SlotFullError,
    validate_drop,
)

__all__ = [
    "AssignmentNotFound",
    "CapacityExceededError",
    "CapacityReport",
    "DropDecision",
    "DropOutcome",
    "DropRejected",
    "HalfDay",
    "SlotBounds",
    "SlotFullError",
    "SlotKey",
    "SlotManager",
    "SlotTask",
    "auto_column_start",
    "auto_width",
    "column_occupancy",
    "compress_widths",
    "find_next_available_column",
    "group_by_slot",
    "insertion_index",
    "is_within_bounds",
    "left_pack",
    "migrate_to_columns",
    "place_task",
    "resolve_column",
    "validate_drop",
]
