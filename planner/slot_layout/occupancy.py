"""
Column bookkeeping helpers for a single slot.

Legacy assignments were stored without hours or column_start; the
slot was then split evenly between its tasks. auto_width and
auto_column_start reproduce that split so old rows can be migrated.
"""

import math

from planner.config import MIN_TASK_WIDTH, SLOT_COLUMNS

from .models import SlotTask


def auto_width(index: int, total: int) -> int:
    """Even split of the slot's hours; the first tasks take the remainder."""
    if total <= 0:
        return SLOT_COLUMNS

    base = SLOT_COLUMNS // total
    remainder = SLOT_COLUMNS % total
    if index < remainder:
        return base + 1
    return max(MIN_TASK_WIDTH, base)


def auto_column_start(index: int, total: int) -> int:
    if total <= 0:
        return 0
    position = sum(auto_width(i, total) for i in range(index))
    return min(SLOT_COLUMNS - 1, position)


def migrate_to_columns(rows: list[dict]) -> list[SlotTask]:
    """
    SlotTasks for assignment rows, filling missing hours/column_start
    from the even split.
    """
    total = len(rows)
    tasks = []
    for index, row in enumerate(rows):
        hours = row.get("hours")
        column_start = row.get("column_start")
        tasks.append(
            SlotTask(
                id=row["id"],
                width=hours if hours is not None else auto_width(index, total),
                column_start=(
                    column_start if column_start is not None else auto_column_start(index, total)
                ),
                title=row.get("title") or "",
                payload={
                    k: row[k] for k in ("task_id", "notes", "slot_order") if row.get(k) is not None
                },
            )
        )
    return tasks


def column_occupancy(tasks: list[SlotTask]) -> list[bool]:
    """Which of the four columns are covered by at least one task."""
    occupied = [False] * SLOT_COLUMNS
    for task in tasks:
        first = math.floor(task.column_start)
        last = math.ceil(task.column_end)
        for column in range(max(0, first), min(SLOT_COLUMNS, last)):
            occupied[column] = True
    return occupied


def find_next_available_column(tasks: list[SlotTask], required: int = 1) -> int:
    """Leftmost column with `required` free columns after it, or -1."""
    occupied = column_occupancy(tasks)
    for start in range(0, SLOT_COLUMNS - required + 1):
        if not any(occupied[start : start + required]):
            return start
    return -1


def is_within_bounds(width: float, column_start: float) -> bool:
    return (
        MIN_TASK_WIDTH <= width <= SLOT_COLUMNS
        and 0 <= column_start <= SLOT_COLUMNS - 1
        and column_start + width <= SLOT_COLUMNS
    )
