"""
Slot arrangement engine.

place_task inserts a dropped task among its siblings and compresses widths
until the slot's four columns are not exceeded. left_pack closes the gaps
a removal leaves behind without touching any width.

Both return new SlotTask objects; inputs are never modified.
"""

import logging
from dataclasses import replace

from planner.config import MIN_TASK_WIDTH, SLOT_COLUMNS

from .models import SlotTask, ordering_key
from .validator import validate_drop

logger = logging.getLogger(__name__)


def insertion_index(others: list[SlotTask], target_column: int) -> int:
    """
    Ordinal position for a task dropped on target_column.

    The task lands after every sibling that starts left of the target
    column and before the first one starting at or right of it.
    """
    if target_column == 0:
        return 0

    index = 0
    for task in others:
        if task.column_start < target_column:
            index += 1
        else:
            break
    return index


def compress_widths(order: list[SlotTask]) -> dict:
    """
    Shrink widths, biggest tasks first, until they sum to at most 4.

    Returns a mapping of task id to width. No task goes below width 1,
    so any four tasks always fit.
    """
    widths = {task.id: task.width for task in order}
    excess = sum(widths.values()) - SLOT_COLUMNS
    if excess <= 0:
        return widths

    # sorted() is stable: equal widths keep their left-to-right order
    for task in sorted(order, key=lambda t: widths[t.id], reverse=True):
        if excess <= 0:
            break
        shrinkable = widths[task.id] - MIN_TASK_WIDTH
        delta = min(shrinkable, excess)
        if delta <= 0:
            continue
        widths[task.id] -= delta
        excess -= delta
        logger.debug("Compressed task %r by %s to %s", task.id, delta, widths[task.id])

    return widths


def _position(order: list[SlotTask], widths: dict) -> list[SlotTask]:
    running = 0
    arranged = []
    for task in order:
        width = widths[task.id]
        arranged.append(replace(task, column_start=running, width=width))
        running += width
    return arranged


def place_task(
    existing_tasks: list[SlotTask], incoming: SlotTask, target_column: int
) -> list[SlotTask]:
    """
    Arrangement of a slot after incoming is dropped on target_column.

    incoming may already be in existing_tasks (moved within its slot); its
    old copy is replaced. Raises SlotFullError or CapacityExceededError when
    the drop would not have passed validate_drop.
    """
    validate_drop(existing_tasks, incoming).raise_for_rejection()

    others = sorted(
        (t for t in existing_tasks if t.id != incoming.id),
        key=ordering_key,
    )
    index = insertion_index(others, target_column)
    final_order = others[:index] + [incoming] + others[index:]

    widths = compress_widths(final_order)
    arranged = _position(final_order, widths)

    logger.debug(
        "Placed task %r at index %d (target column %d): %s",
        incoming.id,
        index,
        target_column,
        [(t.id, t.column_start, t.width) for t in arranged],
    )
    return arranged


def left_pack(tasks: list[SlotTask]) -> list[SlotTask]:
    """
    Slide tasks left so they sit contiguously from column 0.

    Order follows the current column_start; widths are kept as they are.
    """
    ordered = sorted(tasks, key=ordering_key)
    return _position(ordered, {task.id: task.width for task in ordered})
