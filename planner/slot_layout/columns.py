"""
Column Resolver - map a drop coordinate to one of the slot's columns.
"""

import math
from dataclasses import dataclass

from planner.config import SLOT_COLUMNS


@dataclass
class SlotBounds:
    """Horizontal bounding box of a slot element, in pixels."""

    left: float
    width: float


def resolve_column(drop_x: float, slot_bounds) -> int:
    """
    Column (0-3) under a pointer drop at drop_x.

    Drops outside the slot snap to the nearest edge column instead of
    failing. slot_bounds is anything with ``left`` and ``width``.
    Non-finite input never raises: +inf snaps right, -inf and NaN snap left.
    """
    column_width = slot_bounds.width / SLOT_COLUMNS
    if not column_width > 0:
        return 0

    position = (drop_x - slot_bounds.left) / column_width
    if math.isnan(position):
        return 0
    if math.isinf(position):
        return SLOT_COLUMNS - 1 if position > 0 else 0
    return max(0, min(SLOT_COLUMNS - 1, math.floor(position)))
