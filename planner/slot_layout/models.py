"""
Slot layout data model.

A slot is one employee's half-day (morning or afternoon) on one date,
split into four one-hour columns. SlotTask is the unit the layout engine
arranges inside a slot.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from enum import IntEnum
from typing import Any, NamedTuple

from planner.config import MIN_TASK_WIDTH, SLOT_COLUMNS


class HalfDay(IntEnum):
    """Half-day periods. Values match the assignment API (1 = AM, 2 = PM)."""

    MORNING = 1
    AFTERNOON = 2

    @property
    def label(self) -> str:
        return "AM" if self is HalfDay.MORNING else "PM"

    @classmethod
    def parse(cls, value: Any) -> HalfDay:
        """Accept 1/2, "1"/"2", "am"/"pm", "morning"/"afternoon"."""
        if isinstance(value, HalfDay):
            return value
        if isinstance(value, str):
            text = value.strip().lower()
            aliases = {
                "am": cls.MORNING,
                "morning": cls.MORNING,
                "pm": cls.AFTERNOON,
                "afternoon": cls.AFTERNOON,
            }
            if text in aliases:
                return aliases[text]
            if text.isdigit():
                value = int(text)
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Invalid half-day: {value!r} (use 1/2, am/pm)") from None


class SlotKey(NamedTuple):
    """Identity of a slot: (employee, date, half-day)."""

    employee_id: str
    date: date
    half_day: HalfDay

    @property
    def label(self) -> str:
        return f"{self.employee_id}/{self.date.isoformat()}/{self.half_day.label}"


@dataclass
class SlotTask:
    """
    One task placed in a slot.

    width is the domain's "hours": how many columns the task spans. Widths
    are real numbers in [1, 4]; None on construction means 1.
    column_start is the task's left edge inside the slot.
    """

    id: Any
    column_start: float = 0
    width: float | None = None
    title: str = ""
    payload: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.width is None:
            self.width = MIN_TASK_WIDTH
        if not MIN_TASK_WIDTH <= self.width <= SLOT_COLUMNS:
            raise ValueError(
                f"Task {self.id!r} width {self.width} outside "
                f"[{MIN_TASK_WIDTH}, {SLOT_COLUMNS}]"
            )
        if self.column_start is None:
            self.column_start = 0

    @property
    def column_end(self) -> float:
        return self.column_start + self.width

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "column_start": self.column_start,
            "width": self.width,
            "title": self.title,
            "payload": dict(self.payload),
        }


def ordering_key(task: SlotTask) -> tuple:
    """Left-to-right order; ties on column_start fall back to the task id."""
    return (task.column_start, str(task.id))


def group_by_slot(records: Iterable[dict]) -> dict[SlotKey, list[SlotTask]]:
    """
    Group assignment rows into slots.

    Each record needs employee_id, assigned_date, half_day and id; hours and
    column_start are optional. Rows within a slot keep their input order.
    """
    slots: dict[SlotKey, list[SlotTask]] = defaultdict(list)
    for row in records:
        assigned = row["assigned_date"]
        if isinstance(assigned, str):
            assigned = date.fromisoformat(assigned[:10])
        key = SlotKey(str(row["employee_id"]), assigned, HalfDay.parse(row["half_day"]))
        slots[key].append(task_from_row(row))
    return dict(slots)


def task_from_row(row: dict) -> SlotTask:
    """Build a SlotTask from an assignment row."""
    return SlotTask(
        id=row["id"],
        column_start=row.get("column_start") or 0,
        width=row.get("hours"),
        title=row.get("title") or "",
        payload={
            k: row[k] for k in ("task_id", "notes", "slot_order") if row.get(k) is not None
        },
    )
