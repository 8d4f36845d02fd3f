"""
Slot Manager - runs the layout engine against the assignment store.

Responsibilities:
- Drop a task into a slot (validate, arrange, persist)
- Remove a task from a slot (delete, left-pack, persist)
- Report slot capacity and per-day availability

Enforces invariants before anything is written:
- A rejected drop leaves the stored slot untouched
- Every persisted arrangement passes the slot invariants
- A drop or removal commits all of its writes in one transaction, or none
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, timedelta

from planner.config import MAX_TASKS_PER_SLOT
from planner.contracts import check_slot_invariants
from planner.observability import SlotContext

from .columns import resolve_column
from .engine import left_pack, place_task
from .models import HalfDay, SlotKey, SlotTask, task_from_row
from .occupancy import migrate_to_columns
from .validator import validate_drop

logger = logging.getLogger(__name__)


class AssignmentNotFound(LookupError):
    """No active assignment with that id in the slot."""


@dataclass
class DropOutcome:
    slot_key: SlotKey
    assignment_id: int
    target_column: int
    tasks: list[SlotTask]

    def to_dict(self) -> dict:
        return {
            "employee_id": self.slot_key.employee_id,
            "date": self.slot_key.date.isoformat(),
            "half_day": int(self.slot_key.half_day),
            "assignment_id": self.assignment_id,
            "target_column": self.target_column,
            "tasks": [t.to_dict() for t in self.tasks],
        }


@dataclass
class CapacityReport:
    slot_key: SlotKey
    current: int
    max_capacity: int = MAX_TASKS_PER_SLOT
    tasks: list[SlotTask] = field(default_factory=list)

    @property
    def is_available(self) -> bool:
        return self.current < self.max_capacity

    @property
    def is_overbooked(self) -> bool:
        return self.current > self.max_capacity

    def to_dict(self) -> dict:
        return {
            "employee_id": self.slot_key.employee_id,
            "date": self.slot_key.date.isoformat(),
            "half_day": int(self.slot_key.half_day),
            "current": self.current,
            "max_capacity": self.max_capacity,
            "is_available": self.is_available,
            "is_overbooked": self.is_overbooked,
            "tasks": [t.to_dict() for t in self.tasks],
        }


class SlotManager:
    """
    Applies drops and removals to stored slots.

    The incoming task of a drop is identified by assignment id. An id that
    is not in the target slot is either an assignment moving in from another
    slot (it is re-keyed) or None for a brand new assignment.
    """

    def __init__(self, store=None):
        if store is None:
            from planner.assignment_store import get_store

            store = get_store()
        self.store = store

    def get_slot_tasks(self, slot_key: SlotKey) -> list[SlotTask]:
        """
        Current arrangement of a slot. Legacy rows without hours or
        column_start get the even split.
        """
        rows = self.store.get_slot(slot_key)
        if any(row.get("hours") is None for row in rows):
            return migrate_to_columns(rows)
        return [task_from_row(row) for row in rows]

    def task_for_assignment(self, assignment_id: int, width: float | None = None) -> SlotTask:
        """
        SlotTask for a stored assignment about to be dragged. width overrides
        the stored hours when given.
        """
        row = self.store.get_assignment(assignment_id)
        if row is None:
            raise AssignmentNotFound(f"Assignment {assignment_id} not found")
        task = task_from_row(row)
        if width is not None:
            task = replace(task, width=width)
        return task

    def drop_task(
        self,
        slot_key: SlotKey,
        incoming: SlotTask,
        target_column: int,
        task_id: str | None = None,
    ) -> DropOutcome:
        """
        Drop incoming on target_column of the slot and persist the result.

        Raises SlotFullError / CapacityExceededError without writing when the
        slot cannot take the task, and AssignmentNotFound when incoming.id
        names no active assignment.
        """
        with SlotContext(slot_key.label):
            existing = self.get_slot_tasks(slot_key)
            decision = validate_drop(existing, incoming)
            if not decision.accepted:
                logger.warning("Drop of %r rejected: %s", incoming.id, decision.reason)
                decision.raise_for_rejection()

            source_key = None
            if incoming.id is not None and not any(t.id == incoming.id for t in existing):
                row = self.store.get_assignment(incoming.id)
                if row is None:
                    raise AssignmentNotFound(f"Assignment {incoming.id} not found")
                source_key = SlotKey(
                    row["employee_id"],
                    date.fromisoformat(row["assigned_date"]),
                    HalfDay.parse(row["half_day"]),
                )

            placeholder = incoming.id if incoming.id is not None else "__incoming__"
            candidate = SlotTask(
                id=placeholder,
                column_start=incoming.column_start,
                width=incoming.width,
                title=incoming.title,
                payload=incoming.payload,
            )
            arranged = place_task(existing, candidate, target_column)
            check_slot_invariants(arranged)

            with self.store.transaction():
                assignment_id = self._persist_incoming(slot_key, candidate, incoming, task_id)
                arranged = [
                    replace(t, id=assignment_id) if t.id == placeholder else t for t in arranged
                ]
                self._persist_positions(arranged)
                if source_key is not None:
                    self._repack(source_key)

            logger.info(
                "Dropped assignment %s at column %d (%d tasks in slot)",
                assignment_id,
                target_column,
                len(arranged),
            )
            return DropOutcome(slot_key, assignment_id, target_column, arranged)

    def drop_at(
        self,
        slot_key: SlotKey,
        incoming: SlotTask,
        drop_x: float,
        bounds,
        task_id: str | None = None,
    ) -> DropOutcome:
        """Resolve the column under drop_x, then drop_task."""
        return self.drop_task(slot_key, incoming, resolve_column(drop_x, bounds), task_id)

    def remove_task(self, slot_key: SlotKey, assignment_id: int) -> list[SlotTask]:
        """
        Delete an assignment and left-pack what remains. Widths are kept.

        A slot that is still over capacity afterwards (legacy data) only
        loses the row; its remaining layout is not rewritten.
        """
        with SlotContext(slot_key.label):
            existing = self.get_slot_tasks(slot_key)
            if not any(t.id == assignment_id for t in existing):
                raise AssignmentNotFound(f"Assignment {assignment_id} not in {slot_key.label}")

            remaining = [t for t in existing if t.id != assignment_id]
            if len(remaining) > MAX_TASKS_PER_SLOT:
                # Still overbooked after the delete; stored positions stay as they were
                self.store.delete_assignment(assignment_id)
                logger.warning(
                    "Removed assignment %s, slot still overbooked with %d tasks",
                    assignment_id,
                    len(remaining),
                )
                return self.get_slot_tasks(slot_key)

            packed = left_pack(remaining)
            check_slot_invariants(packed)
            with self.store.transaction():
                self.store.delete_assignment(assignment_id)
                self._persist_positions(packed)

            logger.info("Removed assignment %s, %d tasks remain", assignment_id, len(packed))
            return packed

    def check_capacity(self, slot_key: SlotKey) -> CapacityReport:
        tasks = self.get_slot_tasks(slot_key)
        return CapacityReport(slot_key=slot_key, current=len(tasks), tasks=tasks)

    def availability(
        self, employee_id: str, start_date: date, end_date: date
    ) -> dict[date, dict[HalfDay, bool]]:
        """
        For every day in [start_date, end_date], whether each half-day slot
        can still take a task.
        """
        rows = self.store.list_assignments(start_date, end_date, employee_id)
        counts: dict[tuple[str, int], int] = {}
        for row in rows:
            key = (row["assigned_date"], int(row["half_day"]))
            counts[key] = counts.get(key, 0) + 1

        matrix = {}
        day = start_date
        while day <= end_date:
            matrix[day] = {
                half: counts.get((day.isoformat(), int(half)), 0) < MAX_TASKS_PER_SLOT
                for half in HalfDay
            }
            day += timedelta(days=1)
        return matrix

    # ==================== Persistence ====================

    def _persist_incoming(
        self, slot_key: SlotKey, candidate: SlotTask, incoming: SlotTask, task_id: str | None
    ) -> int:
        if incoming.id is None:
            row = self.store.create_assignment(
                employee_id=slot_key.employee_id,
                assigned_date=slot_key.date,
                half_day=slot_key.half_day,
                task_id=task_id or incoming.payload.get("task_id", ""),
                title=incoming.title,
                width=candidate.width,
                notes=incoming.payload.get("notes"),
            )
            return row["id"]

        # Existing assignment: re-key it to this slot (no-op when already here)
        self.store.update_assignment(
            incoming.id,
            employee_id=slot_key.employee_id,
            assigned_date=slot_key.date,
            half_day=slot_key.half_day,
        )
        return incoming.id

    def _repack(self, slot_key: SlotKey) -> None:
        """Close the gap a task left in the slot it moved out of."""
        packed = left_pack(self.get_slot_tasks(slot_key))
        self._persist_positions(packed)
        logger.info("Repacked %s after move-out", slot_key.label)

    def _persist_positions(self, tasks: list[SlotTask]) -> None:
        for order, task in enumerate(tasks):
            self.store.update_assignment(
                task.id,
                column_start=task.column_start,
                width=task.width,
                slot_order=order,
            )
