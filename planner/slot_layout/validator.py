"""
Drop Validator - decide whether a task may be dropped into a slot.

Capacity is counted in tasks, not summed width: every task can shrink to
width 1, so any four tasks fit four columns.
"""

import logging
from dataclasses import dataclass

from planner.config import MAX_TASKS_PER_SLOT

from .models import SlotTask

logger = logging.getLogger(__name__)

SLOT_FULL = "slot_full"
CAPACITY_EXCEEDED = "capacity_exceeded"


class DropRejected(Exception):
    """A drop the slot cannot accept. The arrangement must stay as it was."""

    code = "drop_rejected"

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class SlotFullError(DropRejected):
    """The slot already holds the maximum number of tasks."""

    code = SLOT_FULL


class CapacityExceededError(DropRejected):
    """Inserting the task would put more than four tasks in the slot."""

    code = CAPACITY_EXCEEDED


_ERRORS = {SLOT_FULL: SlotFullError, CAPACITY_EXCEEDED: CapacityExceededError}


@dataclass
class DropDecision:
    accepted: bool
    reason: str | None = None
    code: str | None = None

    def raise_for_rejection(self) -> None:
        """Raise the matching DropRejected subclass if the drop was refused."""
        if not self.accepted:
            raise _ERRORS[self.code](self.reason)

    def to_dict(self) -> dict:
        return {"accepted": self.accepted, "reason": self.reason, "code": self.code}


def validate_drop(existing_tasks: list[SlotTask], incoming: SlotTask) -> DropDecision:
    """
    Check whether incoming may be dropped into a slot holding existing_tasks.

    existing_tasks may already contain incoming (a move within the slot).
    A slot holding four tasks accepts nothing: a newcomer would be a fifth
    task, and a task moving inside it is refused as well.
    """
    if len(existing_tasks) <= MAX_TASKS_PER_SLOT - 1:
        return DropDecision(True)

    others = [t for t in existing_tasks if t.id != incoming.id]
    if len(others) + 1 > MAX_TASKS_PER_SLOT:
        logger.debug("Rejecting %r: would be task %d", incoming.id, len(others) + 1)
        return DropDecision(False, "too many tasks for 4 columns", CAPACITY_EXCEEDED)

    logger.debug("Rejecting %r: slot holds %d tasks", incoming.id, len(existing_tasks))
    return DropDecision(False, "slot full", SLOT_FULL)
