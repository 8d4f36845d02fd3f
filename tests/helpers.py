"""Shared builders for slot layout tests."""

from planner.slot_layout import SlotTask


def make_task(task_id, column_start=0, width=1, title=""):
    """Shorthand SlotTask constructor."""
    return SlotTask(id=task_id, column_start=column_start, width=width, title=title)


def layout(tasks):
    """(id, column_start, width) triples in list order."""
    return [(t.id, t.column_start, t.width) for t in tasks]
