"""
Slot Router - drops and removals against stored assignments.

Endpoints:
- GET    /api/slots/{employee_id}/{date}/{half_day}                 current arrangement
- POST   /api/slots/{employee_id}/{date}/{half_day}/drop            drop a task
- DELETE /api/slots/{employee_id}/{date}/{half_day}/tasks/{id}      remove + left-pack
- GET    /api/capacity/{employee_id}/{date}/{half_day}              task count vs. max
- GET    /api/availability/{employee_id}?start=&end=                free slots per day

half_day accepts 1/2 or am/pm.
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from api.response_models import DropRequest, SlotResponse
from planner.slot_layout import HalfDay, SlotKey, SlotManager, SlotTask

logger = logging.getLogger(__name__)

slot_router = APIRouter(tags=["Slots"])

# Longest range /availability will expand day by day
MAX_AVAILABILITY_DAYS = 366


def get_manager() -> SlotManager:
    """Slot manager bound to the shared assignment store."""
    return SlotManager()


def _slot_key(employee_id: str, day: date, half_day: str) -> SlotKey:
    try:
        return SlotKey(employee_id, day, HalfDay.parse(half_day))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@slot_router.get("/slots/{employee_id}/{day}/{half_day}", response_model=SlotResponse)
async def get_slot(
    employee_id: str, day: date, half_day: str, manager: SlotManager = Depends(get_manager)
):
    key = _slot_key(employee_id, day, half_day)
    return SlotResponse.from_tasks(manager.get_slot_tasks(key))


@slot_router.post("/slots/{employee_id}/{day}/{half_day}/drop")
async def post_drop(
    employee_id: str,
    day: date,
    half_day: str,
    body: DropRequest,
    manager: SlotManager = Depends(get_manager),
):
    """
    Drop a task into the slot.

    Moves the assignment named by assignment_id, or creates a new one for
    task_id. The column comes from target_column, or from drop_x + bounds.
    """
    key = _slot_key(employee_id, day, half_day)
    if body.assignment_id is None and not body.task_id:
        raise HTTPException(status_code=422, detail="Give assignment_id or task_id")

    if body.assignment_id is not None:
        incoming = manager.task_for_assignment(body.assignment_id, width=body.width)
    else:
        incoming = SlotTask(
            id=None,
            width=body.width,
            title=body.title,
            payload={"notes": body.notes} if body.notes else {},
        )

    if body.target_column is not None:
        outcome = manager.drop_task(key, incoming, body.target_column, task_id=body.task_id)
    elif body.drop_x is not None and body.bounds is not None:
        outcome = manager.drop_at(
            key, incoming, body.drop_x, body.bounds.to_bounds(), task_id=body.task_id
        )
    else:
        raise HTTPException(status_code=422, detail="Give target_column or drop_x + bounds")

    return outcome.to_dict()


@slot_router.delete(
    "/slots/{employee_id}/{day}/{half_day}/tasks/{assignment_id}", response_model=SlotResponse
)
async def delete_slot_task(
    employee_id: str,
    day: date,
    half_day: str,
    assignment_id: int,
    manager: SlotManager = Depends(get_manager),
):
    """Remove an assignment; the remaining tasks slide left."""
    key = _slot_key(employee_id, day, half_day)
    return SlotResponse.from_tasks(manager.remove_task(key, assignment_id))


@slot_router.get("/capacity/{employee_id}/{day}/{half_day}")
async def get_capacity(
    employee_id: str, day: date, half_day: str, manager: SlotManager = Depends(get_manager)
):
    return manager.check_capacity(_slot_key(employee_id, day, half_day)).to_dict()


@slot_router.get("/availability/{employee_id}")
async def get_availability(
    employee_id: str,
    start: date = Query(..., description="First day, inclusive"),
    end: date = Query(..., description="Last day, inclusive"),
    manager: SlotManager = Depends(get_manager),
):
    if end < start:
        raise HTTPException(status_code=422, detail="end is before start")
    if (end - start).days >= MAX_AVAILABILITY_DAYS:
        raise HTTPException(
            status_code=422, detail=f"Range longer than {MAX_AVAILABILITY_DAYS} days"
        )

    matrix = manager.availability(employee_id, start, end)
    return {
        "employee_id": employee_id,
        "start": start.isoformat(),
        "end": end.isoformat(),
        "days": [
            {
                "date": day.isoformat(),
                "am": halves[HalfDay.MORNING],
                "pm": halves[HalfDay.AFTERNOON],
            }
            for day, halves in matrix.items()
        ],
    }
