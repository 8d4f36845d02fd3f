"""
Layout Router - stateless slot arithmetic.

Callers send the slot's current tasks and get back a decision or a new
arrangement. Nothing is read from or written to the assignment store.

Endpoints:
- POST /api/layout/resolve-column  drop x-coordinate -> column 0-3
- POST /api/layout/validate        may the slot take the task?
- POST /api/layout/place           arrangement after a drop (409 if rejected)
- POST /api/layout/left-pack       arrangement after closing gaps
"""

import logging

from fastapi import APIRouter

from api.response_models import (
    ColumnResponse,
    DecisionResponse,
    LeftPackRequest,
    PlaceRequest,
    ResolveColumnRequest,
    SlotResponse,
    ValidateRequest,
)
from planner.slot_layout import left_pack, place_task, resolve_column, validate_drop

logger = logging.getLogger(__name__)

layout_router = APIRouter(tags=["Layout"])


@layout_router.post("/resolve-column", response_model=ColumnResponse)
async def post_resolve_column(body: ResolveColumnRequest):
    return ColumnResponse(column=resolve_column(body.drop_x, body.bounds.to_bounds()))


@layout_router.post("/validate", response_model=DecisionResponse)
async def post_validate(body: ValidateRequest):
    """Accept/reject a drop without arranging anything."""
    decision = validate_drop([t.to_task() for t in body.existing], body.incoming.to_task())
    return DecisionResponse(**decision.to_dict())


@layout_router.post("/place", response_model=SlotResponse)
async def post_place(body: PlaceRequest):
    """
    Arrangement of the slot after incoming is dropped on target_column.

    A rejected drop raises DropRejected, which the app turns into a 409.
    """
    arranged = place_task(
        [t.to_task() for t in body.existing],
        body.incoming.to_task(),
        body.target_column,
    )
    return SlotResponse.from_tasks(arranged)


@layout_router.post("/left-pack", response_model=SlotResponse)
async def post_left_pack(body: LeftPackRequest):
    return SlotResponse.from_tasks(left_pack([t.to_task() for t in body.tasks]))
