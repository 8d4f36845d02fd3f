"""
Pydantic request and response models for the planner API.

Usage:
    from api.response_models import PlaceRequest, SlotResponse

    @app.post("/api/layout/place", response_model=SlotResponse)
    async def place(body: PlaceRequest): ...
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from planner.slot_layout import SlotBounds, SlotTask

# ==== Slot tasks ====
# Width is the domain's "hours": 1-4 columns. Omitted width means 1.


class SlotTaskModel(BaseModel):
    """One task as the layout engine sees it."""

    id: int | str
    column_start: float = Field(default=0, ge=0)
    width: float | None = Field(default=None, ge=1, le=4, description="Hours / columns")
    title: str = ""
    payload: dict[str, Any] = Field(default_factory=dict)

    def to_task(self) -> SlotTask:
        return SlotTask(
            id=self.id,
            column_start=self.column_start,
            width=self.width,
            title=self.title,
            payload=dict(self.payload),
        )

    @classmethod
    def from_task(cls, task: SlotTask) -> "SlotTaskModel":
        return cls(**task.to_dict())


class BoundsModel(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    left: float
    width: float

    def to_bounds(self) -> SlotBounds:
        return SlotBounds(left=self.left, width=self.width)


# ==== Layout (stateless) requests ====


class ResolveColumnRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    drop_x: float
    bounds: BoundsModel


class ValidateRequest(BaseModel):
    existing: list[SlotTaskModel] = Field(default_factory=list)
    incoming: SlotTaskModel


class PlaceRequest(BaseModel):
    existing: list[SlotTaskModel] = Field(default_factory=list)
    incoming: SlotTaskModel
    target_column: int = Field(ge=0, le=3)


class LeftPackRequest(BaseModel):
    tasks: list[SlotTaskModel] = Field(default_factory=list)


# ==== Stored-slot requests ====


class DropRequest(BaseModel):
    """
    Drop into a stored slot.

    assignment_id names an existing assignment being moved; omit it to
    create a new assignment for task_id. Give either target_column or
    drop_x + bounds.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    assignment_id: int | None = None
    task_id: str | None = None
    title: str = ""
    width: float | None = Field(default=None, ge=1, le=4)
    notes: str | None = None
    target_column: int | None = Field(default=None, ge=0, le=3)
    drop_x: float | None = None
    bounds: BoundsModel | None = None


# ==== Responses ====


class ColumnResponse(BaseModel):
    column: int


class DecisionResponse(BaseModel):
    accepted: bool
    reason: str | None = None
    code: str | None = None


class SlotResponse(BaseModel):
    """An arrangement of one slot, leftmost task first."""

    tasks: list[SlotTaskModel] = Field(default_factory=list)
    total_width: float = 0

    @classmethod
    def from_tasks(cls, tasks: list[SlotTask]) -> "SlotResponse":
        return cls(
            tasks=[SlotTaskModel.from_task(t) for t in tasks],
            total_width=sum(t.width for t in tasks),
        )


class ErrorResponse(BaseModel):
    """Error envelope for rejected drops and lookups."""

    status: str = Field(default="error")
    error: str = Field(description="Human-readable reason")
    error_code: str = Field(description="Machine-readable code")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or error")
    version: str
    timestamp: str = Field(description="ISO timestamp")
