import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import ConfigDict, Field, field_validator
from ..constants import MAX_STEP_TITLE_LENGTH, MAX_TASK_TITLE_LENGTH
from ..models.base import to_naive_utc
from ..models.task import RecurrenceType, parse_recurrence
from .base import APIModel
from .category import CategoryRead


class TaskInput(APIModel):
    """Shared parsing for task bodies: UTC due dates and named recurrence types."""

    @field_validator("due_date", check_fields=False)
    @classmethod
    def normalize_due_date(cls, v):
        if v is None:
            return v
        return to_naive_utc(v)

    @field_validator("recurrence_type", mode="before", check_fields=False)
    @classmethod
    def parse_recurrence_type(cls, v):
        return parse_recurrence(v)


class TaskCreate(TaskInput):
    title: str = Field(..., max_length=MAX_TASK_TITLE_LENGTH)
    due_date: Optional[datetime] = None
    is_important: bool = False
    recurrence_type: Optional[RecurrenceType] = None
    custom_recurrence_pattern: Optional[str] = None
    category_id: Optional[uuid.UUID] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Review project documentation",
                "dueDate": "2024-12-31",
                "isImportant": True,
                "recurrenceType": None,
                "categoryId": "3fa85f64-5717-4562-b3fc-2c963f66afa6",
            }
        },
    )


class TaskUpdate(TaskInput):
    """Partial update.

    Only keys present in the body are applied. ``null`` clears the nullable
    fields (dueDate, recurrenceType, customRecurrencePattern, categoryId) and
    is ignored for the rest. Empty strings never change a field.
    """
    title: Optional[str] = Field(None, max_length=MAX_TASK_TITLE_LENGTH)
    due_date: Optional[datetime] = None
    is_important: Optional[bool] = None
    is_completed: Optional[bool] = None
    recurrence_type: Optional[RecurrenceType] = None
    custom_recurrence_pattern: Optional[str] = None
    category_id: Optional[uuid.UUID] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"title": "Updated task title", "isCompleted": True, "isImportant": False}
        },
    )


class StepCreate(APIModel):
    title: str = Field(..., max_length=MAX_STEP_TITLE_LENGTH)

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "Draft initial outline"}},
    )


class StepUpdate(APIModel):
    title: Optional[str] = Field(None, max_length=MAX_STEP_TITLE_LENGTH)
    is_completed: Optional[bool] = None


class StepRead(APIModel):
    id: uuid.UUID
    title: str
    is_completed: bool
    order: int
    task_id: uuid.UUID


class TaskRead(APIModel):
    id: uuid.UUID
    title: str
    due_date: Optional[datetime] = None
    is_important: bool
    is_completed: bool
    created_at: datetime
    updated_at: datetime
    user_id: str
    recurrence_type: Optional[RecurrenceType] = None
    custom_recurrence_pattern: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    category: Optional[CategoryRead] = None
    steps: List[StepRead] = []


class TaskCounts(APIModel):
    """Badge counts over a user's incomplete tasks."""
    my_day: int = 0
    important: int = 0
    planned: int = 0
    all: int = 0
