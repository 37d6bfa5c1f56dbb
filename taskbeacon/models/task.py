import uuid
from datetime import datetime
from enum import IntEnum
from typing import TYPE_CHECKING, List, Optional
from sqlalchemy import DateTime, Index
from sqlmodel import Field, Relationship, SQLModel
from ..constants import MAX_STEP_TITLE_LENGTH, MAX_TASK_TITLE_LENGTH
from .base import utcnow

if TYPE_CHECKING:
    from .category import Category


class RecurrenceType(IntEnum):
    NONE = 0
    DAILY = 1
    WEEKDAYS = 2
    WEEKLY = 3
    MONTHLY = 4
    YEARLY = 5
    CUSTOM = 6


def parse_recurrence(value):
    """Accept recurrence as its integer value or its name in any case."""
    if isinstance(value, str):
        text = value.strip()
        if text.isdigit():
            return int(text)
        try:
            return RecurrenceType[text.upper()]
        except KeyError:
            raise ValueError(f"Unknown recurrence type: {value}")
    return value


class Task(SQLModel, table=True):
    """A user's task.

    Attributes:
        id: Unique identifier
        title: Task title (required)
        due_date: Optional due date; views compare its calendar date
        is_important: Starred by the user
        is_completed: Whether the task is done
        created_at: Timestamp when task was created
        updated_at: Timestamp of the last change
        user_id: Owner identity
        recurrence_type: Optional repeat pattern
        custom_recurrence_pattern: Free text, used with ``RecurrenceType.CUSTOM``
        category_id: Optional category owned by the same user
    """
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_user_due_date", "user_id", "due_date"),
        Index("ix_tasks_user_important", "user_id", "is_important"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str = Field(max_length=MAX_TASK_TITLE_LENGTH)
    due_date: Optional[datetime] = Field(default=None, sa_type=DateTime)
    is_important: bool = Field(default=False)
    is_completed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
    user_id: str = Field(index=True)
    recurrence_type: Optional[RecurrenceType] = Field(default=None)
    custom_recurrence_pattern: Optional[str] = Field(default=None)
    category_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="categories.id", ondelete="SET NULL"
    )

    category: Optional["Category"] = Relationship()
    steps: List["TaskStep"] = Relationship(
        back_populates="task",
        sa_relationship_kwargs={"order_by": "TaskStep.order", "cascade": "all, delete-orphan"},
    )

class TaskStep(SQLModel, table=True):
    """An ordered sub-item of a task."""
    __tablename__ = "task_steps"
    __table_args__ = (Index("ix_task_steps_task_order", "task_id", "order"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str = Field(max_length=MAX_STEP_TITLE_LENGTH)
    is_completed: bool = Field(default=False)
    order: int = Field(default=0)
    task_id: uuid.UUID = Field(foreign_key="tasks.id", ondelete="CASCADE")

    task: Optional[Task] = Relationship(back_populates="steps")
