"""Storage layer for categories, tasks and task steps.

Every public method takes the caller's ``user_id`` first and only ever reads or
writes rows owned by that user. Validation happens before any write, and each
mutating call commits exactly once.
"""

import logging
import re
import uuid
from datetime import datetime
from typing import Any, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select
from .constants import (
    DEFAULT_CATEGORY_COLOR,
    HEX_COLOR_PATTERN,
    MAX_CATEGORY_NAME_LENGTH,
    MAX_STEP_TITLE_LENGTH,
    MAX_STEPS_PER_TASK,
    MAX_TASK_TITLE_LENGTH,
)
from .exceptions import ConflictError, InvalidInputError, LimitExceededError, NotFoundError
from .models import Category, RecurrenceType, Task, TaskStep
from .models.base import utcnow
from .schemas.task import TaskCounts
from . import views

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(HEX_COLOR_PATTERN)

CATEGORY_EXISTS = "Category with this name already exists"
INVALID_COLOR = "Invalid color format. Please provide a valid hex color (e.g., #0078D4)"
INVALID_CATEGORY = "Invalid category"


def is_valid_hex_color(value: Optional[str]) -> bool:
    return bool(value) and _HEX_COLOR.match(value) is not None


def _provided(updates: dict[str, Any], *fields: str) -> dict[str, Any]:
    """Pick the given fields from a partial update, dropping None and empty strings."""
    return {
        name: updates[name]
        for name in fields
        if name in updates and updates[name] is not None and updates[name] != ""
    }


def _require_text(value: Optional[str], field: str, max_length: int) -> str:
    if value is None or not value.strip():
        raise InvalidInputError(f"{field} is required")
    if len(value) > max_length:
        raise InvalidInputError(f"{field} must be {max_length} characters or fewer")
    return value


class CategoryStorage:
    """Per-user categories with unique names.

    Attributes:
        session: Database session for the current request
    """

    def __init__(self, session: Session):
        self.session = session

    def list_categories(self, user_id: str) -> list[Category]:
        """Get the user's categories ordered by name."""
        statement = select(Category).where(Category.user_id == user_id).order_by(Category.name)
        return list(self.session.exec(statement).all())

    def get_category(self, user_id: str, category_id: uuid.UUID) -> Category:
        """Get a category owned by the user.

        Raises:
            NotFoundError: If the category is absent or owned by another user
        """
        statement = select(Category).where(
            Category.id == category_id, Category.user_id == user_id
        )
        category = self.session.exec(statement).first()
        if not category:
            raise NotFoundError("Category not found")
        return category

    def name_exists(self, user_id: str, name: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        statement = select(Category.id).where(Category.user_id == user_id, Category.name == name)
        if exclude_id is not None:
            statement = statement.where(Category.id != exclude_id)
        return self.session.exec(statement).first() is not None

    def create_category(
        self, user_id: str, name: str, color_hex: str = DEFAULT_CATEGORY_COLOR
    ) -> Category:
        """Create a category.

        Args:
            user_id: Owner
            name: Category name, unique for the owner
            color_hex: Color as #RRGGBB or #RGB

        Returns:
            The newly created Category

        Raises:
            InvalidInputError: Missing or too long name, bad color
            ConflictError: The owner already has a category with this name
        """
        _require_text(name, "Name", MAX_CATEGORY_NAME_LENGTH)
        if self.name_exists(user_id, name):
            raise ConflictError(CATEGORY_EXISTS)
        if not is_valid_hex_color(color_hex):
            raise InvalidInputError(INVALID_COLOR)

        category = Category(name=name, color_hex=color_hex, user_id=user_id)
        self._commit(category)
        logger.info(f"Created category {category.id} for user {user_id}")
        return category

    def update_category(self, user_id: str, category_id: uuid.UUID, **updates) -> Category:
        """Apply a partial update to a category.

        Only ``name`` and ``color_hex`` are considered; None and empty strings
        leave the stored value unchanged.

        Raises:
            NotFoundError: Category absent or not owned by the user
            ConflictError: Another category of the user already has the new name
            InvalidInputError: Bad color or name length
        """
        category = self.get_category(user_id, category_id)
        changes = _provided(updates, "name", "color_hex")

        name = changes.get("name")
        if name is not None:
            _require_text(name, "Name", MAX_CATEGORY_NAME_LENGTH)
            if name != category.name and self.name_exists(user_id, name, exclude_id=category.id):
                raise ConflictError(CATEGORY_EXISTS)
        if "color_hex" in changes and not is_valid_hex_color(changes["color_hex"]):
            raise InvalidInputError(INVALID_COLOR)

        for field, value in changes.items():
            setattr(category, field, value)
        self._commit(category)
        logger.info(f"Updated category {category.id} for user {user_id}")
        return category

    def delete_category(self, user_id: str, category_id: uuid.UUID) -> None:
        """Delete a category and detach it from the user's tasks.

        Raises:
            NotFoundError: Category absent or not owned by the user
        """
        category = self.get_category(user_id, category_id)
        statement = select(Task).where(Task.user_id == user_id, Task.category_id == category.id)
        detached = self.session.exec(statement).all()
        for task in detached:
            task.category_id = None
            self.session.add(task)
        self.session.delete(category)
        self.session.commit()
        logger.info(
            f"Deleted category {category_id} for user {user_id}, detached {len(detached)} tasks"
        )

    def _commit(self, category: Category) -> None:
        self.session.add(category)
        try:
            self.session.commit()
        except IntegrityError:
            # Lost a race against a concurrent insert of the same name
            self.session.rollback()
            raise ConflictError(CATEGORY_EXISTS)
        self.session.refresh(category)


class TaskStorage:
    """Per-user tasks and their steps.

    Attributes:
        session: Database session for the current request
        max_steps: Maximum number of steps per task
    """

    def __init__(self, session: Session, max_steps: int = MAX_STEPS_PER_TASK):
        self.session = session
        self.max_steps = max_steps

    def _query(self, user_id: str):
        return (
            select(Task)
            .where(Task.user_id == user_id)
            .options(selectinload(Task.category), selectinload(Task.steps))
        )

    def _check_category(self, user_id: str, category_id: Optional[uuid.UUID]) -> None:
        if category_id is None:
            return
        statement = select(Category.id).where(
            Category.id == category_id, Category.user_id == user_id
        )
        if self.session.exec(statement).first() is None:
            raise InvalidInputError(INVALID_CATEGORY)

    def get_task(self, user_id: str, task_id: uuid.UUID) -> Task:
        """Get a task with its category and ordered steps.

        Raises:
            NotFoundError: Task absent or not owned by the user
        """
        task = self.session.exec(self._query(user_id).where(Task.id == task_id)).first()
        if not task:
            raise NotFoundError("Task not found")
        return task

    def create_task(
        self,
        user_id: str,
        title: str,
        due_date: Optional[datetime] = None,
        is_important: bool = False,
        recurrence_type: Optional[RecurrenceType] = None,
        custom_recurrence_pattern: Optional[str] = None,
        category_id: Optional[uuid.UUID] = None,
    ) -> Task:
        """Create a new task.

        Args:
            user_id: Owner
            title: Task title
            due_date: Optional due date (naive UTC)
            is_important: Starred flag
            recurrence_type: Optional recurrence pattern
            custom_recurrence_pattern: Free text for custom recurrence
            category_id: Optional category, must belong to the owner

        Returns:
            The newly created Task

        Raises:
            InvalidInputError: Missing or too long title, foreign or unknown category
        """
        _require_text(title, "Title", MAX_TASK_TITLE_LENGTH)
        self._check_category(user_id, category_id)

        now = utcnow()
        task = Task(
            user_id=user_id,
            title=title,
            due_date=due_date,
            is_important=is_important,
            is_completed=False,
            recurrence_type=recurrence_type,
            custom_recurrence_pattern=custom_recurrence_pattern,
            category_id=category_id,
            created_at=now,
            updated_at=now,
        )
        self.session.add(task)
        self.session.commit()
        logger.info(f"Created task {task.id} for user {user_id}")
        return self.get_task(user_id, task.id)

    def update_task(self, user_id: str, task_id: uuid.UUID, **updates) -> Task:
        """Apply a partial update to a task.

        ``updates`` holds only the fields the caller sent. Empty strings are
        never applied. None leaves title, is_important and is_completed
        unchanged; None clears due_date, recurrence_type,
        custom_recurrence_pattern and category_id. ``updated_at`` is always
        stamped.

        Raises:
            NotFoundError: Task absent or not owned by the user
            InvalidInputError: Too long title, foreign or unknown category
        """
        task = self.get_task(user_id, task_id)

        changes = _provided(updates, "title", "is_important", "is_completed")
        for field in ("due_date", "recurrence_type", "custom_recurrence_pattern", "category_id"):
            if field in updates and updates[field] != "":
                changes[field] = updates[field]

        if "title" in changes:
            _require_text(changes["title"], "Title", MAX_TASK_TITLE_LENGTH)
        if changes.get("category_id") is not None and changes["category_id"] != task.category_id:
            self._check_category(user_id, changes["category_id"])

        for field, value in changes.items():
            setattr(task, field, value)
        task.updated_at = utcnow()
        self.session.add(task)
        self.session.commit()
        logger.info(f"Updated task {task_id} for user {user_id}")
        return self.get_task(user_id, task_id)

    def delete_task(self, user_id: str, task_id: uuid.UUID) -> None:
        """Delete a task together with all of its steps.

        Raises:
            NotFoundError: Task absent or not owned by the user
        """
        task = self.get_task(user_id, task_id)
        for step in list(task.steps):
            self.session.delete(step)
        self.session.delete(task)
        self.session.commit()
        logger.info(f"Deleted task {task_id} for user {user_id}")

    def list_tasks(
        self,
        user_id: str,
        view: Optional[str] = None,
        sort_by: Optional[str] = None,
        category_id: Optional[uuid.UUID] = None,
    ) -> list[Task]:
        """List the user's tasks for a view, optionally narrowed to a category, sorted."""
        statement = self._query(user_id).order_by(Task.created_at)
        tasks = self.session.exec(statement).all()
        tasks = views.filter_tasks(tasks, view=view, category_id=category_id)
        tasks = views.sort_tasks(tasks, sort_by=sort_by)
        logger.debug(
            f"Listed {len(tasks)} tasks for user {user_id} with view={view}, "
            f"sort_by={sort_by}, category_id={category_id}"
        )
        return tasks

    def count_tasks(self, user_id: str) -> TaskCounts:
        """Badge counts over the user's incomplete tasks."""
        statement = select(Task).where(Task.user_id == user_id, Task.is_completed == False)  # noqa: E712
        return views.count_tasks(self.session.exec(statement).all())

    def add_step(self, user_id: str, task_id: uuid.UUID, title: str) -> TaskStep:
        """Append a step to a task.

        Raises:
            NotFoundError: Task absent or not owned by the user
            InvalidInputError: Missing or too long title
            LimitExceededError: Task already holds ``max_steps`` steps
        """
        task = self.get_task(user_id, task_id)
        _require_text(title, "Title", MAX_STEP_TITLE_LENGTH)
        if len(task.steps) >= self.max_steps:
            raise LimitExceededError(f"Task cannot have more than {self.max_steps} steps")

        order = max((step.order for step in task.steps), default=-1) + 1
        step = TaskStep(title=title, is_completed=False, order=order, task_id=task.id)
        self.session.add(step)
        self.session.commit()
        self.session.refresh(step)
        logger.info(f"Added step {step.id} to task {task_id} for user {user_id}")
        return step

    def _get_step(self, task: Task, step_id: uuid.UUID) -> TaskStep:
        for step in task.steps:
            if step.id == step_id:
                return step
        raise NotFoundError("Step not found")

    def update_step(self, user_id: str, task_id: uuid.UUID, step_id: uuid.UUID, **updates) -> TaskStep:
        """Apply a partial update (title, is_completed) to a step.

        Raises:
            NotFoundError: Task or step absent
            InvalidInputError: Too long title
        """
        task = self.get_task(user_id, task_id)
        step = self._get_step(task, step_id)
        changes = _provided(updates, "title", "is_completed")
        if "title" in changes:
            _require_text(changes["title"], "Title", MAX_STEP_TITLE_LENGTH)

        for field, value in changes.items():
            setattr(step, field, value)
        self.session.add(step)
        self.session.commit()
        self.session.refresh(step)
        logger.info(f"Updated step {step_id} of task {task_id} for user {user_id}")
        return step

    def delete_step(self, user_id: str, task_id: uuid.UUID, step_id: uuid.UUID) -> None:
        """Delete a step; remaining steps keep their order values.

        Raises:
            NotFoundError: Task or step absent
        """
        task = self.get_task(user_id, task_id)
        step = self._get_step(task, step_id)
        task.steps.remove(step)
        self.session.delete(step)
        self.session.commit()
        logger.info(f"Deleted step {step_id} of task {task_id} for user {user_id}")
