"""View filtering, sorting and badge counting over a user's tasks.

Everything here works on lists already loaded for one user; callers are
responsible for owner scoping. "Today" is the current UTC calendar date unless
a date is passed in.
"""

import uuid
from datetime import date, datetime
from typing import Iterable, Optional
from .models import Task
from .models.base import utcnow
from .schemas.task import TaskCounts

VIEW_MY_DAY = "myday"
VIEW_IMPORTANT = "important"
VIEW_PLANNED = "planned"

SORT_IMPORTANCE = "importance"
SORT_DUE_DATE = "duedate"
SORT_ALPHABETICALLY = "alphabetically"
SORT_CREATION_DATE = "creationdate"


def utc_today() -> date:
    return utcnow().date()


def is_due_on(task: Task, day: date) -> bool:
    """True when the task's due date falls on ``day``, ignoring time of day."""
    return task.due_date is not None and task.due_date.date() == day


def filter_tasks(
    tasks: Iterable[Task],
    view: Optional[str] = None,
    category_id: Optional[uuid.UUID] = None,
    today: Optional[date] = None,
) -> list[Task]:
    """Filter tasks by view and category.

    Args:
        tasks: Tasks to filter
        view: 'myday', 'important' or 'planned' (case-insensitive); anything
            else leaves the list unfiltered
        category_id: Keep only tasks in this category
        today: Date used by the 'myday' view (default: current UTC date)

    Returns:
        List of filtered tasks, in input order
    """
    tasks = list(tasks)
    view = (view or "").lower()

    if view == VIEW_MY_DAY:
        day = today or utc_today()
        tasks = [task for task in tasks if is_due_on(task, day)]
    elif view == VIEW_IMPORTANT:
        tasks = [task for task in tasks if task.is_important]
    elif view == VIEW_PLANNED:
        tasks = [task for task in tasks if task.due_date is not None]

    if category_id is not None:
        tasks = [task for task in tasks if task.category_id == category_id]

    return tasks


def sort_tasks(tasks: Iterable[Task], sort_by: Optional[str] = None) -> list[Task]:
    """Sort tasks by the given key.

    Args:
        tasks: Tasks to sort
        sort_by: 'importance', 'duedate', 'alphabetically' or 'creationdate'
            (case-insensitive); anything else sorts by creation date

    Returns:
        Sorted list of tasks
    """
    sort_by = (sort_by or "").lower()

    if sort_by == SORT_IMPORTANCE:
        return sorted(tasks, key=lambda t: (not t.is_important, t.created_at))

    elif sort_by == SORT_DUE_DATE:
        # Undated tasks go last
        return sorted(tasks, key=lambda t: (t.due_date or datetime.max, t.created_at))

    elif sort_by == SORT_ALPHABETICALLY:
        return sorted(tasks, key=lambda t: t.title)

    return sorted(tasks, key=lambda t: t.created_at)


def count_tasks(tasks: Iterable[Task], today: Optional[date] = None) -> TaskCounts:
    """Count tasks per navigation view.

    Completion is not looked at here; ``TaskStorage.count_tasks`` only passes
    incomplete tasks in.
    """
    day = today or utc_today()
    counts = TaskCounts()
    for task in tasks:
        counts.all += 1
        if is_due_on(task, day):
            counts.my_day += 1
        if task.is_important:
            counts.important += 1
        if task.due_date is not None:
            counts.planned += 1
    return counts
