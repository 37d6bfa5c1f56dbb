"""Models package."""
from .category import Category
from .task import RecurrenceType, Task, TaskStep

__all__ = ["Category", "RecurrenceType", "Task", "TaskStep"]
