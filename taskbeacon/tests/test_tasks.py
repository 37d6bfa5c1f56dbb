"""Unit tests for the TaskStorage class."""

import uuid
from datetime import datetime, timedelta
import pytest
from sqlmodel import select
from taskbeacon.exceptions import InvalidInputError, NotFoundError
from taskbeacon.models import RecurrenceType, TaskStep
from taskbeacon.models.base import utcnow
from .conftest import OTHER_USER_ID, USER_ID


def test_create_task(tasks):
    """Test creating a task with defaults."""
    task = tasks.create_task(USER_ID, "Buy milk", is_important=True)

    assert isinstance(task.id, uuid.UUID)
    assert task.title == "Buy milk"
    assert task.is_important is True
    assert task.is_completed is False
    assert task.user_id == USER_ID
    assert task.created_at == task.updated_at
    assert task.steps == []


def test_create_task_with_recurrence(tasks):
    due = datetime(2025, 12, 29, 9, 0)
    task = tasks.create_task(
        USER_ID,
        "Standup",
        due_date=due,
        recurrence_type=RecurrenceType.CUSTOM,
        custom_recurrence_pattern="Every 2 weeks on Monday",
    )

    reloaded = tasks.get_task(USER_ID, task.id)
    assert reloaded.due_date == due
    assert reloaded.recurrence_type == RecurrenceType.CUSTOM
    assert reloaded.custom_recurrence_pattern == "Every 2 weeks on Monday"


def test_create_task_title_required(tasks):
    with pytest.raises(InvalidInputError):
        tasks.create_task(USER_ID, "")
    with pytest.raises(InvalidInputError):
        tasks.create_task(USER_ID, "x" * 256)


def test_create_task_with_own_category(categories, tasks):
    work = categories.create_category(USER_ID, "Work")
    task = tasks.create_task(USER_ID, "Report", category_id=work.id)

    assert task.category_id == work.id
    assert task.category.name == "Work"


def test_create_task_with_foreign_category_is_invalid(categories, tasks):
    theirs = categories.create_category(OTHER_USER_ID, "Theirs")

    with pytest.raises(InvalidInputError, match="Invalid category"):
        tasks.create_task(USER_ID, "Sneaky", category_id=theirs.id)
    with pytest.raises(InvalidInputError):
        tasks.create_task(USER_ID, "Ghost", category_id=uuid.uuid4())
    assert tasks.list_tasks(USER_ID) == []


def test_get_task_scoped_to_owner(tasks):
    theirs = tasks.create_task(OTHER_USER_ID, "Theirs")

    with pytest.raises(NotFoundError):
        tasks.get_task(USER_ID, theirs.id)


def test_update_task_partial(tasks):
    """Test that unspecified fields keep their values and updated_at moves."""
    due = datetime(2025, 1, 15, 9, 0)
    task = tasks.create_task(USER_ID, "Original Title", due_date=due, is_important=True)
    created_at = task.created_at

    updated = tasks.update_task(USER_ID, task.id, title="Updated Title", is_completed=True)

    assert updated.title == "Updated Title"
    assert updated.is_completed is True
    assert updated.is_important is True
    assert updated.due_date == due
    assert updated.created_at == created_at
    assert updated.updated_at >= created_at


def test_update_task_empty_title_is_ignored(tasks):
    task = tasks.create_task(USER_ID, "Keep me")
    updated = tasks.update_task(USER_ID, task.id, title="", is_important=None)

    assert updated.title == "Keep me"
    assert updated.is_important is False


def test_update_task_whitespace_title_rejected(tasks):
    task = tasks.create_task(USER_ID, "Keep me")

    with pytest.raises(InvalidInputError):
        tasks.update_task(USER_ID, task.id, title="  ")
    assert tasks.get_task(USER_ID, task.id).title == "Keep me"


def test_update_task_explicit_null_clears_nullable_fields(categories, tasks):
    work = categories.create_category(USER_ID, "Work")
    task = tasks.create_task(
        USER_ID,
        "Clear me",
        due_date=datetime(2025, 1, 1),
        recurrence_type=RecurrenceType.DAILY,
        category_id=work.id,
    )

    updated = tasks.update_task(
        USER_ID, task.id, due_date=None, recurrence_type=None, category_id=None
    )

    assert updated.due_date is None
    assert updated.recurrence_type is None
    assert updated.category_id is None


def test_update_task_category_validation(categories, tasks):
    theirs = categories.create_category(OTHER_USER_ID, "Theirs")
    mine = categories.create_category(USER_ID, "Mine")
    task = tasks.create_task(USER_ID, "Task")

    with pytest.raises(InvalidInputError):
        tasks.update_task(USER_ID, task.id, category_id=theirs.id)

    updated = tasks.update_task(USER_ID, task.id, category_id=mine.id)
    assert updated.category_id == mine.id


def test_update_missing_task(tasks):
    with pytest.raises(NotFoundError):
        tasks.update_task(USER_ID, uuid.uuid4(), title="Nope")


def test_delete_task_cascades_steps(session, tasks):
    task = tasks.create_task(USER_ID, "With steps")
    tasks.add_step(USER_ID, task.id, "One")
    tasks.add_step(USER_ID, task.id, "Two")

    tasks.delete_task(USER_ID, task.id)

    with pytest.raises(NotFoundError):
        tasks.get_task(USER_ID, task.id)
    assert session.exec(select(TaskStep)).all() == []


def test_delete_missing_task(tasks):
    with pytest.raises(NotFoundError):
        tasks.delete_task(USER_ID, uuid.uuid4())


def test_list_tasks_scoped_to_owner(tasks):
    tasks.create_task(USER_ID, "Mine")
    tasks.create_task(OTHER_USER_ID, "Theirs")

    assert [t.title for t in tasks.list_tasks(USER_ID)] == ["Mine"]


def test_list_my_day_uses_current_utc_date(tasks):
    now = utcnow()
    tasks.create_task(USER_ID, "Today", due_date=now.replace(hour=0, minute=0, second=0, microsecond=0))
    tasks.create_task(USER_ID, "Tomorrow", due_date=now + timedelta(days=1))
    tasks.create_task(USER_ID, "Undated")

    assert [t.title for t in tasks.list_tasks(USER_ID, view="myday")] == ["Today"]


def test_list_category_and_sort(categories, tasks):
    work = categories.create_category(USER_ID, "Work")
    tasks.create_task(USER_ID, "b report", category_id=work.id)
    tasks.create_task(USER_ID, "a slides", category_id=work.id)
    tasks.create_task(USER_ID, "groceries")

    result = tasks.list_tasks(USER_ID, sort_by="alphabetically", category_id=work.id)
    assert [t.title for t in result] == ["a slides", "b report"]


def test_counts_exclude_completed_but_list_does_not(tasks):
    """Counts cover remaining work only; the important view still shows done tasks."""
    task = tasks.create_task(USER_ID, "Done and important", is_important=True)
    tasks.update_task(USER_ID, task.id, is_completed=True)
    tasks.create_task(USER_ID, "Open", due_date=datetime(2030, 1, 1))

    counts = tasks.count_tasks(USER_ID)
    assert counts.important == 0
    assert counts.planned == 1
    assert counts.all == 1

    important = tasks.list_tasks(USER_ID, view="important")
    assert [t.title for t in important] == ["Done and important"]


def test_counts_scoped_to_owner(tasks):
    tasks.create_task(OTHER_USER_ID, "Theirs", is_important=True)
    counts = tasks.count_tasks(USER_ID)
    assert counts.all == 0
    assert counts.important == 0


def test_update_task_empty_pattern_is_ignored(tasks):
    task = tasks.create_task(
        USER_ID, "Custom", recurrence_type=RecurrenceType.CUSTOM, custom_recurrence_pattern="p"
    )

    updated = tasks.update_task(USER_ID, task.id, custom_recurrence_pattern="")
    assert updated.custom_recurrence_pattern == "p"

    updated = tasks.update_task(USER_ID, task.id, custom_recurrence_pattern=None)
    assert updated.custom_recurrence_pattern is None


def test_timestamps_round_trip_as_naive_utc(session, tasks):
    """Test that stored datetimes come back unchanged and without tzinfo."""
    due = datetime(2025, 12, 29, 9, 30)
    task = tasks.create_task(USER_ID, "Stored", due_date=due)
    created_at = task.created_at

    session.expire_all()
    reloaded = tasks.get_task(USER_ID, task.id)

    assert reloaded.due_date == due
    assert reloaded.created_at == created_at
    for value in (reloaded.due_date, reloaded.created_at, reloaded.updated_at):
        assert value.tzinfo is None
