import uuid
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from ..crud import TaskStorage
from ..dependencies.auth import get_current_user_id
from ..dependencies.storage import get_task_storage
from ..schemas.task import (
    StepCreate,
    StepRead,
    StepUpdate,
    TaskCounts,
    TaskCreate,
    TaskRead,
    TaskUpdate,
)

router = APIRouter()


@router.get("/counts", response_model=TaskCounts)
def get_task_counts(
    user_id: str = Depends(get_current_user_id),
    storage: TaskStorage = Depends(get_task_storage),
):
    return storage.count_tasks(user_id)


@router.get("", response_model=List[TaskRead])
def get_tasks(
    view: Optional[str] = None,
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    category_id: Optional[uuid.UUID] = Query(None, alias="categoryId"),
    user_id: str = Depends(get_current_user_id),
    storage: TaskStorage = Depends(get_task_storage),
):
    tasks = storage.list_tasks(user_id, view=view, sort_by=sort_by, category_id=category_id)
    return [TaskRead.model_validate(task) for task in tasks]


@router.get("/{task_id}", response_model=TaskRead)
def get_task(
    task_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    storage: TaskStorage = Depends(get_task_storage),
):
    return TaskRead.model_validate(storage.get_task(user_id, task_id))


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    user_id: str = Depends(get_current_user_id),
    storage: TaskStorage = Depends(get_task_storage),
):
    created = storage.create_task(user_id, **task.model_dump())
    return TaskRead.model_validate(created)


@router.put("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_task(
    task_id: uuid.UUID,
    task_update: TaskUpdate,
    user_id: str = Depends(get_current_user_id),
    storage: TaskStorage = Depends(get_task_storage),
):
    storage.update_task(user_id, task_id, **task_update.model_dump(exclude_unset=True))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    storage: TaskStorage = Depends(get_task_storage),
):
    storage.delete_task(user_id, task_id)


@router.post("/{task_id}/steps", response_model=StepRead, status_code=status.HTTP_201_CREATED)
def add_step(
    task_id: uuid.UUID,
    step: StepCreate,
    user_id: str = Depends(get_current_user_id),
    storage: TaskStorage = Depends(get_task_storage),
):
    return StepRead.model_validate(storage.add_step(user_id, task_id, step.title))


@router.put("/{task_id}/steps/{step_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_step(
    task_id: uuid.UUID,
    step_id: uuid.UUID,
    step_update: StepUpdate,
    user_id: str = Depends(get_current_user_id),
    storage: TaskStorage = Depends(get_task_storage),
):
    storage.update_step(user_id, task_id, step_id, **step_update.model_dump(exclude_unset=True))


@router.delete("/{task_id}/steps/{step_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_step(
    task_id: uuid.UUID,
    step_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    storage: TaskStorage = Depends(get_task_storage),
):
    storage.delete_step(user_id, task_id, step_id)
