from fastapi import Depends, Request
from sqlmodel import Session
from ..crud import CategoryStorage, TaskStorage
from ..db.session import get_session


def get_category_storage(session: Session = Depends(get_session)) -> CategoryStorage:
    return CategoryStorage(session)


def get_task_storage(request: Request, session: Session = Depends(get_session)) -> TaskStorage:
    return TaskStorage(session, max_steps=request.app.state.settings.max_steps_per_task)
