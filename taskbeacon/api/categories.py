import uuid
from typing import List
from fastapi import APIRouter, Depends, status
from ..crud import CategoryStorage
from ..dependencies.auth import get_current_user_id
from ..dependencies.storage import get_category_storage
from ..schemas.category import CategoryCreate, CategoryRead, CategoryUpdate

router = APIRouter()


@router.get("", response_model=List[CategoryRead])
def get_categories(
    user_id: str = Depends(get_current_user_id),
    storage: CategoryStorage = Depends(get_category_storage),
):
    return [CategoryRead.model_validate(c) for c in storage.list_categories(user_id)]


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(
    category_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    storage: CategoryStorage = Depends(get_category_storage),
):
    return CategoryRead.model_validate(storage.get_category(user_id, category_id))


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(
    category: CategoryCreate,
    user_id: str = Depends(get_current_user_id),
    storage: CategoryStorage = Depends(get_category_storage),
):
    created = storage.create_category(user_id, name=category.name, color_hex=category.color_hex)
    return CategoryRead.model_validate(created)


@router.put("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_category(
    category_id: uuid.UUID,
    category_update: CategoryUpdate,
    user_id: str = Depends(get_current_user_id),
    storage: CategoryStorage = Depends(get_category_storage),
):
    storage.update_category(user_id, category_id, **category_update.model_dump(exclude_unset=True))


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: uuid.UUID,
    user_id: str = Depends(get_current_user_id),
    storage: CategoryStorage = Depends(get_category_storage),
):
    storage.delete_category(user_id, category_id)
