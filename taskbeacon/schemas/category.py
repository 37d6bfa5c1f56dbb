import uuid
from datetime import datetime
from typing import Optional
from pydantic import ConfigDict, Field
from ..constants import DEFAULT_CATEGORY_COLOR, MAX_CATEGORY_NAME_LENGTH
from .base import APIModel


class CategoryCreate(APIModel):
    name: str = Field(..., max_length=MAX_CATEGORY_NAME_LENGTH)
    color_hex: str = DEFAULT_CATEGORY_COLOR

    model_config = ConfigDict(
        json_schema_extra={"example": {"name": "Personal Tasks", "colorHex": "#4CAF50"}},
    )


class CategoryUpdate(APIModel):
    """Partial update; omitted, null and empty fields are left unchanged."""
    name: Optional[str] = Field(None, max_length=MAX_CATEGORY_NAME_LENGTH)
    color_hex: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={"example": {"name": "Updated Category Name", "colorHex": "#2196F3"}},
    )


class CategoryRead(APIModel):
    id: uuid.UUID
    name: str
    color_hex: str
    user_id: str
    created_at: datetime
