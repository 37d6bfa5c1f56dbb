import uuid
from datetime import datetime
from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, SQLModel
from ..constants import (
    DEFAULT_CATEGORY_COLOR,
    MAX_CATEGORY_COLOR_LENGTH,
    MAX_CATEGORY_NAME_LENGTH,
)
from .base import utcnow


class Category(SQLModel, table=True):
    """A named, colored tag owned by one user.

    Attributes:
        id: Unique identifier
        name: Display name, unique per user
        color_hex: Color in ``#RRGGBB`` or ``#RGB`` form
        user_id: Owner identity
        created_at: Creation timestamp (UTC)
    """
    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_categories_user_name"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(max_length=MAX_CATEGORY_NAME_LENGTH)
    color_hex: str = Field(default=DEFAULT_CATEGORY_COLOR, max_length=MAX_CATEGORY_COLOR_LENGTH)
    user_id: str = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime)
