from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from kendo.models.soft_delete import utc_now


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(unique=True, index=True)
    created_at: datetime = Field(default_factory=utc_now)
