from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from kendo.models.soft_delete import utc_now


class Team(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    championship_id: int = Field(foreign_key="championship.id", index=True)
    name: str
    short_id: Optional[int] = None  # number shown on the scoreboard
    created_at: datetime = Field(default_factory=utc_now)
