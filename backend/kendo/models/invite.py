from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Index, String
from sqlmodel import Column, Field, SQLModel

from kendo.models.soft_delete import utc_now


class InvitableKind(str, Enum):
    """Entities an invite can point at; stored in Invite.object_type"""

    TOURNAMENT = "Tournament"
    CHAMPIONSHIP = "Championship"


class Invite(SQLModel, table=True):
    __tablename__ = "invitation"
    __table_args__ = (Index("ix_invitation_object", "object_type", "object_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(unique=True, index=True)
    email: str
    object_type: InvitableKind = Field(sa_column=Column(String, nullable=False))
    object_id: int
    expiration: Optional[date] = None
    active: bool = Field(default=True)
    used: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now)
