"""
Timestamps and soft-delete support shared by the tables.

A soft-deleted row keeps its data and carries a non-null ``deleted_at``.
Default queries must be scoped with ``active()``; ``only_trashed()`` selects
the soft-deleted rows, and an unscoped statement sees both.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin(SQLModel):
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class SoftDeleteMixin(TimestampMixin):
    deleted_at: Optional[datetime] = Field(default=None, index=True)

    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def mark_deleted(self) -> None:
        self.deleted_at = utc_now()

    def mark_restored(self) -> None:
        self.deleted_at = None


def active(statement, model):
    """Scope a select to rows that are not soft-deleted"""
    return statement.where(model.deleted_at.is_(None))


def only_trashed(statement, model):
    """Scope a select to soft-deleted rows"""
    return statement.where(model.deleted_at.is_not(None))
