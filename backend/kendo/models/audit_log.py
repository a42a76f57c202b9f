"""Audit trail of model mutations (see kendo.services.audit)."""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON
from sqlmodel import Column, Field, SQLModel

from kendo.models.soft_delete import utc_now


class AuditLog(SQLModel, table=True):
    __tablename__ = "audit_log"

    id: Optional[int] = Field(default=None, primary_key=True)
    auditable_type: str = Field(index=True)
    auditable_id: int = Field(index=True)
    event: str  # created, updated, deleted, restored
    old_values: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    new_values: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utc_now)
