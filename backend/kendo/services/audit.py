"""
Audit trail: one AuditLog row per mutation of an audited model.

Rows are added to the caller's session and committed with the mutation.
"""
import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlmodel import Session, SQLModel, select

from kendo import settings
from kendo.models.audit_log import AuditLog

logger = logging.getLogger(__name__)

AUDIT_CREATED = "created"
AUDIT_UPDATED = "updated"
AUDIT_DELETED = "deleted"
AUDIT_RESTORED = "restored"


def snapshot(entity: SQLModel) -> Dict[str, Any]:
    """
    JSON-safe column values of a model instance.

    Reads through getattr so expired attributes are reloaded first.
    """
    values: Dict[str, Any] = {}
    for name in type(entity).model_fields:
        value = getattr(entity, name)
        if isinstance(value, (date, datetime)):
            value = value.isoformat()
        elif isinstance(value, Enum):
            value = value.value
        values[name] = value
    return values


def record_audit(
    session: Session,
    entity: SQLModel,
    event: str,
    old_values: Optional[Dict[str, Any]] = None,
    new_values: Optional[Dict[str, Any]] = None,
    enabled: Optional[bool] = None,
) -> Optional[AuditLog]:
    """Add an AuditLog row for entity; the entity must already have an id (flush first)"""
    if not (settings.AUDIT_ENABLED if enabled is None else enabled):
        return None

    entry = AuditLog(
        auditable_type=type(entity).__name__,
        auditable_id=entity.id,
        event=event,
        old_values=old_values,
        new_values=new_values,
    )
    session.add(entry)
    logger.debug("Audit %s %s#%s", event, entry.auditable_type, entry.auditable_id)
    return entry


def audits_for(session: Session, entity: SQLModel):
    """Audit rows of an entity, oldest first"""
    return session.exec(
        select(AuditLog)
        .where(AuditLog.auditable_type == type(entity).__name__, AuditLog.auditable_id == entity.id)
        .order_by(AuditLog.id)
    ).all()
