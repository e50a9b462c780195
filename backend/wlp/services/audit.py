"""Audit notifier — best-effort, append-only record of lifecycle transitions.

Called only after the transition itself has been committed. A failure to
write the audit entry is logged and swallowed; it never undoes or fails the
transition.
"""
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from wlp.models.event_log import EventLogEntry
from wlp.security.principal import Principal

logger = logging.getLogger(__name__)


def record(
    db: Session,
    obj_type: str,
    obj_id: Optional[str],
    action: str,
    actor: Principal,
    payload: Optional[dict[str, Any]] = None,
) -> None:
    try:
        db.add(EventLogEntry(
            obj_type=obj_type,
            obj_id=obj_id,
            action=action,
            actor_id=actor.subject_id,
            actor_role=actor.role.value,
            payload=payload or {},
        ))
        db.commit()
    except Exception:
        db.rollback()
        logger.warning("Audit record failed for %s %s (%s)", obj_type, obj_id, action, exc_info=True)
