import logging
from typing import Optional, Any, Dict

from django.contrib.auth import get_user_model
from django.db import DatabaseError

from care.models import AuditEvent

User = get_user_model()
logger = logging.getLogger(__name__)


def log_action(*, user: Optional[User], action: str, object_type: Optional[str]=None, object_id: Optional[int]=None, detail: Optional[Dict[str, Any]]=None) -> AuditEvent:
    return AuditEvent.objects.create(
        user=user if isinstance(user, User) and user.pk else None,
        action=action,
        object_type=object_type, object_id=object_id,
        detail=detail or {},
    )


def try_log_action(**kwargs) -> Optional[AuditEvent]:
    """Record an audit event without letting a storage failure block the caller."""
    try:
        return log_action(**kwargs)
    except DatabaseError as e:
        logger.warning("Audit event %s not recorded: %s", kwargs.get('action'), e)
        return None
