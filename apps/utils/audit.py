# utils/audit.py

import logging

from utils.models import AuditLog

audit_logger = logging.getLogger("academy.audit")
logger = logging.getLogger(__name__)


def log_activity(context, action, details, target_object=None):
    """
    Append an audit entry for a mutating action.

    Must be called inside the service transaction of the change it
    describes. Failures propagate so the surrounding transaction rolls
    back rather than leaving an unaudited change.

    Args:
        context (ServiceContext): Who performed the action.
        action (str): Action tag, e.g. 'payment_recorded'.
        details (str): Free-text description.
        target_object (Model instance, optional): Record affected.

    Returns:
        AuditLog instance
    """
    content_type = ''
    object_id = ''
    if target_object is not None:
        content_type = f"{target_object._meta.app_label}.{target_object._meta.model_name}"
        object_id = str(target_object.pk) if target_object.pk is not None else ''

    entry = AuditLog.objects.create(
        user_id=str(context.user_id) if context.user_id is not None else None,
        action=action,
        details=details,
        content_type=content_type,
        object_id=object_id,
        ip_address=context.ip_address,
    )

    audit_logger.info(f"{action} user={context.user_id or 'system'}: {details}")
    return entry
