"""
Audit Logging Helper Functions

Provides a centralized way to log lifecycle actions. Called by services
inside their transaction, so an entry is written only if the action commits.
The client IP comes from the request being served unless one is passed.
"""

import logging

from audit.models import AuditLog
from common.logging_config import get_client_ip, get_request_ip

logger = logging.getLogger(__name__)


def log_action(user, action, resource_type, resource_id, description,
               property_id=None, request=None, metadata=None):
    """
    Log an action to the audit log.

    Example:
        log_action(
            user=request.user,
            action=AuditLog.ACTION_VACATE,
            resource_type=AuditLog.RESOURCE_TENANT,
            resource_id=tenant.id,
            description=f"Vacated tenant {tenant.tenant_id}",
            property_id=tenant.property_id,
        )
    """
    ip_address = get_client_ip(request) if request else get_request_ip()

    audit_log = AuditLog.objects.create(
        user=user if user is not None and user.is_authenticated else None,
        property_id=property_id,
        action=action,
        resource_type=resource_type,
        resource_id=str(resource_id) if resource_id is not None else '',
        description=description,
        ip_address=ip_address,
        metadata=metadata or {},
    )

    username = getattr(user, 'username', 'system')
    logger.info(f"Audit: {username} - {action} - {resource_type} #{resource_id}")
    return audit_log
