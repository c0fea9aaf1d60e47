"""
Audit Log Model

IMMUTABLE: Audit logs cannot be edited or deleted after creation.
Records every tenant lifecycle change (create, relocate, vacate, delete) and
inventory change, with the operator and any free-text reason.
"""

from django.db import models
from django.conf import settings
from django.core.exceptions import PermissionDenied


class AuditLogQuerySet(models.QuerySet):
    """Custom queryset for audit logs with filtering helpers"""

    def for_properties(self, property_ids):
        """Logs attached to the given properties"""
        return self.filter(property_id__in=property_ids)

    def for_resource(self, resource_type, resource_id):
        """Filter logs for a specific resource"""
        return self.filter(resource_type=resource_type, resource_id=str(resource_id))

    def for_action(self, action):
        return self.filter(action=action)


class AuditLog(models.Model):
    """Immutable audit log entry"""

    # Action types
    ACTION_CREATE = 'CREATE'
    ACTION_UPDATE = 'UPDATE'
    ACTION_DELETE = 'DELETE'
    ACTION_ASSIGN_BED = 'ASSIGN_BED'
    ACTION_RELOCATE = 'RELOCATE'
    ACTION_VACATE = 'VACATE'
    ACTION_STATUS_CHANGE = 'STATUS_CHANGE'
    ACTION_PAYMENT = 'PAYMENT'

    ACTION_CHOICES = [
        (ACTION_CREATE, 'Create'),
        (ACTION_UPDATE, 'Update'),
        (ACTION_DELETE, 'Delete'),
        (ACTION_ASSIGN_BED, 'Assign Bed'),
        (ACTION_RELOCATE, 'Relocate'),
        (ACTION_VACATE, 'Vacate'),
        (ACTION_STATUS_CHANGE, 'Status Change'),
        (ACTION_PAYMENT, 'Payment'),
    ]

    # Resource types
    RESOURCE_PROPERTY = 'Property'
    RESOURCE_FLOOR = 'Floor'
    RESOURCE_ROOM = 'Room'
    RESOURCE_BED = 'Bed'
    RESOURCE_TENANT = 'Tenant'
    RESOURCE_PAYMENT = 'Payment'

    RESOURCE_TYPE_CHOICES = [
        (RESOURCE_PROPERTY, 'Property'),
        (RESOURCE_FLOOR, 'Floor'),
        (RESOURCE_ROOM, 'Room'),
        (RESOURCE_BED, 'Bed'),
        (RESOURCE_TENANT, 'Tenant'),
        (RESOURCE_PAYMENT, 'Payment'),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
        help_text="User who performed the action"
    )

    # Kept as a plain id so the trail survives deletion of the property
    property_id = models.IntegerField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Property the action belongs to"
    )

    action = models.CharField(max_length=20, choices=ACTION_CHOICES, db_index=True)
    resource_type = models.CharField(max_length=50, choices=RESOURCE_TYPE_CHOICES, db_index=True)
    resource_id = models.CharField(
        max_length=50,
        blank=True,
        help_text="ID of the resource affected"
    )
    description = models.TextField(help_text="Human-readable description of the action")

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True, help_text="Additional context data")
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = AuditLogQuerySet.as_manager()

    class Meta:
        verbose_name = "Audit Log"
        verbose_name_plural = "Audit Logs"
        ordering = ['-timestamp', '-id']
        indexes = [
            models.Index(fields=['property_id', '-timestamp'], name='audit_property_time_idx'),
            models.Index(fields=['resource_type', 'resource_id'], name='audit_resource_idx'),
        ]

    def __str__(self):
        username = self.user.username if self.user else 'System'
        return f"{username} - {self.action} - {self.resource_type} #{self.resource_id}"

    def save(self, *args, **kwargs):
        """Only allow creation, not updates"""
        if self.pk is not None:
            raise PermissionDenied("Audit logs are immutable and cannot be modified after creation.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise PermissionDenied("Audit logs are immutable and cannot be deleted.")

    @property
    def user_display(self):
        if self.user:
            return self.user.get_full_name() or self.user.username
        return "System"
