from rest_framework import serializers

from audit.models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    """Read-only view of one trail entry; entries are only written by the services"""
    performed_by = serializers.CharField(source='user_display', read_only=True)
    action_label = serializers.CharField(source='get_action_display', read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            'id', 'timestamp', 'property_id',
            'user', 'performed_by',
            'action', 'action_label',
            'resource_type', 'resource_id',
            'description', 'metadata', 'ip_address',
        ]
        read_only_fields = fields
