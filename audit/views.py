"""
Audit Log API Views

Provides read-only access to audit logs of the user's properties.
"""

from rest_framework import viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from audit.models import AuditLog
from audit.serializers import AuditLogSerializer
from properties.access import get_accessible_property_ids


class AuditLogViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only ViewSet for audit logs.

    Access Rules:
    - Logs of properties the user owns (kept after a property is deleted)
    - The user's own actions

    Query params: action, resource_type, property
    """

    serializer_class = AuditLogSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['description']
    ordering_fields = ['timestamp', 'action']
    ordering = ['-timestamp']

    def get_queryset(self):
        user = self.request.user
        queryset = AuditLog.objects.select_related('user')

        if not user.is_superuser:
            queryset = queryset.for_properties(get_accessible_property_ids(user)) | queryset.filter(user=user)

        params = self.request.query_params
        if params.get('action'):
            queryset = queryset.for_action(params['action'])
        if params.get('resource_type'):
            queryset = queryset.filter(resource_type=params['resource_type'])
        if params.get('property'):
            queryset = queryset.filter(property_id=params['property'])
        return queryset

    @action(detail=False, methods=['get'])
    def resource_trail(self, request):
        """
        Get audit trail for a specific resource.

        Example: GET /api/audit/resource_trail/?resource_type=Tenant&resource_id=12
        """
        resource_type = request.query_params.get('resource_type')
        resource_id = request.query_params.get('resource_id')

        if not resource_type or not resource_id:
            return Response(
                {'detail': 'Both resource_type and resource_id are required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        queryset = self.get_queryset().for_resource(resource_type, resource_id)
        serializer = self.get_serializer(queryset, many=True)

        return Response({
            'resource_type': resource_type,
            'resource_id': resource_id,
            'audit_trail': serializer.data,
            'count': len(serializer.data)
        })
