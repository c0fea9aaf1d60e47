"""
Occupancy API Views

Read-only occupancy figures recomputed from bed rows on every request.
"""

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from api.responses import error_response
from core.exceptions import BaseApplicationException, ValidationError
from rooms.serializers import BedSerializer
from .services import OccupancyService


def _editing_tenant_id(request):
    value = request.query_params.get('tenant')
    if not value:
        return None
    if not value.isdigit():
        raise ValidationError(message="Invalid tenant id", code="INVALID_TENANT", field="tenant")
    return int(value)


class OccupancyViewSet(viewsets.ViewSet):
    """
    Occupancy read endpoints. Nothing here is cached: every figure is
    recomputed from bed rows on each request.

    - GET /occupancy/                      dashboard over all accessible properties
    - GET /occupancy/<property>/           stats for one property
    - GET /occupancy/<property>/available-beds/?tenant=<id>
    - GET /occupancy/<property>/selector/?tenant=<id>
    """
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def list(self, request):
        return Response(OccupancyService().dashboard(request.user))

    def retrieve(self, request, pk=None):
        try:
            data = OccupancyService().property_stats(int(pk), request.user)
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(data)

    @action(detail=True, methods=['get'], url_path='available-beds')
    def available_beds(self, request, pk=None):
        """Beds open for assignment; ?tenant= keeps that tenant's own bed in the list"""
        try:
            beds = OccupancyService().available_beds(int(pk), request.user, _editing_tenant_id(request))
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(BedSerializer(beds, many=True).data)

    @action(detail=True, methods=['get'])
    def selector(self, request, pk=None):
        """Floor/room/bed options for cascading selectors"""
        try:
            data = OccupancyService().selector_options(int(pk), request.user, _editing_tenant_id(request))
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(data)
