"""
Property API Views

Properties and their floors, scoped to the properties the user owns.
"""

from rest_framework import viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from api.filters import PropertyFilterBackend
from api.permissions import IsPropertyOwner
from api.responses import error_response
from core.exceptions import BaseApplicationException
from occupancy.services import OccupancyService
from .models import Property, Floor
from .serializers import PropertySerializer, PropertyListSerializer, FloorSerializer
from .services import PropertyService


class PropertyViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Property management

    Access Control:
    - Owner-level isolation: users only see properties they own
    - Superusers see every property

    Writes go through PropertyService (atomic, audited).
    """
    permission_classes = [IsAuthenticated, IsPropertyOwner]
    filter_backends = [PropertyFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    property_lookup = 'id'
    search_fields = ['name', 'address']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']

    def get_serializer_class(self):
        """Use list serializer for list view"""
        if self.action == 'list':
            return PropertyListSerializer
        if self.action == 'floors':
            return FloorSerializer
        return PropertySerializer

    def get_queryset(self):
        return Property.objects.all()

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            property_obj = PropertyService().create_property(request.user, serializer.to_dto())
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(PropertySerializer(property_obj).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=kwargs.get('partial', False))
        serializer.is_valid(raise_exception=True)
        try:
            property_obj = PropertyService().update_property(
                instance.id, serializer.to_dto(instance), request.user
            )
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(PropertySerializer(property_obj).data)

    def partial_update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        """Delete property - refused while it has active tenants"""
        instance = self.get_object()
        try:
            PropertyService().delete_property(instance.id, request.user)
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get', 'post'])
    def floors(self, request, pk=None):
        """List floors, or add one (capacity checked)"""
        property_obj = self.get_object()

        if request.method == 'GET':
            floors = Floor.objects.filter(property=property_obj)
            return Response(FloorSerializer(floors, many=True).data)

        data = request.data.copy()
        data['property'] = property_obj.id
        serializer = FloorSerializer(data=data)
        serializer.is_valid(raise_exception=True)
        try:
            floor = PropertyService().add_floor(property_obj.id, serializer.to_dto(), request.user)
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(FloorSerializer(floor).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def stats(self, request, pk=None):
        """Fresh occupancy statistics for this property"""
        property_obj = self.get_object()
        try:
            data = OccupancyService().property_stats(property_obj.id, request.user)
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(data)


class FloorViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Floors. Floors are added through PropertyService so the
    property's floor capacity applies; they are not deleted through the API.
    """
    serializer_class = FloorSerializer
    permission_classes = [IsAuthenticated, IsPropertyOwner]
    filter_backends = [PropertyFilterBackend, filters.OrderingFilter]
    http_method_names = ['get', 'post', 'head', 'options']
    ordering = ['floor_number', 'name']

    def get_queryset(self):
        return Floor.objects.select_related('property')

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = serializer.to_dto()
        try:
            floor = PropertyService().add_floor(dto.property_id, dto, request.user)
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(FloorSerializer(floor).data, status=status.HTTP_201_CREATED)
