"""
Room and Bed API Views

Inventory under a floor. Bed status is set by tenant operations, apart
from maintenance, which is set through set-status.
"""

from rest_framework import viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from api.filters import PropertyFilterBackend
from api.permissions import IsPropertyOwner
from api.responses import error_response
from core.exceptions import BaseApplicationException
from .models import Room, Bed
from .serializers import RoomSerializer, BedSerializer, BedStatusSerializer, BedDeleteSerializer
from .services import RoomService


class RoomViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Rooms
    Rooms are added through RoomService so the property's room capacity applies.
    """
    serializer_class = RoomSerializer
    permission_classes = [IsAuthenticated, IsPropertyOwner]
    filter_backends = [PropertyFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    property_lookup = 'floor__property_id'
    http_method_names = ['get', 'post', 'head', 'options']
    search_fields = ['room_number', 'room_type']
    ordering = ['room_number']

    def get_queryset(self):
        queryset = Room.objects.select_related('floor', 'floor__property')
        floor_id = self.request.query_params.get('floor')
        if floor_id:
            queryset = queryset.filter(floor_id=floor_id)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = serializer.to_dto()
        try:
            room = RoomService().add_room(dto.floor_id, dto, request.user)
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(RoomSerializer(room).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def beds(self, request, pk=None):
        """All beds in this room"""
        room = self.get_object()
        beds = Bed.objects.filter(room=room).select_related('room', 'room__floor')
        return Response(BedSerializer(beds, many=True).data)


class BedViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Beds

    Bed status follows tenants; only AVAILABLE <-> MAINTENANCE can be set by
    hand (set-status). Deleting an occupied bed needs ?relocate_to=<bed id>
    or ?force=true.
    """
    serializer_class = BedSerializer
    permission_classes = [IsAuthenticated, IsPropertyOwner]
    filter_backends = [PropertyFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    property_lookup = 'room__floor__property_id'
    http_method_names = ['get', 'post', 'delete', 'head', 'options']
    search_fields = ['bed_number', 'bed_type', 'room__room_number']
    ordering_fields = ['rent', 'bed_number']

    def get_queryset(self):
        queryset = Bed.objects.select_related('room', 'room__floor')
        room_id = self.request.query_params.get('room')
        if room_id:
            queryset = queryset.filter(room_id=room_id)
        bed_status = self.request.query_params.get('status')
        if bed_status:
            queryset = queryset.filter(status=bed_status)
        return queryset

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = serializer.to_dto()
        try:
            bed = RoomService().add_bed(dto.room_id, dto, request.user)
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(BedSerializer(bed).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        bed = self.get_object()
        params = BedDeleteSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        try:
            RoomService().delete_bed(
                bed.id,
                request.user,
                force=params.validated_data.get('force', False),
                relocate_to_bed_id=params.validated_data.get('relocate_to'),
            )
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'], url_path='set-status')
    def set_status(self, request, pk=None):
        """
        Put a bed into maintenance or back to available.

        Body: { "status": "MAINTENANCE" | "AVAILABLE" }
        """
        bed = self.get_object()
        serializer = BedStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            bed = RoomService().set_bed_status(bed.id, serializer.validated_data['status'], request.user)
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(BedSerializer(bed).data)
