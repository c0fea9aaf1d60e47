"""
Tenant API Views

Tenant lifecycle over HTTP: create, edit, assign, relocate, vacate and
confirmed delete. Business rules live in TenantService.
"""

from rest_framework import viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from api.filters import PropertyFilterBackend
from api.permissions import IsPropertyOwner
from api.responses import error_response
from core.exceptions import BaseApplicationException, ValidationError
from payments.serializers import PaymentSerializer
from .models import Tenant
from .serializers import (
    TenantSerializer, TenantListSerializer, TenantWriteSerializer,
    VacateSerializer, RelocateSerializer,
)
from .services import TenantService


class TenantViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the tenant lifecycle

    Every write goes through TenantService, which keeps tenant, bed and
    payment state consistent inside one transaction.

    DELETE requires ?confirm=true; without it the response is 428 carrying
    the confirmation prompt.
    """
    permission_classes = [IsAuthenticated, IsPropertyOwner]
    filter_backends = [PropertyFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['full_name', 'phone', 'email', 'tenant_id', 'id_proof_number']
    ordering_fields = ['full_name', 'joining_date', 'created_at']
    ordering = ['-created_at']

    def get_serializer_class(self):
        if self.action == 'list':
            return TenantListSerializer
        if self.action in ('create', 'update', 'partial_update'):
            return TenantWriteSerializer
        return TenantSerializer

    def get_queryset(self):
        queryset = Tenant.objects.select_related('property', 'bed', 'bed__room', 'bed__room__floor')
        tenant_status = self.request.query_params.get('status')
        if tenant_status:
            queryset = queryset.filter(status=tenant_status)
        return queryset

    def _detail(self, tenant, status_code=status.HTTP_200_OK):
        tenant = self.get_queryset().get(id=tenant.id)
        return Response(TenantSerializer(tenant).data, status=status_code)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            property_id = serializer.validated_data.get('property')
            if not property_id:
                raise ValidationError(message="Please select a property", code="REQUIRED", field="property")
            tenant = TenantService().create_tenant(property_id, serializer.to_dto(), request.user)
        except BaseApplicationException as exc:
            return error_response(exc)
        return self._detail(tenant, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(data=request.data, partial=kwargs.get('partial', False))
        serializer.is_valid(raise_exception=True)
        try:
            tenant = TenantService().update_tenant(instance.id, serializer.to_dto(instance), request.user)
        except BaseApplicationException as exc:
            return error_response(exc)
        return self._detail(tenant)

    def partial_update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        confirmed = request.query_params.get('confirm', '').lower() == 'true'
        try:
            TenantService().delete_tenant(instance.id, request.user, confirmed=confirmed)
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def vacate(self, request, pk=None):
        """
        Vacate the tenant and free the bed.

        Body: { "leaving_date": "YYYY-MM-DD", "reason": "...", "refund_amount": 0 }
        """
        instance = self.get_object()
        serializer = VacateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            tenant = TenantService().vacate_tenant(instance.id, serializer.to_dto(), request.user)
        except BaseApplicationException as exc:
            return error_response(exc)
        return self._detail(tenant)

    @action(detail=True, methods=['post'])
    def relocate(self, request, pk=None):
        """Body: { "bed_id": <new bed id> }"""
        instance = self.get_object()
        serializer = RelocateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            tenant = TenantService().relocate_tenant(
                instance.id, serializer.validated_data['bed_id'], request.user
            )
        except BaseApplicationException as exc:
            return error_response(exc)
        return self._detail(tenant)

    @action(detail=True, methods=['post'], url_path='assign-bed')
    def assign_bed(self, request, pk=None):
        """Body: { "bed_id": <bed id> } - PENDING tenants only"""
        instance = self.get_object()
        serializer = RelocateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            tenant = TenantService().assign_bed(
                instance.id, serializer.validated_data['bed_id'], request.user
            )
        except BaseApplicationException as exc:
            return error_response(exc)
        return self._detail(tenant)

    @action(detail=True, methods=['get'])
    def payments(self, request, pk=None):
        """Payment history for this tenant"""
        instance = self.get_object()
        try:
            payments = TenantService().payments(instance.id, request.user)
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(PaymentSerializer(payments, many=True).data)
