"""
Payment API Views

Read-only payment ledger with mark-paid. Rent and refund rows are raised
by tenant operations.
"""

from rest_framework import viewsets, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from api.filters import PropertyFilterBackend
from api.permissions import IsPropertyOwner
from api.responses import error_response
from core.exceptions import BaseApplicationException
from .models import Payment
from .serializers import PaymentSerializer, MarkPaidSerializer
from .services import PaymentService


class PaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only ViewSet for payments.
    Payments are raised by the tenant lifecycle; settling one is the only write.
    """
    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticated, IsPropertyOwner]
    filter_backends = [PropertyFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['payment_id', 'tenant__full_name', 'tenant__tenant_id']
    ordering_fields = ['due_date', 'amount', 'created_at']
    ordering = ['-due_date']

    def get_queryset(self):
        queryset = Payment.objects.select_related('tenant')
        params = self.request.query_params
        if params.get('tenant'):
            queryset = queryset.filter(tenant_id=params['tenant'])
        if params.get('status'):
            queryset = queryset.filter(status=params['status'])
        if params.get('month'):
            queryset = queryset.filter(month=params['month'])
        return queryset

    @action(detail=True, methods=['post'], url_path='mark-paid')
    def mark_paid(self, request, pk=None):
        """Body: { "payment_mode": "UPI", "paid_date": "YYYY-MM-DD" } (both optional)"""
        payment = self.get_object()
        serializer = MarkPaidSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            payment = PaymentService().mark_paid(
                payment.id,
                request.user,
                payment_mode=serializer.validated_data.get('payment_mode') or None,
                paid_date=serializer.validated_data.get('paid_date'),
            )
        except BaseApplicationException as exc:
            return error_response(exc)
        return Response(PaymentSerializer(payment).data)
