from rest_framework import serializers

from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    """Serializer for Payment"""
    tenant_name = serializers.CharField(source='tenant.full_name', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'payment_id', 'property', 'tenant', 'tenant_name', 'bed',
            'amount', 'payment_type', 'payment_mode', 'status',
            'due_date', 'paid_date', 'month', 'description',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class MarkPaidSerializer(serializers.Serializer):
    payment_mode = serializers.CharField(required=False, allow_blank=True)
    paid_date = serializers.DateField(required=False, allow_null=True)
