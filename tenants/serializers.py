from dataclasses import fields as dataclass_fields

from rest_framework import serializers

from core.constants import IdProofType, PaymentMode
from core.dto import TenantDTO, VacateDTO
from payments.services import PaymentService
from .models import Tenant

TENANT_DTO_FIELDS = {f.name for f in dataclass_fields(TenantDTO)}


class TenantSerializer(serializers.ModelSerializer):
    """Read serializer for Tenant"""
    location = serializers.SerializerMethodField()
    stay_duration = serializers.SerializerMethodField()
    payment_summary = serializers.SerializerMethodField()

    class Meta:
        model = Tenant
        fields = [
            'id', 'property', 'tenant_id', 'full_name', 'email', 'phone',
            'alternate_phone', 'emergency_contact', 'address',
            'id_proof_type', 'id_proof_number', 'occupation', 'company', 'monthly_income',
            'bed', 'location', 'security_deposit', 'advance_rent', 'payment_mode',
            'joining_date', 'leaving_date', 'vacate_reason', 'stay_duration',
            'status', 'payment_summary', 'terms_accepted_at', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_location(self, obj):
        return obj.get_location()

    def get_stay_duration(self, obj):
        return obj.stay_duration()

    def get_payment_summary(self, obj):
        return PaymentService().tenant_summary(obj)


class TenantListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list view"""
    location = serializers.SerializerMethodField()

    class Meta:
        model = Tenant
        fields = ['id', 'tenant_id', 'full_name', 'phone', 'status', 'bed', 'location', 'joining_date']

    def get_location(self, obj):
        return obj.get_location()


class TenantWriteSerializer(serializers.Serializer):
    """
    Input for the create and edit forms.

    Only types are checked here; required fields, ID proof formats and
    terms are checked by the tenant validators so that every message is
    field-level and consistent.
    """
    property = serializers.IntegerField(required=False)
    full_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=15)
    address = serializers.CharField(required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    alternate_phone = serializers.CharField(required=False, allow_blank=True, max_length=15)
    emergency_contact = serializers.CharField(required=False, allow_blank=True, max_length=15)
    id_proof_type = serializers.CharField(required=False, default=IdProofType.AADHAR)
    id_proof_number = serializers.CharField(required=False, allow_blank=True, max_length=30)
    occupation = serializers.CharField(required=False, allow_blank=True, max_length=100)
    company = serializers.CharField(required=False, allow_blank=True, max_length=255)
    monthly_income = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    bed_id = serializers.IntegerField(required=False, allow_null=True)
    security_deposit = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    advance_rent = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    payment_mode = serializers.CharField(required=False, default=PaymentMode.CASH)
    terms_accepted = serializers.BooleanField(required=False, default=False)

    def to_dto(self, instance=None):
        """Validated input, merged over the tenant's current values when editing"""
        if instance is not None:
            values = tenant_to_dto(instance).__dict__
            values.update({k: v for k, v in self.validated_data.items() if k in TENANT_DTO_FIELDS})
        else:
            values = {k: v for k, v in self.validated_data.items() if k in TENANT_DTO_FIELDS}
        return TenantDTO(**values)


class VacateSerializer(serializers.Serializer):
    leaving_date = serializers.DateField(required=False, allow_null=True)
    reason = serializers.CharField(required=False, allow_blank=True)
    refund_amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)

    def to_dto(self):
        data = self.validated_data
        return VacateDTO(
            leaving_date=data.get('leaving_date'),
            reason=data.get('reason', ''),
            refund_amount=data.get('refund_amount'),
        )


class RelocateSerializer(serializers.Serializer):
    bed_id = serializers.IntegerField()


def tenant_to_dto(tenant) -> TenantDTO:
    return TenantDTO(
        id=tenant.id,
        full_name=tenant.full_name,
        phone=tenant.phone,
        address=tenant.address,
        email=tenant.email,
        alternate_phone=tenant.alternate_phone,
        emergency_contact=tenant.emergency_contact,
        id_proof_type=tenant.id_proof_type,
        id_proof_number=tenant.id_proof_number,
        occupation=tenant.occupation,
        company=tenant.company,
        monthly_income=tenant.monthly_income,
        bed_id=tenant.bed_id,
        security_deposit=tenant.security_deposit,
        advance_rent=tenant.advance_rent,
        payment_mode=tenant.payment_mode,
        terms_accepted=tenant.terms_accepted_at is not None,
        status=tenant.status,
    )
