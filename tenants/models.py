from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator
from django.utils import timezone

from core.constants import IdProofType, PaymentMode, TenantStatus
from properties.models import Property
from rooms.models import Bed


class Tenant(models.Model):
    """
    Person occupying (or formerly occupying) a bed.

    Lifecycle: PENDING -> ACTIVE -> VACATED (terminal). `bed` is kept after
    vacating as history; only ACTIVE tenants hold a bed, and at most one
    ACTIVE tenant may point at any bed.
    """
    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name='tenants')
    tenant_id = models.CharField(max_length=20, help_text="Human-readable code, e.g. 'GR001'")

    full_name = models.CharField(max_length=255)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=15)
    alternate_phone = models.CharField(max_length=15, blank=True)
    emergency_contact = models.CharField(max_length=15, blank=True)
    address = models.TextField()

    id_proof_type = models.CharField(max_length=20, choices=IdProofType.CHOICES, default=IdProofType.AADHAR)
    id_proof_number = models.CharField(max_length=20, blank=True)

    occupation = models.CharField(max_length=100, blank=True)
    company = models.CharField(max_length=255, blank=True)
    monthly_income = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    bed = models.ForeignKey(Bed, on_delete=models.SET_NULL, null=True, blank=True, related_name='tenants')

    security_deposit = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    advance_rent = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    payment_mode = models.CharField(max_length=20, choices=PaymentMode.CHOICES, default=PaymentMode.CASH)

    joining_date = models.DateField(default=timezone.localdate)
    leaving_date = models.DateField(null=True, blank=True)
    vacate_reason = models.TextField(blank=True)

    status = models.CharField(max_length=20, choices=TenantStatus.CHOICES, default=TenantStatus.PENDING)
    terms_accepted_at = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='created_tenants'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Tenant"
        verbose_name_plural = "Tenants"
        constraints = [
            models.UniqueConstraint(
                fields=['property', 'tenant_id'],
                name='unique_tenant_code_per_property',
            ),
            models.UniqueConstraint(
                fields=['bed'],
                condition=models.Q(status='ACTIVE'),
                name='one_active_tenant_per_bed',
            ),
        ]
        indexes = [
            models.Index(fields=['property', 'status'], name='tenant_property_status_idx'),
            models.Index(fields=['property', 'full_name'], name='tenant_property_name_idx'),
            models.Index(fields=['bed', 'status'], name='tenant_bed_status_idx'),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.tenant_id})"

    def stay_duration(self, today=None):
        """Days stayed so far, or until the leaving date once vacated"""
        from occupancy.reconciler import stay_duration
        return stay_duration(self.joining_date, self.leaving_date, today=today)

    def get_location(self):
        """Location of the current (or last) bed"""
        if self.bed_id:
            return self.bed.location
        return None
