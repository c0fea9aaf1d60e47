from django.db import models
from django.conf import settings

from core.constants import PaymentMode, PaymentStatus, PaymentType
from properties.models import Property
from rooms.models import Bed
from tenants.models import Tenant


class Payment(models.Model):
    """
    Payment ledger entry for a tenant.

    Payments belong to the tenant, independent of bed state; the bed is
    recorded only for display. Refunds are stored with a negative amount.
    """
    payment_id = models.CharField(max_length=32, unique=True)
    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name='payments')
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name='payments')
    bed = models.ForeignKey(Bed, on_delete=models.SET_NULL, null=True, blank=True, related_name='payments')

    amount = models.DecimalField(max_digits=10, decimal_places=2)
    payment_type = models.CharField(max_length=20, choices=PaymentType.CHOICES, default=PaymentType.RENT)
    payment_mode = models.CharField(max_length=20, choices=PaymentMode.CHOICES, blank=True)
    status = models.CharField(max_length=20, choices=PaymentStatus.CHOICES, default=PaymentStatus.PENDING)

    due_date = models.DateField()
    paid_date = models.DateField(null=True, blank=True)
    month = models.CharField(max_length=7, help_text="Billing month, 'YYYY-MM'")
    description = models.CharField(max_length=255, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='created_payments'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-due_date', '-created_at']
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        indexes = [
            models.Index(fields=['tenant', 'status'], name='payment_tenant_status_idx'),
            models.Index(fields=['property', 'status'], name='payment_property_status_idx'),
            models.Index(fields=['property', 'month'], name='payment_property_month_idx'),
        ]

    def __str__(self):
        return f"{self.payment_id} - {self.tenant.full_name} - {self.get_status_display()}"
