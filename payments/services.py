"""
Payment service - Ledger entries raised by the tenant lifecycle.
"""
import uuid
from datetime import date
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from audit.helpers import log_action
from audit.models import AuditLog
from core.constants import PaymentMode, PaymentStatus, PaymentType, TenancyDefaults
from core.exceptions import ConflictError, PermissionDeniedError, ValidationError
from core.services import BaseService
from core.validators import ChoiceValidator
from properties.access import can_access_property
from .models import Payment
from .repositories import PaymentRepository


def next_due_date(today: date = None) -> date:
    """Rent due day of the month after `today`"""
    today = today or timezone.localdate()
    if today.month == 12:
        return date(today.year + 1, 1, TenancyDefaults.RENT_DUE_DAY)
    return date(today.year, today.month + 1, TenancyDefaults.RENT_DUE_DAY)


def billing_month(day: date) -> str:
    return day.strftime('%Y-%m')


def generate_payment_id() -> str:
    return f"PAY{uuid.uuid4().hex[:12].upper()}"


class PaymentService(BaseService):
    """Service for tenant payments"""

    def __init__(self):
        super().__init__()
        self.payment_repo = PaymentRepository()

    def create_rent_payment(self, tenant, bed, user, today: date = None, description: str = '') -> Payment:
        """
        Raise a PENDING rent payment for the bed's rent, due on the rent day
        of next month. Called inside the caller's transaction.
        """
        due = next_due_date(today)
        payment = self.payment_repo.create(
            payment_id=generate_payment_id(),
            property_id=tenant.property_id,
            tenant=tenant,
            bed=bed,
            amount=bed.rent,
            payment_type=PaymentType.RENT,
            payment_mode=tenant.payment_mode,
            status=PaymentStatus.PENDING,
            due_date=due,
            month=billing_month(due),
            description=description or f"Rent for {billing_month(due)}",
            created_by=user if user is not None and user.is_authenticated else None,
        )
        self.log_info(f"Rent payment raised: {payment.payment_id}", tenant_id=tenant.id, amount=str(bed.rent))
        return payment

    def record_refund(self, tenant, amount: Decimal, user, on: date = None) -> Payment:
        """Deposit refund on vacate, stored as a negative PAID amount"""
        on = on or timezone.localdate()
        payment = self.payment_repo.create(
            payment_id=generate_payment_id(),
            property_id=tenant.property_id,
            tenant=tenant,
            bed_id=tenant.bed_id,
            amount=-abs(amount),
            payment_type=PaymentType.REFUND,
            payment_mode=tenant.payment_mode,
            status=PaymentStatus.PAID,
            due_date=on,
            paid_date=on,
            month=billing_month(on),
            description="Security deposit refund",
            created_by=user if user is not None and user.is_authenticated else None,
        )
        self.log_info(f"Refund recorded: {payment.payment_id}", tenant_id=tenant.id, amount=str(amount))
        return payment

    def mark_paid(self, payment_id: int, user, payment_mode: str = None, paid_date: date = None) -> Payment:
        """Settle an outstanding payment"""
        with transaction.atomic():
            payment = self.payment_repo.lock(payment_id)
            if not can_access_property(user, payment.property_id):
                raise PermissionDeniedError("You don't have access to this payment")

            if payment.status not in PaymentStatus.OUTSTANDING:
                raise ConflictError(
                    message=f"Payment is already {payment.get_status_display().lower()}",
                    code="PAYMENT_NOT_OUTSTANDING",
                )

            paid_date = paid_date or timezone.localdate()
            if paid_date > timezone.localdate():
                raise ValidationError(
                    message="Payment date cannot be in the future",
                    code="PAID_DATE_IN_FUTURE",
                    field="paid_date",
                )

            if payment_mode:
                ChoiceValidator.validate(payment_mode, PaymentMode.CHOICES, "payment_mode", "payment mode")

            fields = {'status': PaymentStatus.PAID, 'paid_date': paid_date}
            if payment_mode:
                fields['payment_mode'] = payment_mode
            self.payment_repo.update(payment, **fields)

            log_action(
                user=user,
                action=AuditLog.ACTION_PAYMENT,
                resource_type=AuditLog.RESOURCE_PAYMENT,
                resource_id=payment.id,
                description=f"Payment {payment.payment_id} of ₹{payment.amount} marked paid",
                property_id=payment.property_id,
                metadata={"tenant_id": payment.tenant_id},
            )

        self.log_info(f"Payment marked paid: {payment.payment_id}", payment_id=payment.id)
        return payment

    def tenant_summary(self, tenant) -> dict:
        """Paid and outstanding totals for one tenant"""
        payments = self.payment_repo.get_by_tenant(tenant.id)
        paid = payments.filter(status=PaymentStatus.PAID).aggregate(total=Sum('amount'))['total']
        outstanding = payments.filter(
            status__in=PaymentStatus.OUTSTANDING
        ).aggregate(total=Sum('amount'))['total']
        return {
            'paid': paid or Decimal('0'),
            'outstanding': outstanding or Decimal('0'),
            'count': payments.count(),
        }

    def collected_this_month(self, property_id: int, today: date = None) -> Decimal:
        today = today or timezone.localdate()
        return self.payment_repo.collected(property_id, billing_month(today))
