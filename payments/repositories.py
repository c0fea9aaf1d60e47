"""
Payment repository - Data access layer for Payment.
"""
from decimal import Decimal

from django.db.models import QuerySet, Sum

from core.constants import PaymentStatus
from core.repositories import BaseRepository
from .models import Payment


class PaymentRepository(BaseRepository[Payment]):
    """Repository for Payment model"""
    model = Payment

    def get_by_tenant(self, tenant_id: int) -> QuerySet[Payment]:
        return self.get_all(tenant_id=tenant_id)

    def collected(self, property_id: int, month: str) -> Decimal:
        """Sum of PAID incoming amounts for a billing month; refunds excluded"""
        total = self.get_all(
            property_id=property_id,
            month=month,
            status=PaymentStatus.PAID,
            amount__gt=0,
        ).aggregate(total=Sum('amount'))['total']
        return total or Decimal('0')
