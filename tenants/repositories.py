"""
Tenant repository - Data access layer for Tenant.
"""
from typing import Dict, List

from django.db.models import Count, QuerySet

from core.constants import TenantStatus
from core.repositories import BaseRepository
from .models import Tenant


class TenantRepository(BaseRepository[Tenant]):
    """Repository for Tenant model"""
    model = Tenant

    def with_location(self, queryset: QuerySet = None) -> QuerySet[Tenant]:
        queryset = queryset if queryset is not None else self.model.objects.all()
        return queryset.select_related('property', 'bed', 'bed__room', 'bed__room__floor')

    def get_by_property(self, property_id: int) -> QuerySet[Tenant]:
        return self.get_all(property_id=property_id)

    def codes_for_property(self, property_id: int) -> List[str]:
        return list(self.get_by_property(property_id).values_list('tenant_id', flat=True))

    def has_active_on_bed(self, bed_id: int, exclude_id: int = None) -> bool:
        queryset = self.get_all(bed_id=bed_id, status=TenantStatus.ACTIVE)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    def status_counts(self, property_id: int) -> Dict[str, int]:
        rows = (
            self.get_by_property(property_id)
            .order_by()
            .values('status')
            .annotate(count=Count('id'))
        )
        counts = {status: 0 for status, _ in TenantStatus.CHOICES}
        for row in rows:
            counts[row['status']] = row['count']
        return counts
