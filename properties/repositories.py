"""
Property repository - Data access layer for Property and Floor.
"""
from django.db.models import QuerySet

from core.constants import TenantStatus
from core.repositories import BaseRepository
from .models import Property, Floor


class PropertyRepository(BaseRepository[Property]):
    """Repository for Property model"""
    model = Property

    def count_active_tenants(self, property_id: int) -> int:
        from tenants.models import Tenant
        return Tenant.objects.filter(property_id=property_id, status=TenantStatus.ACTIVE).count()


class FloorRepository(BaseRepository[Floor]):
    """Repository for Floor model"""
    model = Floor

    def get_by_property(self, property_id: int) -> QuerySet:
        return self.get_all(property_id=property_id)
