"""
Occupancy service - Read side of bed occupancy.

Every figure is recomputed from live bed rows through the reconciler; no
counter is cached or stored.
"""
from datetime import date
from decimal import Decimal

from django.utils import timezone

from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from core.services import BaseService
from properties.access import can_access_property, get_accessible_properties
from properties.repositories import PropertyRepository, FloorRepository
from payments.services import PaymentService
from rooms.repositories import RoomRepository, BedRepository
from tenants.repositories import TenantRepository
from . import reconciler


class OccupancyService(BaseService):
    """Service for occupancy statistics and bed selectors"""

    def __init__(self):
        super().__init__()
        self.property_repo = PropertyRepository()
        self.floor_repo = FloorRepository()
        self.room_repo = RoomRepository()
        self.bed_repo = BedRepository()
        self.tenant_repo = TenantRepository()
        self.payment_service = PaymentService()

    def _get_property(self, property_id: int, user):
        property_obj = self.property_repo.get_by_id(property_id)
        if property_obj is None:
            raise NotFoundError(resource_type="Property", resource_id=property_id)
        if not can_access_property(user, property_obj):
            raise PermissionDeniedError("You don't have access to this property")
        return property_obj

    def _editing_tenant(self, property_obj, editing_tenant_id):
        if not editing_tenant_id:
            return None
        tenant = self.tenant_repo.get_by_id(editing_tenant_id, property_id=property_obj.id)
        if tenant is None:
            raise ValidationError(
                message="Tenant does not belong to this property",
                code="TENANT_NOT_IN_PROPERTY",
                field="tenant",
            )
        return tenant

    def _stats_for(self, property_obj, today: date = None) -> dict:
        stats = reconciler.compute_stats(self.bed_repo.get_by_property(property_obj.id))
        return {
            'property_id': property_obj.id,
            'property_name': property_obj.name,
            'total_floors': self.floor_repo.count(property_id=property_obj.id),
            'total_rooms': self.room_repo.count_for_property(property_obj.id),
            **stats.as_dict(),
            'tenants': self.tenant_repo.status_counts(property_obj.id),
            'collected_this_month': self.payment_service.collected_this_month(property_obj.id, today),
        }

    def property_stats(self, property_id: int, user, today: date = None) -> dict:
        """Fresh occupancy figures for one property"""
        return self._stats_for(self._get_property(property_id, user), today)

    def dashboard(self, user, today: date = None) -> dict:
        """Per-property figures for everything the user can see, plus totals"""
        today = today or timezone.localdate()
        properties = [self._stats_for(p, today) for p in get_accessible_properties(user)]

        total = sum(p['total_beds'] for p in properties)
        occupied = sum(p['occupied_beds'] for p in properties)
        totals = {
            'properties': len(properties),
            'total_beds': total,
            'occupied_beds': occupied,
            'available_beds': total - occupied,
            'maintenance_beds': sum(p['maintenance_beds'] for p in properties),
            'occupancy_rate': reconciler.occupancy_rate(occupied, total),
            'projected_monthly_revenue': sum(
                (p['projected_monthly_revenue'] for p in properties), Decimal('0')
            ),
            'collected_this_month': sum(
                (p['collected_this_month'] for p in properties), Decimal('0')
            ),
        }
        return {'totals': totals, 'properties': properties}

    def available_beds(self, property_id: int, user, editing_tenant_id: int = None):
        """Beds open for assignment, including the editing tenant's own bed"""
        property_obj = self._get_property(property_id, user)
        editing_tenant = self._editing_tenant(property_obj, editing_tenant_id)
        return reconciler.available_beds(self.bed_repo.get_by_property(property_obj.id), editing_tenant)

    def selector_options(self, property_id: int, user, editing_tenant_id: int = None) -> dict:
        """
        Options for the floor -> room -> bed cascading selectors.

        Floors and rooms with nothing free are still listed, disabled and
        labelled Full. The editing tenant's bed comes first, marked Current.
        """
        property_obj = self._get_property(property_id, user)
        editing_tenant = self._editing_tenant(property_obj, editing_tenant_id)

        floors = list(self.floor_repo.get_by_property(property_obj.id))
        rooms = list(self.room_repo.get_by_property(property_obj.id))
        beds = list(self.bed_repo.get_by_property(property_obj.id))

        by_floor = reconciler.occupancy_by_floor(floors, rooms, beds, editing_tenant)
        by_room = reconciler.occupancy_by_room(rooms, beds, editing_tenant)

        return {
            'floors': [
                {'value': floor.id, **by_floor[floor.id]}
                for floor in floors
            ],
            'rooms': [
                {'value': room.id, 'floor_id': room.floor_id, **by_room[room.id]}
                for room in rooms
            ],
            'beds': reconciler.bed_options(beds, editing_tenant),
        }

    def check(self, property_obj) -> list:
        """Inconsistencies between bed status and tenant state for one property"""
        beds = self.bed_repo.get_all(room__floor__property_id=property_obj.id).only('id', 'status')
        tenants = self.tenant_repo.get_by_property(property_obj.id).only('id', 'status', 'bed')
        problems = reconciler.find_inconsistencies(beds, tenants)
        if problems:
            self.log_warning(
                f"Occupancy inconsistencies in {property_obj.name}",
                property_id=property_obj.id, count=len(problems),
            )
        return problems
