"""
Room service - Business logic for rooms and beds.
"""
from decimal import Decimal

from django.db import transaction

from audit.helpers import log_action
from audit.models import AuditLog
from core.constants import BedStatus, TenantStatus
from core.dto import RoomDTO, BedDTO
from core.exceptions import (
    BusinessLogicError, ConflictError, NotFoundError, PermissionDeniedError, ValidationError
)
from core.services import BaseService
from core.validators import CapacityValidator
from properties.access import can_access_property
from properties.repositories import PropertyRepository, FloorRepository
from .models import Room, Bed
from .repositories import RoomRepository, BedRepository


class RoomService(BaseService):
    """Service for room and bed inventory"""

    def __init__(self):
        super().__init__()
        self.property_repo = PropertyRepository()
        self.floor_repo = FloorRepository()
        self.room_repo = RoomRepository()
        self.bed_repo = BedRepository()

    def _check_access(self, user, property_id):
        if not can_access_property(user, property_id):
            raise PermissionDeniedError("You don't have access to this property")

    def get_room(self, room_id: int, user) -> Room:
        room = self.room_repo.get_all(id=room_id).select_related('floor').first()
        if room is None:
            raise NotFoundError(resource_type="Room", resource_id=room_id)
        self._check_access(user, room.floor.property_id)
        return room

    def get_bed(self, bed_id: int, user) -> Bed:
        bed = self.bed_repo.get_all(id=bed_id).select_related('room', 'room__floor').first()
        if bed is None:
            raise NotFoundError(resource_type="Bed", resource_id=bed_id)
        self._check_access(user, bed.room.floor.property_id)
        return bed

    def add_room(self, floor_id: int, data: RoomDTO, user) -> Room:
        """Add a room to a floor, respecting the property's room capacity"""
        floor = self.floor_repo.get_or_raise(floor_id)
        self._check_access(user, floor.property_id)

        with transaction.atomic():
            property_obj = self.property_repo.lock(floor.property_id)
            CapacityValidator.validate(
                self.room_repo.count_for_property(property_obj.id),
                property_obj.room_capacity,
                "rooms",
            )
            room = self.room_repo.create(
                floor=floor,
                room_number=data.room_number,
                room_type=data.room_type,
                capacity=data.capacity,
                amenities=list(data.amenities or []),
            )
            log_action(
                user=user,
                action=AuditLog.ACTION_CREATE,
                resource_type=AuditLog.RESOURCE_ROOM,
                resource_id=room.id,
                description=f"Added room {room.room_number} on {floor.name}",
                property_id=property_obj.id,
            )

        self.log_info(f"Room added: {room.room_number}", property_id=property_obj.id, room_id=room.id)
        return room

    def add_bed(self, room_id: int, data: BedDTO, user) -> Bed:
        """
        Add a bed to a room.

        Both the property bed capacity and the room capacity apply. A bed
        without a rent takes the property's default monthly rent.
        """
        room = self.get_room(room_id, user)

        if data.status not in BedStatus.MANUAL:
            raise ValidationError(
                message="A new bed can only be Available or under Maintenance",
                code="INVALID_BED_STATUS",
                field="status",
            )

        with transaction.atomic():
            property_obj = self.property_repo.lock(room.floor.property_id)
            CapacityValidator.validate(
                self.bed_repo.count_for_property(property_obj.id),
                property_obj.bed_capacity,
                "beds",
            )
            CapacityValidator.validate(
                self.bed_repo.count_in_room(room.id),
                room.capacity,
                "beds",
                scope="Room",
            )
            rent = data.rent if data.rent else property_obj.monthly_rent
            bed = self.bed_repo.create(
                room=room,
                bed_number=data.bed_number,
                bed_type=data.bed_type,
                rent=Decimal(rent),
                deposit=data.deposit or Decimal('0'),
                status=data.status,
            )
            log_action(
                user=user,
                action=AuditLog.ACTION_CREATE,
                resource_type=AuditLog.RESOURCE_BED,
                resource_id=bed.id,
                description=f"Added bed {bed.bed_number} to room {room.room_number}",
                property_id=property_obj.id,
            )

        self.log_info(f"Bed added: {bed.bed_number}", property_id=property_obj.id, bed_id=bed.id)
        return bed

    def set_bed_status(self, bed_id: int, status: str, user) -> Bed:
        """
        Put a bed into maintenance or back to available.

        OCCUPIED only ever follows a tenant, so it cannot be set here, and an
        occupied bed cannot be taken out of service.
        """
        if status not in BedStatus.MANUAL:
            raise ValidationError(
                message="Bed status can only be set to Available or Maintenance",
                code="INVALID_BED_STATUS",
                field="status",
            )

        bed = self.get_bed(bed_id, user)
        property_id = bed.room.floor.property_id

        with transaction.atomic():
            bed = self.bed_repo.lock(bed.id)
            if bed.status == BedStatus.OCCUPIED:
                raise ConflictError(
                    message="Bed is occupied. Vacate or relocate the tenant first.",
                    code="BED_OCCUPIED",
                )

            previous = bed.status
            if previous != status:
                self.bed_repo.set_status(bed, status)
                log_action(
                    user=user,
                    action=AuditLog.ACTION_STATUS_CHANGE,
                    resource_type=AuditLog.RESOURCE_BED,
                    resource_id=bed.id,
                    description=f"Bed {bed.bed_number} status {previous} -> {status}",
                    property_id=property_id,
                    metadata={"from": previous, "to": status},
                )

        self.log_info(f"Bed status set: {status}", bed_id=bed.id)
        return bed

    def delete_bed(self, bed_id: int, user, force: bool = False, relocate_to_bed_id: int = None) -> None:
        """
        Delete a bed.

        An occupied bed is refused unless the tenant is moved first
        (`relocate_to_bed_id`) or `force` is set, in which case the tenant
        goes back to PENDING without a bed.
        """
        from tenants.services import TenantService

        bed = self.get_bed(bed_id, user)
        property_id = bed.room.floor.property_id

        with transaction.atomic():
            bed = self.bed_repo.lock(bed.id)
            tenant = bed.tenant

            if tenant is not None:
                if relocate_to_bed_id:
                    TenantService().relocate_tenant(tenant.id, relocate_to_bed_id, user)
                elif force:
                    tenant.status = TenantStatus.PENDING
                    tenant.bed = None
                    tenant.save(update_fields=['status', 'bed', 'updated_at'])
                    log_action(
                        user=user,
                        action=AuditLog.ACTION_STATUS_CHANGE,
                        resource_type=AuditLog.RESOURCE_TENANT,
                        resource_id=tenant.id,
                        description=f"Tenant {tenant.tenant_id} unassigned: bed {bed.bed_number} deleted",
                        property_id=property_id,
                    )
                else:
                    raise BusinessLogicError(
                        message=f"Bed is occupied by {tenant.full_name}. "
                                "Relocate the tenant or force deletion.",
                        code="BED_OCCUPIED",
                        details={"tenant_id": tenant.id},
                    )

            bed_number = bed.bed_number
            self.bed_repo.delete(bed)
            log_action(
                user=user,
                action=AuditLog.ACTION_DELETE,
                resource_type=AuditLog.RESOURCE_BED,
                resource_id=bed_id,
                description=f"Deleted bed {bed_number}",
                property_id=property_id,
            )

        self.log_info(f"Bed deleted: {bed_number}", property_id=property_id, bed_id=bed_id)
