"""
Property service - Business logic layer for the Property domain.
Services orchestrate repositories and contain business rules.
"""
from django.db import transaction

from audit.helpers import log_action
from audit.models import AuditLog
from core.dto import PropertyDTO, FloorDTO
from core.exceptions import BusinessLogicError, NotFoundError, PermissionDeniedError
from core.services import BaseService
from core.validators import CapacityValidator
from .access import can_access_property
from .models import Property, Floor
from .repositories import PropertyRepository, FloorRepository


class PropertyService(BaseService):
    """Service for property-related business logic"""

    def __init__(self):
        super().__init__()
        self.property_repo = PropertyRepository()
        self.floor_repo = FloorRepository()

    def create_property(self, owner, data: PropertyDTO) -> Property:
        with transaction.atomic():
            property_obj = self.property_repo.create(
                owner=owner,
                name=data.name,
                address=data.address,
                floor_capacity=data.floor_capacity,
                room_capacity=data.room_capacity,
                bed_capacity=data.bed_capacity,
                monthly_rent=data.monthly_rent,
                security_deposit=data.security_deposit,
                amenities=list(data.amenities or []),
            )
            log_action(
                user=owner,
                action=AuditLog.ACTION_CREATE,
                resource_type=AuditLog.RESOURCE_PROPERTY,
                resource_id=property_obj.id,
                description=f"Created property: {property_obj.name}",
                property_id=property_obj.id,
            )

        self.log_info(f"Property created: {property_obj.name}", property_id=property_obj.id)
        return property_obj

    def get_property(self, property_id: int, user) -> Property:
        """
        Get a property with access control.

        Raises:
            NotFoundError: If property doesn't exist
            PermissionDeniedError: If user doesn't own it
        """
        property_obj = self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise NotFoundError(resource_type="Property", resource_id=property_id)

        if not can_access_property(user, property_obj):
            raise PermissionDeniedError("You don't have access to this property")

        return property_obj

    def update_property(self, property_id: int, data: PropertyDTO, user) -> Property:
        property_obj = self.get_property(property_id, user)

        with transaction.atomic():
            self.property_repo.update(
                property_obj,
                name=data.name,
                address=data.address,
                floor_capacity=data.floor_capacity,
                room_capacity=data.room_capacity,
                bed_capacity=data.bed_capacity,
                monthly_rent=data.monthly_rent,
                security_deposit=data.security_deposit,
                amenities=list(data.amenities or []),
            )
            log_action(
                user=user,
                action=AuditLog.ACTION_UPDATE,
                resource_type=AuditLog.RESOURCE_PROPERTY,
                resource_id=property_obj.id,
                description=f"Updated property: {property_obj.name}",
                property_id=property_obj.id,
            )

        self.log_info(f"Property updated: {property_obj.name}", property_id=property_obj.id)
        return property_obj

    def delete_property(self, property_id: int, user) -> None:
        """
        Delete a property and everything under it.

        Raises:
            BusinessLogicError: If active tenants still live there
        """
        property_obj = self.get_property(property_id, user)

        with transaction.atomic():
            property_obj = self.property_repo.lock(property_obj.id)
            active = self.property_repo.count_active_tenants(property_obj.id)
            if active:
                raise BusinessLogicError(
                    message="Cannot delete property with active tenants. "
                            "Please relocate or remove all tenants first.",
                    code="PROPERTY_HAS_ACTIVE_TENANTS",
                    details={"active_tenants": active},
                )

            name = property_obj.name
            self.property_repo.delete(property_obj)
            log_action(
                user=user,
                action=AuditLog.ACTION_DELETE,
                resource_type=AuditLog.RESOURCE_PROPERTY,
                resource_id=property_id,
                description=f"Deleted property: {name}",
                property_id=property_id,
            )

        self.log_info(f"Property deleted: {name}", property_id=property_id)

    def add_floor(self, property_id: int, data: FloorDTO, user) -> Floor:
        """Add a floor, respecting the declared floor capacity"""
        property_obj = self.get_property(property_id, user)

        with transaction.atomic():
            property_obj = self.property_repo.lock(property_obj.id)
            CapacityValidator.validate(
                self.floor_repo.count(property_id=property_obj.id),
                property_obj.floor_capacity,
                "floors",
            )
            floor = self.floor_repo.create(
                property=property_obj,
                name=data.name,
                floor_number=data.floor_number,
            )
            log_action(
                user=user,
                action=AuditLog.ACTION_CREATE,
                resource_type=AuditLog.RESOURCE_FLOOR,
                resource_id=floor.id,
                description=f"Added floor {floor.name} to {property_obj.name}",
                property_id=property_obj.id,
            )

        self.log_info(f"Floor added: {floor.name}", property_id=property_obj.id, floor_id=floor.id)
        return floor
