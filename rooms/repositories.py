"""
Room repository - Data access layer for Room and Bed.
"""
from django.db.models import QuerySet

from core.constants import BedStatus
from core.repositories import BaseRepository
from .models import Room, Bed


class RoomRepository(BaseRepository[Room]):
    """Repository for Room model"""
    model = Room

    def get_by_property(self, property_id: int) -> QuerySet[Room]:
        return self.get_all(floor__property_id=property_id).select_related('floor')

    def count_for_property(self, property_id: int) -> int:
        return self.count(floor__property_id=property_id)


class BedRepository(BaseRepository[Bed]):
    """Repository for Bed model"""
    model = Bed

    def get_by_property(self, property_id: int) -> QuerySet[Bed]:
        return self.get_all(room__floor__property_id=property_id).select_related('room', 'room__floor')

    def count_for_property(self, property_id: int) -> int:
        return self.count(room__floor__property_id=property_id)

    def count_in_room(self, room_id: int) -> int:
        return self.count(room_id=room_id)

    def set_status(self, bed: Bed, status: str) -> Bed:
        return self.update(bed, status=status)

    def occupy(self, bed: Bed) -> Bed:
        return self.set_status(bed, BedStatus.OCCUPIED)

    def release(self, bed: Bed) -> Bed:
        return self.set_status(bed, BedStatus.AVAILABLE)

    def lock_many(self, bed_ids) -> dict:
        """Lock several beds in id order; returns {id: bed}"""
        beds = self.model.objects.select_for_update().filter(id__in=bed_ids).order_by('id')
        return {bed.id: bed for bed in beds}
