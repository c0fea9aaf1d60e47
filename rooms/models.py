from django.db import models
from django.core.validators import MinValueValidator

from core.constants import BedStatus, TenantStatus
from properties.models import Floor


class Room(models.Model):
    """Room on a floor - holds beds"""
    floor = models.ForeignKey(Floor, on_delete=models.CASCADE, related_name='rooms')
    room_number = models.CharField(max_length=20, help_text="e.g., '101', 'A1'")
    room_type = models.CharField(max_length=50, blank=True, help_text="e.g., 'Double Sharing', 'AC Single'")
    capacity = models.PositiveIntegerField(default=0, help_text="Maximum beds (0 = unlimited)")
    amenities = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['room_number']
        unique_together = ['floor', 'room_number']
        verbose_name = "Room"
        verbose_name_plural = "Rooms"
        indexes = [
            models.Index(fields=['floor'], name='room_floor_idx'),
        ]

    def __str__(self):
        return f"{self.floor} - Room {self.room_number}"

    @property
    def property_id(self):
        return self.floor.property_id

    @property
    def occupied_beds(self):
        """Count of occupied beds"""
        return self.beds.filter(status=BedStatus.OCCUPIED).count()

    @property
    def available_beds(self):
        """Count of beds open for assignment"""
        return self.beds.filter(status=BedStatus.AVAILABLE).count()


class Bed(models.Model):
    """
    Bed in a room - the unit of occupancy.

    `status` is authoritative. The tenant back-reference is a lookup over
    tenants.Tenant.bed, never a stored copy.
    """
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name='beds')
    bed_number = models.CharField(max_length=10, help_text="e.g., 'A', '1'")
    bed_type = models.CharField(max_length=50, blank=True, help_text="e.g., 'Single', 'Bunk - Lower'")
    rent = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    deposit = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    status = models.CharField(max_length=20, choices=BedStatus.CHOICES, default=BedStatus.AVAILABLE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['room__room_number', 'bed_number']
        unique_together = ['room', 'bed_number']
        verbose_name = "Bed"
        verbose_name_plural = "Beds"
        indexes = [
            models.Index(fields=['room', 'status'], name='bed_room_status_idx'),
            models.Index(fields=['status'], name='bed_status_idx'),
        ]

    def __str__(self):
        return f"{self.room} - Bed {self.bed_number}"

    @property
    def tenant(self):
        """Active tenant occupying this bed (back-reference lookup)"""
        return self.tenants.filter(status=TenantStatus.ACTIVE).first()

    @property
    def property_id(self):
        return self.room.floor.property_id

    @property
    def location(self):
        """Human-readable location"""
        return f"{self.room.floor.name} / Room {self.room.room_number} / Bed {self.bed_number}"

