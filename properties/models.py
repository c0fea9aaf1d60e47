from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator

from core.constants import PropertyStatus


class Property(models.Model):
    """
    PG property owned by a user.

    Capacity fields are declared limits (0 = unlimited). Occupancy figures
    are NOT stored: they are derived from the bed rows every time they are
    read, so they can never drift from bed state.
    """
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='properties'
    )
    name = models.CharField(max_length=255)
    address = models.TextField()

    floor_capacity = models.PositiveIntegerField(default=0, help_text="Maximum floors (0 = unlimited)")
    room_capacity = models.PositiveIntegerField(default=0, help_text="Maximum rooms (0 = unlimited)")
    bed_capacity = models.PositiveIntegerField(default=0, help_text="Maximum beds (0 = unlimited)")

    monthly_rent = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)],
        help_text="Default monthly rent per bed"
    )
    security_deposit = models.DecimalField(
        max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)],
        help_text="Default security deposit"
    )
    amenities = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=20, choices=PropertyStatus.CHOICES, default=PropertyStatus.ACTIVE)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = "Property"
        verbose_name_plural = "Properties"
        indexes = [
            models.Index(fields=['owner', 'name'], name='property_owner_name_idx'),
            models.Index(fields=['owner', 'status'], name='property_owner_status_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def beds(self):
        """All beds under this property"""
        from rooms.models import Bed
        return Bed.objects.filter(room__floor__property=self)

    @property
    def occupancy_stats(self):
        """Fresh occupancy figures - recomputed on every access"""
        from occupancy.reconciler import compute_stats
        return compute_stats(self.beds.only('id', 'status', 'rent', 'room'))

    @property
    def total_floors(self):
        return self.floors.count()

    @property
    def total_rooms(self):
        from rooms.models import Room
        return Room.objects.filter(floor__property=self).count()

    @property
    def total_beds(self):
        return self.occupancy_stats.total_beds

    @property
    def occupied_beds(self):
        return self.occupancy_stats.occupied_beds

    @property
    def available_beds(self):
        return self.occupancy_stats.available_beds

    @property
    def occupancy_rate(self):
        return self.occupancy_stats.occupancy_rate


class Floor(models.Model):
    """Floor of a property - pure grouping node for rooms"""
    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name='floors')
    name = models.CharField(max_length=100, help_text="e.g., 'Ground Floor'")
    floor_number = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['floor_number', 'name']
        unique_together = ['property', 'name']
        verbose_name = "Floor"
        verbose_name_plural = "Floors"
        indexes = [
            models.Index(fields=['property', 'floor_number'], name='floor_property_number_idx'),
        ]

    def __str__(self):
        return f"{self.property.name} - {self.name}"
