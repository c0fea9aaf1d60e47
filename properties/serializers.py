from rest_framework import serializers

from core.dto import PropertyDTO, FloorDTO
from .models import Property, Floor


class FloorSerializer(serializers.ModelSerializer):
    """Serializer for Floor"""

    class Meta:
        model = Floor
        fields = ['id', 'property', 'name', 'floor_number', 'created_at']
        read_only_fields = ['id', 'created_at']

    def to_dto(self):
        data = self.validated_data
        return FloorDTO(
            property_id=data['property'].id if data.get('property') else None,
            name=data.get('name', ''),
            floor_number=data.get('floor_number', 0),
        )


class PropertySerializer(serializers.ModelSerializer):
    """Serializer for Property with live occupancy figures"""
    total_floors = serializers.IntegerField(read_only=True)
    total_rooms = serializers.IntegerField(read_only=True)
    occupancy = serializers.SerializerMethodField()

    class Meta:
        model = Property
        fields = [
            'id', 'owner', 'name', 'address',
            'floor_capacity', 'room_capacity', 'bed_capacity',
            'monthly_rent', 'security_deposit', 'amenities', 'status',
            'total_floors', 'total_rooms', 'occupancy',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'owner', 'status', 'created_at', 'updated_at']

    def get_occupancy(self, obj):
        """Recomputed from bed rows on every read"""
        return obj.occupancy_stats.as_dict()

    def to_dto(self, instance=None):
        """Validated input merged over the current values (for PATCH)"""
        data = self.validated_data
        base = instance or Property()
        return PropertyDTO(
            id=getattr(instance, 'id', None),
            name=data.get('name', base.name),
            address=data.get('address', base.address),
            floor_capacity=data.get('floor_capacity', base.floor_capacity),
            room_capacity=data.get('room_capacity', base.room_capacity),
            bed_capacity=data.get('bed_capacity', base.bed_capacity),
            monthly_rent=data.get('monthly_rent', base.monthly_rent),
            security_deposit=data.get('security_deposit', base.security_deposit),
            amenities=data.get('amenities', base.amenities),
        )


class PropertyListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list view"""
    total_beds = serializers.IntegerField(read_only=True)
    occupied_beds = serializers.IntegerField(read_only=True)
    occupancy_rate = serializers.IntegerField(read_only=True)

    class Meta:
        model = Property
        fields = ['id', 'name', 'address', 'status', 'total_beds', 'occupied_beds', 'occupancy_rate']
