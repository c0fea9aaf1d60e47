from rest_framework import serializers

from core.constants import BedStatus
from core.dto import RoomDTO, BedDTO
from .models import Room, Bed


class RoomSerializer(serializers.ModelSerializer):
    """Serializer for Room"""
    occupied_beds = serializers.IntegerField(read_only=True)
    available_beds = serializers.IntegerField(read_only=True)

    class Meta:
        model = Room
        fields = [
            'id', 'floor', 'room_number', 'room_type', 'capacity', 'amenities',
            'occupied_beds', 'available_beds', 'created_at'
        ]
        read_only_fields = ['id', 'created_at']

    def to_dto(self):
        data = self.validated_data
        return RoomDTO(
            floor_id=data['floor'].id,
            room_number=data['room_number'],
            room_type=data.get('room_type', ''),
            capacity=data.get('capacity', 0),
            amenities=data.get('amenities', []),
        )


class BedSerializer(serializers.ModelSerializer):
    """Serializer for Bed; status is read-only here (see the set-status action)"""
    location = serializers.CharField(read_only=True)
    tenant = serializers.SerializerMethodField()
    rent = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, min_value=0)

    class Meta:
        model = Bed
        fields = [
            'id', 'room', 'bed_number', 'bed_type', 'rent', 'deposit', 'status',
            'location', 'tenant', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'status', 'created_at', 'updated_at']

    def get_tenant(self, obj):
        """Active tenant via the back-reference lookup"""
        tenant = obj.tenant
        if tenant is None:
            return None
        return {'id': tenant.id, 'tenant_id': tenant.tenant_id, 'full_name': tenant.full_name}

    def to_dto(self):
        data = self.validated_data
        return BedDTO(
            room_id=data['room'].id,
            bed_number=data['bed_number'],
            bed_type=data.get('bed_type', ''),
            rent=data.get('rent'),
            deposit=data.get('deposit'),
            status=self.initial_data.get('status') or BedStatus.AVAILABLE,
        )


class BedStatusSerializer(serializers.Serializer):
    status = serializers.CharField()


class BedDeleteSerializer(serializers.Serializer):
    force = serializers.BooleanField(required=False, default=False)
    relocate_to = serializers.IntegerField(required=False, allow_null=True)
