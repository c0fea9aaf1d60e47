"""
Builders for test data shared by the app test suites.
"""
from decimal import Decimal

from django.contrib.auth import get_user_model

from core.constants import IdProofType
from core.dto import TenantDTO
from properties.models import Property, Floor
from rooms.models import Room, Bed

User = get_user_model()


def create_owner(username='owner', **kwargs):
    return User.objects.create_user(username=username, password='testpass123', **kwargs)


def create_property(owner, name='Green Residency', floors=1, rooms_per_floor=2, beds_per_room=2,
                    rent=Decimal('8000.00'), **kwargs):
    """Property with a full floor/room/bed tree; returns (property, beds in creation order)"""
    property_obj = Property.objects.create(
        owner=owner,
        name=name,
        address='12 MG Road, Bengaluru',
        monthly_rent=rent,
        **kwargs
    )
    beds = []
    for floor_number in range(floors):
        floor = Floor.objects.create(property=property_obj, name=f'Floor {floor_number}', floor_number=floor_number)
        for room_index in range(rooms_per_floor):
            room = Room.objects.create(
                floor=floor,
                room_number=f'{floor_number}{room_index + 1:02d}',
                room_type='Double Sharing',
            )
            for bed_index in range(beds_per_room):
                beds.append(Bed.objects.create(
                    room=room,
                    bed_number=chr(ord('A') + bed_index),
                    bed_type='Single',
                    rent=rent,
                ))
    return property_obj, beds


def tenant_data(bed, **overrides):
    """A valid create-form payload for the given bed"""
    values = {
        'full_name': 'Ravi Kumar',
        'phone': '9876543210',
        'address': '45 Park Street, Kolkata',
        'id_proof_type': IdProofType.AADHAR,
        'id_proof_number': '1234 5678 9012',
        'bed_id': bed.id,
        'terms_accepted': True,
    }
    values.update(overrides)
    return TenantDTO(**values)
