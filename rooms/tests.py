from decimal import Decimal

from django.contrib.admin import site
from django.test import RequestFactory, TestCase
from rest_framework.test import APIClient

from audit.models import AuditLog
from core.constants import BedStatus, TenantStatus
from core.dto import BedDTO, RoomDTO
from core.exceptions import (
    BusinessLogicError, CapacityExceededError, ConflictError, PermissionDeniedError, ValidationError
)
from core.testing import create_owner, create_property, tenant_data
from tenants.models import Tenant
from tenants.services import TenantService
from .admin import BedInline
from .models import Bed, Room
from .services import RoomService


class RoomServiceTestCase(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.property, self.beds = create_property(self.owner)
        self.room = self.beds[0].room
        self.service = RoomService()


class AddInventoryTests(RoomServiceTestCase):

    def test_add_bed_defaults_rent_to_property(self):
        bed = self.service.add_bed(self.room.id, BedDTO(room_id=self.room.id, bed_number='C', rent=None), self.owner)
        self.assertEqual(bed.rent, Decimal('8000.00'))
        self.assertEqual(bed.status, BedStatus.AVAILABLE)
        self.assertTrue(AuditLog.objects.filter(
            action=AuditLog.ACTION_CREATE, resource_type=AuditLog.RESOURCE_BED
        ).exists())

    def test_new_bed_cannot_start_occupied(self):
        with self.assertRaises(ValidationError):
            self.service.add_bed(
                self.room.id, BedDTO(room_id=self.room.id, bed_number='C', status=BedStatus.OCCUPIED), self.owner
            )

    def test_room_capacity(self):
        Room.objects.filter(id=self.room.id).update(capacity=2)
        with self.assertRaises(CapacityExceededError) as ctx:
            self.service.add_bed(self.room.id, BedDTO(room_id=self.room.id, bed_number='C'), self.owner)
        self.assertIn('Room capacity', ctx.exception.message)

    def test_property_bed_capacity(self):
        self.property.bed_capacity = 4
        self.property.save()
        other_room = self.beds[2].room
        with self.assertRaises(CapacityExceededError):
            self.service.add_bed(other_room.id, BedDTO(room_id=other_room.id, bed_number='C'), self.owner)
        self.assertEqual(Bed.objects.filter(room__floor__property=self.property).count(), 4)

    def test_property_room_capacity(self):
        self.property.room_capacity = 2
        self.property.save()
        with self.assertRaises(CapacityExceededError):
            self.service.add_room(self.room.floor_id, RoomDTO(room_number='099'), self.owner)

    def test_add_room(self):
        room = self.service.add_room(self.room.floor_id, RoomDTO(room_number='099', room_type='AC Single'), self.owner)
        self.assertEqual(room.floor_id, self.room.floor_id)

    def test_other_owner(self):
        with self.assertRaises(PermissionDeniedError):
            self.service.add_bed(self.room.id, BedDTO(room_id=self.room.id, bed_number='C'), create_owner('intruder'))


class BedStatusTests(RoomServiceTestCase):

    def test_maintenance_round_trip(self):
        bed = self.service.set_bed_status(self.beds[0].id, BedStatus.MAINTENANCE, self.owner)
        self.assertEqual(bed.status, BedStatus.MAINTENANCE)
        bed = self.service.set_bed_status(self.beds[0].id, BedStatus.AVAILABLE, self.owner)
        self.assertEqual(bed.status, BedStatus.AVAILABLE)
        self.assertEqual(AuditLog.objects.filter(action=AuditLog.ACTION_STATUS_CHANGE).count(), 2)

    def test_cannot_set_occupied_by_hand(self):
        with self.assertRaises(ValidationError) as ctx:
            self.service.set_bed_status(self.beds[0].id, BedStatus.OCCUPIED, self.owner)
        self.assertEqual(ctx.exception.message, 'Bed status can only be set to Available or Maintenance')

    def test_occupied_bed_cannot_go_to_maintenance(self):
        TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        with self.assertRaises(ConflictError):
            self.service.set_bed_status(self.beds[0].id, BedStatus.MAINTENANCE, self.owner)
        self.beds[0].refresh_from_db()
        self.assertEqual(self.beds[0].status, BedStatus.OCCUPIED)


class DeleteBedTests(RoomServiceTestCase):

    def setUp(self):
        super().setUp()
        self.tenant = TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)

    def test_free_bed_is_deleted(self):
        self.service.delete_bed(self.beds[1].id, self.owner)
        self.assertFalse(Bed.objects.filter(id=self.beds[1].id).exists())

    def test_occupied_bed_is_refused(self):
        with self.assertRaises(BusinessLogicError) as ctx:
            self.service.delete_bed(self.beds[0].id, self.owner)
        self.assertEqual(ctx.exception.code, 'BED_OCCUPIED')
        self.assertTrue(Bed.objects.filter(id=self.beds[0].id).exists())

    def test_force_unassigns_tenant(self):
        self.service.delete_bed(self.beds[0].id, self.owner, force=True)
        tenant = Tenant.objects.get(id=self.tenant.id)
        self.assertEqual(tenant.status, TenantStatus.PENDING)
        self.assertIsNone(tenant.bed_id)

    def test_relocate_then_delete(self):
        self.service.delete_bed(self.beds[0].id, self.owner, relocate_to_bed_id=self.beds[3].id)
        tenant = Tenant.objects.get(id=self.tenant.id)
        self.assertEqual(tenant.status, TenantStatus.ACTIVE)
        self.assertEqual(tenant.bed_id, self.beds[3].id)
        self.assertEqual(Bed.objects.get(id=self.beds[3].id).status, BedStatus.OCCUPIED)
        self.assertFalse(Bed.objects.filter(id=self.beds[0].id).exists())


class InventoryAdminTests(RoomServiceTestCase):

    def setUp(self):
        super().setUp()
        self.request = RequestFactory().get('/admin/rooms/')
        self.request.user = create_owner('root', is_staff=True, is_superuser=True)

    def test_rooms_and_beds_cannot_be_deleted_in_admin(self):
        TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        for model in (Room, Bed):
            model_admin = site._registry[model]
            self.assertFalse(model_admin.has_delete_permission(self.request))
            self.assertNotIn('delete_selected', model_admin.get_actions(self.request))
        self.assertFalse(BedInline(Room, site).can_delete)


class BedAPITests(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.property, self.beds = create_property(self.owner)
        self.client = APIClient()
        self.client.force_authenticate(user=self.owner)

    def test_set_status(self):
        response = self.client.post(
            f'/api/beds/{self.beds[0].id}/set-status/', {'status': 'MAINTENANCE'}, format='json'
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['status'], 'MAINTENANCE')

        response = self.client.post(
            f'/api/beds/{self.beds[0].id}/set-status/', {'status': 'OCCUPIED'}, format='json'
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn('status', response.data['errors'])

    def test_create_bed(self):
        response = self.client.post(
            '/api/beds/', {'room': self.beds[0].room_id, 'bed_number': 'C', 'bed_type': 'Bunk - Lower'},
            format='json',
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['rent'], '8000.00')
        self.assertEqual(response.data['status'], 'AVAILABLE')

    def test_delete_occupied_bed(self):
        TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        response = self.client.delete(f'/api/beds/{self.beds[0].id}/')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['code'], 'BED_OCCUPIED')

        response = self.client.delete(f'/api/beds/{self.beds[0].id}/?relocate_to={self.beds[1].id}')
        self.assertEqual(response.status_code, 204)

    def test_list_filtered_by_status(self):
        TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        response = self.client.get('/api/beds/?status=OCCUPIED')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['tenant']['full_name'], 'Ravi Kumar')
