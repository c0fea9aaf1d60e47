from decimal import Decimal

from django.contrib.admin import site
from django.test import RequestFactory, TestCase
from rest_framework.test import APIClient

from audit.models import AuditLog
from core.constants import BedStatus
from core.dto import FloorDTO, PropertyDTO, VacateDTO
from core.exceptions import BusinessLogicError, CapacityExceededError, NotFoundError, PermissionDeniedError
from core.testing import create_owner, create_property, tenant_data
from rooms.models import Bed
from tenants.services import TenantService
from .access import can_access_property, get_accessible_property_ids
from .admin import FloorInline
from .models import Floor, Property
from .services import PropertyService


class PropertyAccessTests(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.other = create_owner('other')
        self.property, _ = create_property(self.owner, rooms_per_floor=0)

    def test_owner_only(self):
        self.assertTrue(can_access_property(self.owner, self.property))
        self.assertTrue(can_access_property(self.owner, self.property.id))
        self.assertFalse(can_access_property(self.other, self.property))
        self.assertEqual(get_accessible_property_ids(self.other), [])

    def test_superuser_sees_everything(self):
        admin = create_owner('admin', is_superuser=True, is_staff=True)
        self.assertTrue(can_access_property(admin, self.property))


class PropertyCountersTests(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.property, self.beds = create_property(self.owner, rooms_per_floor=2, beds_per_room=3)

    def test_counters_are_derived_from_beds(self):
        self.assertEqual(self.property.total_beds, 6)
        self.assertEqual(self.property.occupied_beds, 0)
        self.assertEqual(self.property.occupancy_rate, 0)

        TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        Bed.objects.filter(id=self.beds[1].id).update(status=BedStatus.MAINTENANCE)

        self.assertEqual(self.property.occupied_beds, 1)
        self.assertEqual(self.property.available_beds, 5)
        self.assertEqual(self.property.occupancy_rate, 17)

    def test_property_without_beds(self):
        empty, _ = create_property(self.owner, name='Empty Hall', floors=1, rooms_per_floor=0)
        stats = empty.occupancy_stats
        self.assertEqual(stats.total_beds, 0)
        self.assertEqual(stats.occupancy_rate, 0)
        self.assertEqual(empty.total_floors, 1)
        self.assertEqual(empty.total_rooms, 0)


class PropertyServiceTests(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.service = PropertyService()

    def test_create_and_update(self):
        property_obj = self.service.create_property(
            self.owner, PropertyDTO(name='Lake View', address='Whitefield', monthly_rent=Decimal('7000'))
        )
        self.assertEqual(property_obj.owner, self.owner)

        updated = self.service.update_property(
            property_obj.id,
            PropertyDTO(name='Lake View PG', address='Whitefield', monthly_rent=Decimal('7500')),
            self.owner,
        )
        self.assertEqual(updated.name, 'Lake View PG')
        self.assertEqual(
            AuditLog.objects.filter(resource_type=AuditLog.RESOURCE_PROPERTY).count(), 2
        )

    def test_get_property_checks_owner(self):
        property_obj, _ = create_property(self.owner, rooms_per_floor=0)
        with self.assertRaises(PermissionDeniedError):
            self.service.get_property(property_obj.id, create_owner('other'))
        with self.assertRaises(NotFoundError):
            self.service.get_property(99999, self.owner)

    def test_floor_capacity(self):
        property_obj, _ = create_property(self.owner, rooms_per_floor=0, floor_capacity=1)
        with self.assertRaises(CapacityExceededError):
            self.service.add_floor(property_obj.id, FloorDTO(name='First Floor', floor_number=1), self.owner)

    def test_delete_refused_with_active_tenants(self):
        property_obj, beds = create_property(self.owner)
        tenant = TenantService().create_tenant(property_obj.id, tenant_data(beds[0]), self.owner)

        with self.assertRaises(BusinessLogicError) as ctx:
            self.service.delete_property(property_obj.id, self.owner)
        self.assertEqual(ctx.exception.code, 'PROPERTY_HAS_ACTIVE_TENANTS')
        self.assertTrue(Property.objects.filter(id=property_obj.id).exists())

        TenantService().vacate_tenant(tenant.id, VacateDTO(leaving_date=tenant.joining_date), self.owner)
        self.service.delete_property(property_obj.id, self.owner)
        self.assertFalse(Property.objects.filter(id=property_obj.id).exists())
        self.assertFalse(Bed.objects.filter(id=beds[0].id).exists())


class PropertyAdminTests(TestCase):

    def test_properties_and_floors_cannot_be_deleted_in_admin(self):
        request = RequestFactory().get('/admin/properties/')
        request.user = create_owner('root', is_staff=True, is_superuser=True)
        for model in (Property, Floor):
            model_admin = site._registry[model]
            self.assertFalse(model_admin.has_delete_permission(request))
            self.assertNotIn('delete_selected', model_admin.get_actions(request))
        self.assertFalse(FloorInline(Property, site).can_delete)


class PropertyAPITests(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.property, self.beds = create_property(self.owner)
        self.client = APIClient()
        self.client.force_authenticate(user=self.owner)

    def test_list_is_paginated_and_scoped(self):
        create_property(create_owner('other'), name='Blue Nest')
        response = self.client.get('/api/properties/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['total_beds'], 4)

    def test_detail_has_occupancy(self):
        TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        response = self.client.get(f'/api/properties/{self.property.id}/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['occupancy']['occupied_beds'], 1)
        self.assertEqual(response.data['occupancy']['occupancy_rate'], 25)

    def test_create(self):
        response = self.client.post(
            '/api/properties/', {'name': 'Lake View', 'address': 'Whitefield', 'monthly_rent': '7000'},
            format='json',
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['owner'], self.owner.id)

    def test_delete_with_active_tenant(self):
        TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        response = self.client.delete(f'/api/properties/{self.property.id}/')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['code'], 'PROPERTY_HAS_ACTIVE_TENANTS')

    def test_add_floor(self):
        response = self.client.post(
            f'/api/properties/{self.property.id}/floors/', {'name': 'First Floor', 'floor_number': 1},
            format='json',
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(self.property.total_floors, 2)

    def test_other_owner_gets_404(self):
        client = APIClient()
        client.force_authenticate(user=create_owner('other'))
        response = client.get(f'/api/properties/{self.property.id}/')
        self.assertEqual(response.status_code, 404)
