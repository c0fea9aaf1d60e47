from django.core.exceptions import PermissionDenied
from django.test import TestCase
from rest_framework.test import APIClient

from audit.helpers import log_action
from audit.models import AuditLog
from core.dto import VacateDTO
from core.testing import create_owner, create_property, tenant_data
from tenants.services import TenantService


class AuditLogModelTests(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.log = log_action(
            user=self.owner,
            action=AuditLog.ACTION_CREATE,
            resource_type=AuditLog.RESOURCE_PROPERTY,
            resource_id=1,
            description='Created property: Green Residency',
            property_id=1,
        )

    def test_entries_are_immutable(self):
        self.log.description = 'changed'
        with self.assertRaises(PermissionDenied):
            self.log.save()
        with self.assertRaises(PermissionDenied):
            self.log.delete()

    def test_resource_id_is_stored_as_text(self):
        self.assertEqual(self.log.resource_id, '1')
        self.assertEqual(AuditLog.objects.for_resource(AuditLog.RESOURCE_PROPERTY, 1).count(), 1)
        self.assertEqual(self.log.user_display, 'owner')


class AuditLogAPITests(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.property, self.beds = create_property(self.owner)
        service = TenantService()
        self.tenant = service.create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        service.vacate_tenant(
            self.tenant.id, VacateDTO(leaving_date=self.tenant.joining_date, reason='Job transfer'), self.owner
        )
        self.client = APIClient()
        self.client.force_authenticate(user=self.owner)

    def test_tenant_trail(self):
        response = self.client.get(
            f'/api/audit/resource_trail/?resource_type=Tenant&resource_id={self.tenant.id}'
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['count'], 2)
        actions = [entry['action'] for entry in response.data['audit_trail']]
        self.assertEqual(sorted(actions), [AuditLog.ACTION_CREATE, AuditLog.ACTION_VACATE])

    def test_filter_by_action(self):
        response = self.client.get('/api/audit/?action=VACATE')
        self.assertEqual(response.data['count'], 1)
        self.assertIn('Job transfer', response.data['results'][0]['description'])

    def test_other_owner_sees_nothing(self):
        client = APIClient()
        client.force_authenticate(user=create_owner('other'))
        response = client.get('/api/audit/')
        self.assertEqual(response.data['count'], 0)

    def test_trail_needs_both_params(self):
        response = self.client.get('/api/audit/resource_trail/?resource_type=Tenant')
        self.assertEqual(response.status_code, 400)


class AuditClientIPTests(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.property, self.beds = create_property(self.owner)

    def test_api_actions_record_client_ip(self):
        client = APIClient(REMOTE_ADDR='10.0.0.5')
        client.force_authenticate(user=self.owner)
        response = client.post(
            f'/api/beds/{self.beds[0].id}/set-status/', {'status': 'MAINTENANCE'}, format='json'
        )
        self.assertEqual(response.status_code, 200)
        entry = AuditLog.objects.for_action(AuditLog.ACTION_STATUS_CHANGE).get()
        self.assertEqual(entry.ip_address, '10.0.0.5')

    def test_forwarded_address_wins(self):
        client = APIClient(HTTP_X_FORWARDED_FOR='203.0.113.7, 10.0.0.1')
        client.force_authenticate(user=self.owner)
        client.post(f'/api/beds/{self.beds[0].id}/set-status/', {'status': 'MAINTENANCE'}, format='json')
        entry = AuditLog.objects.for_action(AuditLog.ACTION_STATUS_CHANGE).get()
        self.assertEqual(entry.ip_address, '203.0.113.7')

    def test_no_ip_outside_a_request(self):
        TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        self.assertEqual(set(AuditLog.objects.values_list('ip_address', flat=True)), {None})
