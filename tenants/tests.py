from datetime import timedelta
from decimal import Decimal

from django.contrib.admin import site
from django.db import IntegrityError, transaction
from django.test import RequestFactory, SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from audit.models import AuditLog
from core.constants import BedStatus, PaymentStatus, PaymentType, TenantStatus
from core.dto import VacateDTO
from core.exceptions import (
    ConfirmationRequiredError, ConflictError, NotFoundError, PermissionDeniedError, ValidationError
)
from core.testing import create_owner, create_property, tenant_data
from occupancy.reconciler import compute_stats, find_inconsistencies
from payments.models import Payment
from payments.services import next_due_date
from rooms.models import Bed
from .models import Tenant
from .serializers import tenant_to_dto
from .services import TenantService
from .utils import format_tenant_code, next_tenant_sequence, tenant_code_prefix


class TenantCodeTests(SimpleTestCase):

    def test_prefix_from_property_name(self):
        self.assertEqual(tenant_code_prefix('Green Residency'), 'GR')
        self.assertEqual(tenant_code_prefix('sunrise pg'), 'SU')
        self.assertEqual(tenant_code_prefix('A1'), 'PG')
        self.assertEqual(tenant_code_prefix(''), 'PG')

    def test_sequence_is_one_past_highest(self):
        self.assertEqual(next_tenant_sequence([], 'GR'), 1)
        self.assertEqual(next_tenant_sequence(['GR001', 'GR007', 'GR003', 'XX099', 'GRabc'], 'GR'), 8)
        self.assertEqual(format_tenant_code('GR', 8), 'GR008')
        self.assertEqual(format_tenant_code('GR', 1234), 'GR1234')


class TenantServiceTestCase(TestCase):
    """Shared fixture: one property, one floor, two rooms of two beds at 8000"""

    def setUp(self):
        self.owner = create_owner()
        self.property, self.beds = create_property(self.owner)
        self.service = TenantService()
        self.today = timezone.localdate()

    def reload(self, obj):
        obj.refresh_from_db()
        return obj

    def create(self, bed, **overrides):
        return self.service.create_tenant(self.property.id, tenant_data(bed, **overrides), self.owner)

    def assertConsistent(self):
        beds = Bed.objects.filter(room__floor__property=self.property)
        tenants = Tenant.objects.filter(property=self.property)
        self.assertEqual(find_inconsistencies(beds, tenants), [])


class CreateTenantTests(TenantServiceTestCase):

    def test_create_occupies_bed_and_raises_rent(self):
        tenant = self.create(self.beds[0])

        self.assertEqual(tenant.status, TenantStatus.ACTIVE)
        self.assertEqual(tenant.tenant_id, 'GR001')
        self.assertEqual(tenant.joining_date, self.today)
        self.assertEqual(tenant.id_proof_number, '123456789012')
        self.assertEqual(tenant.security_deposit, Decimal('16000.00'))
        self.assertEqual(tenant.advance_rent, Decimal('8000.00'))
        self.assertIsNotNone(tenant.terms_accepted_at)
        self.assertEqual(self.reload(self.beds[0]).status, BedStatus.OCCUPIED)

        payment = Payment.objects.get(tenant=tenant)
        self.assertEqual(payment.status, PaymentStatus.PENDING)
        self.assertEqual(payment.payment_type, PaymentType.RENT)
        self.assertEqual(payment.amount, Decimal('8000.00'))
        self.assertEqual(payment.due_date, next_due_date(self.today))
        self.assertEqual(payment.due_date.day, 5)

        self.assertTrue(AuditLog.objects.filter(
            action=AuditLog.ACTION_CREATE, resource_type=AuditLog.RESOURCE_TENANT, resource_id=str(tenant.id)
        ).exists())

    def test_codes_are_sequential_per_property(self):
        first = self.create(self.beds[0])
        second = self.create(self.beds[1], full_name='Anita Sharma')
        self.assertEqual((first.tenant_id, second.tenant_id), ('GR001', 'GR002'))

        other, other_beds = create_property(self.owner, name='Blue Nest')
        third = self.service.create_tenant(other.id, tenant_data(other_beds[0]), self.owner)
        self.assertEqual(third.tenant_id, 'BL001')

    def test_code_skips_numbers_already_taken(self):
        self.create(self.beds[0])
        Tenant.objects.filter(property=self.property).update(tenant_id='GR005')
        self.assertEqual(self.create(self.beds[1]).tenant_id, 'GR006')

    def test_explicit_deposits_are_kept(self):
        tenant = self.create(self.beds[0], security_deposit=Decimal('5000'), advance_rent=Decimal('0'))
        self.assertEqual(tenant.security_deposit, Decimal('5000'))
        self.assertEqual(tenant.advance_rent, Decimal('0'))

    def test_invalid_input_writes_nothing(self):
        cases = [
            ({'full_name': '  '}, 'full_name'),
            ({'phone': ''}, 'phone'),
            ({'address': ''}, 'address'),
            ({'bed_id': None}, 'bed_id'),
            ({'id_proof_type': 'PAN', 'id_proof_number': '1234'}, 'id_proof_number'),
            ({'terms_accepted': False}, 'terms_accepted'),
            ({'payment_mode': 'BARTER'}, 'payment_mode'),
            ({'security_deposit': Decimal('-1')}, 'security_deposit'),
        ]
        for overrides, field in cases:
            with self.subTest(field=field):
                with self.assertRaises(ValidationError) as ctx:
                    self.create(self.beds[0], **overrides)
                self.assertEqual(ctx.exception.field, field)

        self.assertEqual(Tenant.objects.count(), 0)
        self.assertEqual(Payment.objects.count(), 0)
        self.assertEqual(AuditLog.objects.count(), 0)
        self.assertEqual(self.reload(self.beds[0]).status, BedStatus.AVAILABLE)

    def test_occupied_bed_conflicts(self):
        self.create(self.beds[0])
        with self.assertRaises(ConflictError) as ctx:
            self.create(self.beds[0], full_name='Late Comer')
        self.assertEqual(ctx.exception.code, 'BED_NOT_AVAILABLE')
        self.assertEqual(Tenant.objects.count(), 1)
        self.assertEqual(Payment.objects.count(), 1)

    def test_maintenance_bed_conflicts(self):
        Bed.objects.filter(id=self.beds[0].id).update(status=BedStatus.MAINTENANCE)
        with self.assertRaises(ConflictError):
            self.create(self.beds[0])
        self.assertEqual(self.reload(self.beds[0]).status, BedStatus.MAINTENANCE)

    def test_bed_in_other_property_conflicts(self):
        _, other_beds = create_property(self.owner, name='Blue Nest')
        with self.assertRaises(ConflictError):
            self.create(other_beds[0])
        self.assertEqual(self.reload(other_beds[0]).status, BedStatus.AVAILABLE)

    def test_unknown_bed_conflicts(self):
        with self.assertRaises(ConflictError):
            self.service.create_tenant(self.property.id, tenant_data(self.beds[0], bed_id=99999), self.owner)

    def test_other_owner_cannot_create(self):
        with self.assertRaises(PermissionDeniedError):
            self.service.create_tenant(self.property.id, tenant_data(self.beds[0]), create_owner('intruder'))

    def test_database_refuses_two_active_tenants_on_one_bed(self):
        tenant = self.create(self.beds[0])
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Tenant.objects.create(
                    property=self.property, tenant_id='GR099', full_name='Duplicate',
                    phone='9000000000', address='x', bed=tenant.bed, status=TenantStatus.ACTIVE,
                )


class VacateTenantTests(TenantServiceTestCase):

    def setUp(self):
        super().setUp()
        self.tenant = self.create(self.beds[0])
        Tenant.objects.filter(id=self.tenant.id).update(joining_date=self.today - timedelta(days=10))

    def test_vacate_frees_bed(self):
        tenant = self.service.vacate_tenant(
            self.tenant.id, VacateDTO(leaving_date=self.today, reason='Moved out of city'), self.owner
        )
        self.assertEqual(tenant.status, TenantStatus.VACATED)
        self.assertEqual(tenant.leaving_date, self.today)
        self.assertEqual(tenant.vacate_reason, 'Moved out of city')
        self.assertEqual(tenant.bed_id, self.beds[0].id)
        self.assertEqual(tenant.stay_duration()['days'], 10)
        self.assertEqual(self.reload(self.beds[0]).status, BedStatus.AVAILABLE)
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.ACTION_VACATE).exists())
        self.assertConsistent()

    def test_default_reason_and_refund(self):
        tenant = self.service.vacate_tenant(
            self.tenant.id, VacateDTO(leaving_date=self.today, refund_amount=Decimal('12000')), self.owner
        )
        self.assertEqual(tenant.vacate_reason, 'Tenant vacated')
        refund = Payment.objects.get(tenant=tenant, payment_type=PaymentType.REFUND)
        self.assertEqual(refund.amount, Decimal('-12000'))
        self.assertEqual(refund.status, PaymentStatus.PAID)

    def test_bad_leaving_dates_change_nothing(self):
        for leaving_date in (None, self.today + timedelta(days=1), self.today - timedelta(days=11)):
            with self.subTest(leaving_date=leaving_date):
                with self.assertRaises(ValidationError) as ctx:
                    self.service.vacate_tenant(self.tenant.id, VacateDTO(leaving_date=leaving_date), self.owner)
                self.assertEqual(ctx.exception.field, 'leaving_date')

        self.assertEqual(self.reload(self.tenant).status, TenantStatus.ACTIVE)
        self.assertEqual(self.reload(self.beds[0]).status, BedStatus.OCCUPIED)
        self.assertFalse(AuditLog.objects.filter(action=AuditLog.ACTION_VACATE).exists())

    def test_vacated_tenant_cannot_vacate_again(self):
        self.service.vacate_tenant(self.tenant.id, VacateDTO(leaving_date=self.today), self.owner)
        with self.assertRaises(ConflictError) as ctx:
            self.service.vacate_tenant(self.tenant.id, VacateDTO(leaving_date=self.today), self.owner)
        self.assertEqual(ctx.exception.code, 'TENANT_NOT_ACTIVE')

    def test_freed_bed_can_be_taken_again(self):
        self.service.vacate_tenant(self.tenant.id, VacateDTO(leaving_date=self.today), self.owner)
        newcomer = self.create(self.beds[0], full_name='Anita Sharma')
        self.assertEqual(newcomer.status, TenantStatus.ACTIVE)
        self.assertConsistent()


class DeleteTenantTests(TenantServiceTestCase):

    def test_requires_confirmation(self):
        tenant = self.create(self.beds[0])
        with self.assertRaises(ConfirmationRequiredError) as ctx:
            self.service.delete_tenant(tenant.id, self.owner)
        self.assertEqual(
            ctx.exception.message,
            'Are you sure you want to delete tenant "Ravi Kumar"? This action cannot be undone.'
        )
        self.assertTrue(Tenant.objects.filter(id=tenant.id).exists())

    def test_deleting_active_tenant_releases_bed(self):
        tenant = self.create(self.beds[0])
        self.service.delete_tenant(tenant.id, self.owner, confirmed=True)

        self.assertFalse(Tenant.objects.filter(id=tenant.id).exists())
        self.assertFalse(Payment.objects.filter(tenant_id=tenant.id).exists())
        self.assertEqual(self.reload(self.beds[0]).status, BedStatus.AVAILABLE)
        self.assertTrue(AuditLog.objects.filter(
            action=AuditLog.ACTION_DELETE, resource_id=str(tenant.id)
        ).exists())

    def test_deleting_vacated_tenant_leaves_bed_alone(self):
        old = self.create(self.beds[0])
        self.service.vacate_tenant(old.id, VacateDTO(leaving_date=self.today), self.owner)
        current = self.create(self.beds[0], full_name='Anita Sharma')

        self.service.delete_tenant(old.id, self.owner, confirmed=True)

        self.assertEqual(self.reload(self.beds[0]).status, BedStatus.OCCUPIED)
        self.assertEqual(self.reload(current).status, TenantStatus.ACTIVE)
        self.assertConsistent()

    def test_missing_tenant(self):
        with self.assertRaises(NotFoundError):
            self.service.delete_tenant(99999, self.owner, confirmed=True)


class TenantAdminTests(TenantServiceTestCase):

    def setUp(self):
        super().setUp()
        self.admin = site._registry[Tenant]
        self.request = RequestFactory().post('/admin/tenants/tenant/')
        self.request.user = self.owner

    def test_admin_delete_releases_bed(self):
        tenant = self.create(self.beds[0])
        self.admin.delete_model(self.request, tenant)

        self.assertFalse(Tenant.objects.filter(id=tenant.id).exists())
        self.assertEqual(self.reload(self.beds[0]).status, BedStatus.AVAILABLE)
        self.assertConsistent()

    def test_admin_bulk_delete_releases_beds(self):
        self.create(self.beds[0])
        vacated = self.create(self.beds[1])
        self.service.vacate_tenant(vacated.id, VacateDTO(leaving_date=self.today), self.owner)

        self.admin.delete_queryset(self.request, Tenant.objects.filter(property=self.property))

        self.assertEqual(Tenant.objects.count(), 0)
        statuses = set(Bed.objects.filter(room__floor__property=self.property).values_list('status', flat=True))
        self.assertEqual(statuses, {BedStatus.AVAILABLE})
        self.assertEqual(AuditLog.objects.filter(action=AuditLog.ACTION_DELETE).count(), 2)


class RelocateTenantTests(TenantServiceTestCase):

    def setUp(self):
        super().setUp()
        self.tenant = self.create(self.beds[0])

    def test_relocate_moves_occupancy(self):
        tenant = self.service.relocate_tenant(self.tenant.id, self.beds[2].id, self.owner)

        self.assertEqual(tenant.bed_id, self.beds[2].id)
        self.assertEqual(self.reload(self.beds[0]).status, BedStatus.AVAILABLE)
        self.assertEqual(self.reload(self.beds[2]).status, BedStatus.OCCUPIED)
        # same rent, no new payment
        self.assertEqual(Payment.objects.filter(tenant=tenant).count(), 1)
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.ACTION_RELOCATE).exists())
        self.assertConsistent()

    def test_relocate_to_different_rent_raises_payment(self):
        Bed.objects.filter(id=self.beds[3].id).update(rent=Decimal('9500.00'))
        tenant = self.service.relocate_tenant(self.tenant.id, self.beds[3].id, self.owner)

        amounts = sorted(Payment.objects.filter(tenant=tenant).values_list('amount', flat=True))
        self.assertEqual(amounts, [Decimal('8000.00'), Decimal('9500.00')])

    def test_relocate_to_same_bed(self):
        with self.assertRaises(ValidationError) as ctx:
            self.service.relocate_tenant(self.tenant.id, self.beds[0].id, self.owner)
        self.assertEqual(ctx.exception.code, 'SAME_BED')

    def test_relocate_to_taken_bed_changes_nothing(self):
        other = self.create(self.beds[1], full_name='Anita Sharma')
        with self.assertRaises(ConflictError):
            self.service.relocate_tenant(self.tenant.id, other.bed_id, self.owner)
        self.assertEqual(self.reload(self.tenant).bed_id, self.beds[0].id)
        self.assertEqual(self.reload(self.beds[0]).status, BedStatus.OCCUPIED)
        self.assertConsistent()

    def test_update_with_new_bed_relocates(self):
        dto = tenant_to_dto(self.tenant)
        dto.bed_id = self.beds[1].id
        dto.phone = '9123456780'
        tenant = self.service.update_tenant(self.tenant.id, dto, self.owner)

        self.assertEqual(tenant.bed_id, self.beds[1].id)
        self.assertEqual(self.reload(tenant).phone, '9123456780')
        self.assertEqual(self.reload(self.beds[0]).status, BedStatus.AVAILABLE)
        self.assertConsistent()

    def test_update_keeps_status_and_code(self):
        dto = tenant_to_dto(self.tenant)
        dto.full_name = 'Ravi K. Kumar'
        tenant = self.service.update_tenant(self.tenant.id, dto, self.owner)
        self.assertEqual(tenant.full_name, 'Ravi K. Kumar')
        self.assertEqual(tenant.tenant_id, 'GR001')
        self.assertEqual(tenant.status, TenantStatus.ACTIVE)

    def test_update_validation_writes_nothing(self):
        dto = tenant_to_dto(self.tenant)
        dto.full_name = ''
        with self.assertRaises(ValidationError):
            self.service.update_tenant(self.tenant.id, dto, self.owner)
        self.assertEqual(self.reload(self.tenant).full_name, 'Ravi Kumar')


class AssignBedTests(TenantServiceTestCase):

    def setUp(self):
        super().setUp()
        self.pending = Tenant.objects.create(
            property=self.property, tenant_id='GR050', full_name='Waitlisted Person',
            phone='9000000001', address='Somewhere', status=TenantStatus.PENDING,
        )

    def test_assign_activates_pending_tenant(self):
        tenant = self.service.assign_bed(self.pending.id, self.beds[1].id, self.owner)
        self.assertEqual(tenant.status, TenantStatus.ACTIVE)
        self.assertEqual(tenant.bed_id, self.beds[1].id)
        self.assertEqual(self.reload(self.beds[1]).status, BedStatus.OCCUPIED)
        self.assertEqual(Payment.objects.filter(tenant=tenant).count(), 1)
        self.assertConsistent()

    def test_active_tenant_cannot_be_assigned(self):
        active = self.create(self.beds[0])
        with self.assertRaises(ConflictError) as ctx:
            self.service.assign_bed(active.id, self.beds[1].id, self.owner)
        self.assertEqual(ctx.exception.code, 'TENANT_NOT_PENDING')

    def test_pending_tenant_does_not_affect_counts(self):
        stats = compute_stats(Bed.objects.filter(room__floor__property=self.property))
        self.assertEqual(stats.occupied_beds, 0)
        self.assertConsistent()


class OccupancyConsistencyTests(TenantServiceTestCase):

    def test_counters_hold_through_a_sequence_of_operations(self):
        first = self.create(self.beds[0])
        second = self.create(self.beds[1], full_name='Anita Sharma')
        self.service.relocate_tenant(first.id, self.beds[2].id, self.owner)
        self.service.vacate_tenant(second.id, VacateDTO(leaving_date=self.today), self.owner)
        third = self.create(self.beds[1], full_name='Mohan Das')
        self.service.delete_tenant(third.id, self.owner, confirmed=True)

        stats = compute_stats(Bed.objects.filter(room__floor__property=self.property))
        self.assertEqual(stats.total_beds, 4)
        self.assertEqual(stats.occupied_beds, 1)
        self.assertEqual(stats.available_beds, 3)
        self.assertEqual(stats.occupancy_rate, 25)
        self.assertEqual(
            Tenant.objects.filter(property=self.property, status=TenantStatus.ACTIVE).count(),
            stats.occupied_beds,
        )
        self.assertConsistent()


class TenantAPITests(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.property, self.beds = create_property(self.owner)
        self.client = APIClient()
        self.client.force_authenticate(user=self.owner)

    def payload(self, bed, **overrides):
        data = {
            'property': self.property.id,
            'full_name': 'Ravi Kumar',
            'phone': '9876543210',
            'address': '45 Park Street, Kolkata',
            'id_proof_type': 'AADHAR',
            'id_proof_number': '123456789012',
            'bed_id': bed.id,
            'terms_accepted': True,
        }
        data.update(overrides)
        return data

    def test_create(self):
        response = self.client.post('/api/tenants/', self.payload(self.beds[0]), format='json')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['tenant_id'], 'GR001')
        self.assertEqual(response.data['status'], TenantStatus.ACTIVE)
        self.assertEqual(response.data['security_deposit'], '16000.00')
        self.assertEqual(response.data['payment_summary']['count'], 1)

    def test_create_reports_field_errors(self):
        response = self.client.post('/api/tenants/', self.payload(self.beds[0], full_name=''), format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['errors'], {'full_name': ['Please enter tenant full name']})
        self.assertEqual(Tenant.objects.count(), 0)

    def test_create_needs_property(self):
        data = self.payload(self.beds[0])
        del data['property']
        response = self.client.post('/api/tenants/', data, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('property', response.data['errors'])

    def test_create_on_taken_bed_conflicts(self):
        self.client.post('/api/tenants/', self.payload(self.beds[0]), format='json')
        response = self.client.post('/api/tenants/', self.payload(self.beds[0]), format='json')
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data['code'], 'BED_NOT_AVAILABLE')

    def test_list_is_scoped_to_owner(self):
        TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        other = create_owner('other')
        other_property, other_beds = create_property(other, name='Blue Nest')
        TenantService().create_tenant(other_property.id, tenant_data(other_beds[0]), other)

        response = self.client.get('/api/tenants/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['tenant_id'], 'GR001')

    def test_other_owners_tenant_is_not_found(self):
        other = create_owner('other')
        other_property, other_beds = create_property(other, name='Blue Nest')
        tenant = TenantService().create_tenant(other_property.id, tenant_data(other_beds[0]), other)

        response = self.client.get(f'/api/tenants/{tenant.id}/')
        self.assertEqual(response.status_code, 404)

    def test_delete_needs_confirmation(self):
        tenant = TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)

        response = self.client.delete(f'/api/tenants/{tenant.id}/')
        self.assertEqual(response.status_code, 428)
        self.assertIn('Ravi Kumar', response.data['detail'])
        self.assertTrue(Tenant.objects.filter(id=tenant.id).exists())

        response = self.client.delete(f'/api/tenants/{tenant.id}/?confirm=true')
        self.assertEqual(response.status_code, 204)
        self.assertFalse(Tenant.objects.filter(id=tenant.id).exists())

    def test_vacate_with_future_date(self):
        tenant = TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        tomorrow = timezone.localdate() + timedelta(days=1)

        response = self.client.post(
            f'/api/tenants/{tenant.id}/vacate/', {'leaving_date': tomorrow.isoformat()}, format='json'
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn('leaving_date', response.data['errors'])

    def test_vacate_and_payments(self):
        tenant = TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)

        response = self.client.post(
            f'/api/tenants/{tenant.id}/vacate/',
            {'leaving_date': timezone.localdate().isoformat(), 'refund_amount': '16000'},
            format='json',
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['status'], TenantStatus.VACATED)

        response = self.client.get(f'/api/tenants/{tenant.id}/payments/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 2)

    def test_relocate(self):
        tenant = TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        response = self.client.post(
            f'/api/tenants/{tenant.id}/relocate/', {'bed_id': self.beds[3].id}, format='json'
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['bed'], self.beds[3].id)

    def test_partial_update(self):
        tenant = TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        response = self.client.patch(f'/api/tenants/{tenant.id}/', {'occupation': 'Engineer'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['occupation'], 'Engineer')
        self.assertEqual(response.data['bed'], self.beds[0].id)

    def test_requires_authentication(self):
        response = APIClient().get('/api/tenants/')
        self.assertEqual(response.status_code, 401)
