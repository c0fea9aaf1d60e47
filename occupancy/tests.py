from datetime import date
from decimal import Decimal
from io import StringIO
from types import SimpleNamespace

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient

from core.constants import BedStatus, TenantStatus
from core.dto import VacateDTO
from core.exceptions import PermissionDeniedError, ValidationError
from core.testing import create_owner, create_property, tenant_data
from rooms.models import Bed
from tenants.services import TenantService
from . import reconciler
from .services import OccupancyService


def bed(id, status=BedStatus.AVAILABLE, room_id=1, rent='8000.00', number=None):
    return SimpleNamespace(
        id=id, status=status, room_id=room_id,
        bed_number=number or str(id), bed_type='Single', rent=Decimal(rent),
    )


def tenant(id, bed_id, status=TenantStatus.ACTIVE):
    return SimpleNamespace(id=id, bed_id=bed_id, status=status)


class AvailableBedsTests(SimpleTestCase):

    def setUp(self):
        self.beds = [
            bed(1),
            bed(2, BedStatus.OCCUPIED),
            bed(3, BedStatus.MAINTENANCE),
            bed(4),
        ]

    def test_only_available_beds(self):
        self.assertEqual([b.id for b in reconciler.available_beds(self.beds)], [1, 4])

    def test_editing_tenant_keeps_own_bed(self):
        editing = tenant(10, bed_id=2)
        self.assertEqual([b.id for b in reconciler.available_beds(self.beds, editing)], [1, 2, 4])

    def test_bed_options_put_current_bed_first(self):
        options = reconciler.bed_options(self.beds, tenant(10, bed_id=2))
        self.assertEqual([o['value'] for o in options], [2, 1, 4])
        self.assertTrue(options[0]['current'])
        self.assertTrue(options[0]['label'].endswith('- Current'))
        self.assertEqual(options[1]['label'], 'Bed 1 - Single (₹8000.00/month)')

    def test_vacated_tenant_has_no_current_bed(self):
        editing = tenant(10, bed_id=2, status=TenantStatus.VACATED)
        self.assertEqual([b.id for b in reconciler.available_beds(self.beds, editing)], [1, 4])
        self.assertFalse(any(o['current'] for o in reconciler.bed_options(self.beds, editing)))

    def test_pending_tenant_has_no_current_bed(self):
        editing = tenant(10, bed_id=2, status=TenantStatus.PENDING)
        self.assertEqual([b.id for b in reconciler.available_beds(self.beds, editing)], [1, 4])

    def test_no_beds(self):
        self.assertEqual(reconciler.available_beds([]), [])
        self.assertEqual(reconciler.bed_options([]), [])


class SelectorAvailabilityTests(SimpleTestCase):

    def setUp(self):
        self.floors = [SimpleNamespace(id=1, name='Ground Floor'), SimpleNamespace(id=2, name='First Floor')]
        self.rooms = [
            SimpleNamespace(id=10, floor_id=1, room_number='001', room_type='Double Sharing'),
            SimpleNamespace(id=20, floor_id=2, room_number='101', room_type=''),
        ]
        self.beds = [
            bed(1, room_id=10),
            bed(2, BedStatus.OCCUPIED, room_id=10),
            bed(3, BedStatus.OCCUPIED, room_id=20),
        ]

    def test_full_room_is_disabled(self):
        rooms = reconciler.occupancy_by_room(self.rooms, self.beds)
        self.assertEqual(rooms[10], {
            'available': 1, 'total': 2, 'disabled': False,
            'label': 'Room 001 - Double Sharing (1 beds available)',
        })
        self.assertTrue(rooms[20]['disabled'])
        self.assertEqual(rooms[20]['label'], 'Room 101 (Full)')

    def test_full_floor_is_disabled(self):
        floors = reconciler.occupancy_by_floor(self.floors, self.rooms, self.beds)
        self.assertFalse(floors[1]['disabled'])
        self.assertEqual(floors[2]['label'], 'First Floor (Full)')

    def test_editing_tenant_reopens_their_floor(self):
        floors = reconciler.occupancy_by_floor(self.floors, self.rooms, self.beds, tenant(5, bed_id=3))
        self.assertEqual(floors[2]['available'], 1)
        self.assertFalse(floors[2]['disabled'])

    def test_vacated_tenant_does_not_reopen_their_floor(self):
        editing = tenant(5, bed_id=3, status=TenantStatus.VACATED)
        floors = reconciler.occupancy_by_floor(self.floors, self.rooms, self.beds, editing)
        rooms = reconciler.occupancy_by_room(self.rooms, self.beds, editing)
        self.assertTrue(floors[2]['disabled'])
        self.assertEqual(rooms[20]['label'], 'Room 101 (Full)')


class StatsTests(SimpleTestCase):

    def test_occupancy_rate_rounds_half_up(self):
        cases = [((0, 0), 0), ((0, 4), 0), ((1, 3), 33), ((2, 3), 67), ((1, 8), 13), ((4, 4), 100)]
        for (occupied, total), expected in cases:
            with self.subTest(occupied=occupied, total=total):
                self.assertEqual(reconciler.occupancy_rate(occupied, total), expected)

    def test_compute_stats(self):
        stats = reconciler.compute_stats([
            bed(1, BedStatus.OCCUPIED, rent='8000'),
            bed(2, BedStatus.OCCUPIED, rent='6500.50'),
            bed(3, BedStatus.MAINTENANCE),
            bed(4),
        ])
        self.assertEqual(stats.total_beds, 4)
        self.assertEqual(stats.occupied_beds, 2)
        self.assertEqual(stats.available_beds, 2)
        self.assertEqual(stats.maintenance_beds, 1)
        self.assertEqual(stats.occupancy_rate, 50)
        self.assertEqual(stats.projected_monthly_revenue, Decimal('14500.50'))

    def test_empty_property(self):
        stats = reconciler.compute_stats([])
        self.assertEqual(stats.as_dict(), {
            'total_beds': 0, 'occupied_beds': 0, 'available_beds': 0,
            'maintenance_beds': 0, 'occupancy_rate': 0,
            'projected_monthly_revenue': Decimal('0'),
        })

    def test_stay_duration(self):
        self.assertEqual(
            reconciler.stay_duration(date(2024, 1, 1), date(2024, 3, 5)),
            {'days': 64, 'months': 2, 'remaining_days': 4},
        )
        self.assertEqual(
            reconciler.stay_duration(date(2024, 6, 1), today=date(2024, 6, 11))['days'], 10
        )


class InconsistencyTests(SimpleTestCase):

    def test_consistent(self):
        beds = [bed(1, BedStatus.OCCUPIED), bed(2)]
        tenants = [tenant(1, 1), tenant(2, 2, TenantStatus.VACATED), tenant(3, None, TenantStatus.PENDING)]
        self.assertEqual(reconciler.find_inconsistencies(beds, tenants), [])

    def test_reports_every_mismatch(self):
        beds = [bed(1), bed(2, BedStatus.OCCUPIED), bed(3, BedStatus.OCCUPIED)]
        tenants = [tenant(1, 1), tenant(2, 3), tenant(3, 3), tenant(4, None), tenant(5, 99)]
        problems = reconciler.find_inconsistencies(beds, tenants)
        self.assertIn('Bed 1 has active tenant 1 but status AVAILABLE', problems)
        self.assertIn('Bed 2 is OCCUPIED without an active tenant', problems)
        self.assertIn('Bed 3 has 2 active tenants', problems)
        self.assertIn('Active tenant 4 has no bed', problems)
        self.assertIn('Active tenant 5 points at unknown bed 99', problems)


class OccupancyServiceTests(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.property, self.beds = create_property(self.owner)
        self.service = OccupancyService()

    def test_stats_follow_tenant_lifecycle(self):
        tenant_service = TenantService()
        tenant_service.create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        tenant_service.create_tenant(self.property.id, tenant_data(self.beds[1]), self.owner)
        Bed.objects.filter(id=self.beds[2].id).update(status=BedStatus.MAINTENANCE)

        stats = self.service.property_stats(self.property.id, self.owner)
        self.assertEqual(stats['total_floors'], 1)
        self.assertEqual(stats['total_rooms'], 2)
        self.assertEqual(stats['total_beds'], 4)
        self.assertEqual(stats['occupied_beds'], 2)
        self.assertEqual(stats['available_beds'], 2)
        self.assertEqual(stats['maintenance_beds'], 1)
        self.assertEqual(stats['occupancy_rate'], 50)
        self.assertEqual(stats['projected_monthly_revenue'], Decimal('16000.00'))
        self.assertEqual(stats['tenants'], {'PENDING': 0, 'ACTIVE': 2, 'VACATED': 0})

    def test_other_owner_is_denied(self):
        with self.assertRaises(PermissionDeniedError):
            self.service.property_stats(self.property.id, create_owner('intruder'))

    def test_dashboard_totals(self):
        second, second_beds = create_property(self.owner, name='Blue Nest', rooms_per_floor=1, beds_per_room=1)
        TenantService().create_tenant(second.id, tenant_data(second_beds[0]), self.owner)

        dashboard = self.service.dashboard(self.owner)
        self.assertEqual(dashboard['totals']['properties'], 2)
        self.assertEqual(dashboard['totals']['total_beds'], 5)
        self.assertEqual(dashboard['totals']['occupied_beds'], 1)
        self.assertEqual(dashboard['totals']['occupancy_rate'], 20)

    def test_selector_keeps_editing_tenants_bed(self):
        created = TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)

        plain = self.service.selector_options(self.property.id, self.owner)
        self.assertNotIn(self.beds[0].id, [o['value'] for o in plain['beds']])

        editing = self.service.selector_options(self.property.id, self.owner, editing_tenant_id=created.id)
        self.assertEqual(editing['beds'][0]['value'], self.beds[0].id)
        self.assertTrue(editing['beds'][0]['current'])
        self.assertEqual(len(editing['rooms']), 2)

    def test_vacated_tenant_does_not_claim_their_old_bed(self):
        tenant_service = TenantService()
        first = tenant_service.create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        tenant_service.vacate_tenant(first.id, VacateDTO(leaving_date=first.joining_date), self.owner)
        tenant_service.create_tenant(self.property.id, tenant_data(self.beds[0], full_name='Second Tenant'), self.owner)

        options = self.service.selector_options(self.property.id, self.owner, editing_tenant_id=first.id)
        self.assertNotIn(self.beds[0].id, [o['value'] for o in options['beds']])
        self.assertFalse(any(o['current'] for o in options['beds']))
        available = self.service.available_beds(self.property.id, self.owner, editing_tenant_id=first.id)
        self.assertEqual({b.id for b in available}, {b.id for b in self.beds[1:]})

    def test_editing_tenant_from_other_property(self):
        other, other_beds = create_property(self.owner, name='Blue Nest')
        created = TenantService().create_tenant(other.id, tenant_data(other_beds[0]), self.owner)
        with self.assertRaises(ValidationError):
            self.service.available_beds(self.property.id, self.owner, editing_tenant_id=created.id)


class CheckOccupancyCommandTests(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.property, self.beds = create_property(self.owner)
        TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)

    def test_consistent_data(self):
        out = StringIO()
        call_command('check_occupancy', stdout=out)
        self.assertIn('Green Residency: OK', out.getvalue())
        self.assertIn('All properties consistent', out.getvalue())

    def test_reports_bed_out_of_sync(self):
        Bed.objects.filter(id=self.beds[0].id).update(status=BedStatus.AVAILABLE)
        out = StringIO()
        with self.assertRaises(CommandError):
            call_command('check_occupancy', property_id=self.property.id, stdout=out)
        self.assertIn('but status AVAILABLE', out.getvalue())

    def test_unknown_property(self):
        with self.assertRaises(CommandError):
            call_command('check_occupancy', property_id=99999, stdout=StringIO())


class OccupancyAPITests(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.property, self.beds = create_property(self.owner)
        self.tenant = TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        self.client = APIClient()
        self.client.force_authenticate(user=self.owner)

    def test_property_stats(self):
        response = self.client.get(f'/api/occupancy/{self.property.id}/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['occupied_beds'], 1)
        self.assertEqual(response.data['available_beds'], 3)
        self.assertEqual(response.data['occupancy_rate'], 25)

    def test_dashboard(self):
        response = self.client.get('/api/occupancy/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['totals']['properties'], 1)
        self.assertEqual(len(response.data['properties']), 1)

    def test_available_beds_for_editing_tenant(self):
        response = self.client.get(f'/api/occupancy/{self.property.id}/available-beds/')
        self.assertEqual(len(response.data), 3)

        response = self.client.get(f'/api/occupancy/{self.property.id}/available-beds/?tenant={self.tenant.id}')
        self.assertEqual(len(response.data), 4)

    def test_bad_tenant_param(self):
        response = self.client.get(f'/api/occupancy/{self.property.id}/selector/?tenant=abc')
        self.assertEqual(response.status_code, 400)
        self.assertIn('tenant', response.data['errors'])

    def test_other_owner(self):
        client = APIClient()
        client.force_authenticate(user=create_owner('other'))
        response = client.get(f'/api/occupancy/{self.property.id}/')
        self.assertEqual(response.status_code, 403)
