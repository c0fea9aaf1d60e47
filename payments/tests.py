from datetime import date, timedelta
from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from audit.models import AuditLog
from core.constants import PaymentStatus
from core.dto import VacateDTO
from core.exceptions import ConflictError, PermissionDeniedError, ValidationError
from core.testing import create_owner, create_property, tenant_data
from tenants.services import TenantService
from .models import Payment
from .services import PaymentService, billing_month, generate_payment_id, next_due_date


class DueDateTests(SimpleTestCase):

    def test_next_month_on_the_fifth(self):
        self.assertEqual(next_due_date(date(2024, 3, 20)), date(2024, 4, 5))
        self.assertEqual(next_due_date(date(2024, 1, 31)), date(2024, 2, 5))

    def test_december_rolls_into_next_year(self):
        self.assertEqual(next_due_date(date(2024, 12, 15)), date(2025, 1, 5))

    def test_billing_month_and_payment_id(self):
        self.assertEqual(billing_month(date(2025, 1, 5)), '2025-01')
        payment_id = generate_payment_id()
        self.assertTrue(payment_id.startswith('PAY'))
        self.assertEqual(len(payment_id), 15)
        self.assertNotEqual(payment_id, generate_payment_id())


class PaymentServiceTests(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.property, self.beds = create_property(self.owner)
        self.tenant = TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        self.payment = Payment.objects.get(tenant=self.tenant)
        self.service = PaymentService()
        self.today = timezone.localdate()

    def test_first_rent_payment(self):
        self.assertEqual(self.payment.month, billing_month(self.payment.due_date))
        self.assertEqual(self.payment.bed_id, self.beds[0].id)
        self.assertEqual(self.payment.property_id, self.property.id)

    def test_mark_paid(self):
        payment = self.service.mark_paid(self.payment.id, self.owner, payment_mode='UPI')
        self.assertEqual(payment.status, PaymentStatus.PAID)
        self.assertEqual(payment.paid_date, self.today)
        self.assertEqual(payment.payment_mode, 'UPI')
        self.assertTrue(AuditLog.objects.filter(action=AuditLog.ACTION_PAYMENT).exists())

    def test_cannot_pay_twice(self):
        self.service.mark_paid(self.payment.id, self.owner)
        with self.assertRaises(ConflictError) as ctx:
            self.service.mark_paid(self.payment.id, self.owner)
        self.assertEqual(ctx.exception.code, 'PAYMENT_NOT_OUTSTANDING')

    def test_paid_date_cannot_be_in_future(self):
        with self.assertRaises(ValidationError):
            self.service.mark_paid(self.payment.id, self.owner, paid_date=self.today + timedelta(days=1))
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, PaymentStatus.PENDING)

    def test_unknown_payment_mode(self):
        with self.assertRaises(ValidationError) as ctx:
            self.service.mark_paid(self.payment.id, self.owner, payment_mode='BARTER')
        self.assertEqual(ctx.exception.field, 'payment_mode')

    def test_other_owner(self):
        with self.assertRaises(PermissionDeniedError):
            self.service.mark_paid(self.payment.id, create_owner('intruder'))

    def test_collected_excludes_refunds(self):
        self.service.mark_paid(self.payment.id, self.owner)
        TenantService().vacate_tenant(
            self.tenant.id, VacateDTO(leaving_date=self.today, refund_amount=Decimal('16000')), self.owner
        )
        collected = self.service.collected_this_month(self.property.id, today=self.payment.due_date)
        self.assertEqual(collected, Decimal('8000.00'))

    def test_tenant_summary(self):
        summary = self.service.tenant_summary(self.tenant)
        self.assertEqual(summary, {'paid': Decimal('0'), 'outstanding': Decimal('8000.00'), 'count': 1})


class PaymentAPITests(TestCase):

    def setUp(self):
        self.owner = create_owner()
        self.property, self.beds = create_property(self.owner)
        self.tenant = TenantService().create_tenant(self.property.id, tenant_data(self.beds[0]), self.owner)
        self.client = APIClient()
        self.client.force_authenticate(user=self.owner)

    def test_list_and_mark_paid(self):
        response = self.client.get('/api/payments/?status=PENDING')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['count'], 1)
        payment_id = response.data['results'][0]['id']

        response = self.client.post(f'/api/payments/{payment_id}/mark-paid/', {'payment_mode': 'UPI'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['status'], PaymentStatus.PAID)

        response = self.client.post(f'/api/payments/{payment_id}/mark-paid/', {}, format='json')
        self.assertEqual(response.status_code, 409)

    def test_payments_are_read_only(self):
        response = self.client.post('/api/payments/', {'amount': '100'}, format='json')
        self.assertEqual(response.status_code, 405)
