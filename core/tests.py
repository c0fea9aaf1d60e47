from datetime import date, timedelta
from decimal import Decimal

from django.test import SimpleTestCase

from core.constants import IdProofType, PaymentMode
from core.dto import TenantDTO
from core.exceptions import CapacityExceededError, NotFoundError, ValidationError
from core.services import BaseService, format_context
from core.validators import (
    CapacityValidator, ChoiceValidator, IdProofValidator, TenantValidator, VacateValidator
)


class IdProofValidatorTests(SimpleTestCase):
    """ID proof formats per type"""

    def test_valid_numbers(self):
        cases = [
            (IdProofType.AADHAR, '123456789012'),
            (IdProofType.PAN, 'ABCDE1234F'),
            (IdProofType.PASSPORT, 'A1234567'),
            (IdProofType.DRIVING_LICENSE, 'DL1420110012345'),
            (IdProofType.VOTER_ID, 'ABC1234567'),
        ]
        for proof_type, number in cases:
            with self.subTest(proof_type=proof_type):
                self.assertEqual(IdProofValidator.validate(proof_type, number), number)

    def test_input_is_normalized(self):
        self.assertEqual(IdProofValidator.validate(IdProofType.AADHAR, '1234 5678-9012'), '123456789012')
        self.assertEqual(IdProofValidator.validate(IdProofType.PAN, 'abcde 1234 f'), 'ABCDE1234F')

    def test_invalid_numbers(self):
        cases = [
            (IdProofType.AADHAR, '12345678901'),
            (IdProofType.PAN, 'ABCD12345F'),
            (IdProofType.PASSPORT, '12345678'),
            (IdProofType.DRIVING_LICENSE, 'DL14201100123'),
            (IdProofType.VOTER_ID, 'AB12345678'),
        ]
        for proof_type, number in cases:
            with self.subTest(proof_type=proof_type):
                with self.assertRaises(ValidationError) as ctx:
                    IdProofValidator.validate(proof_type, number)
                self.assertEqual(ctx.exception.field, 'id_proof_number')

    def test_blank_number_is_allowed(self):
        self.assertEqual(IdProofValidator.validate(IdProofType.PAN, ''), '')
        self.assertEqual(IdProofValidator.validate(IdProofType.PAN, None), '')

    def test_unknown_type(self):
        with self.assertRaises(ValidationError) as ctx:
            IdProofValidator.validate('RATION_CARD', '1234')
        self.assertEqual(ctx.exception.field, 'id_proof_type')


class TenantValidatorTests(SimpleTestCase):

    def valid(self, **overrides):
        values = {
            'full_name': 'Ravi Kumar',
            'phone': '9876543210',
            'address': '45 Park Street',
            'id_proof_number': '123456789012',
            'bed_id': 1,
            'terms_accepted': True,
        }
        values.update(overrides)
        return TenantDTO(**values)

    def test_valid_input_returns_normalized_id(self):
        self.assertEqual(TenantValidator.validate_new_tenant(self.valid()), '123456789012')

    def test_required_fields_are_trimmed(self):
        for field_name, message in TenantValidator.REQUIRED_FIELDS:
            with self.subTest(field=field_name):
                with self.assertRaises(ValidationError) as ctx:
                    TenantValidator.validate_new_tenant(self.valid(**{field_name: '   '}))
                self.assertEqual(ctx.exception.errors, {field_name: [message]})

    def test_bed_required(self):
        with self.assertRaises(ValidationError) as ctx:
            TenantValidator.validate_new_tenant(self.valid(bed_id=None))
        self.assertEqual(ctx.exception.field, 'bed_id')

    def test_terms_must_be_accepted(self):
        with self.assertRaises(ValidationError) as ctx:
            TenantValidator.validate_new_tenant(self.valid(terms_accepted=False))
        self.assertEqual(ctx.exception.field, 'terms_accepted')

    def test_amounts(self):
        self.assertIsNone(TenantValidator.validate_amount(None, 'security_deposit'))
        self.assertIsNone(TenantValidator.validate_amount('', 'security_deposit'))
        self.assertEqual(TenantValidator.validate_amount('1500.50', 'advance_rent'), Decimal('1500.50'))
        with self.assertRaises(ValidationError):
            TenantValidator.validate_amount(Decimal('-1'), 'advance_rent')
        with self.assertRaises(ValidationError):
            TenantValidator.validate_amount('abc', 'advance_rent')


class VacateValidatorTests(SimpleTestCase):
    today = date(2024, 6, 15)
    joined = date(2024, 6, 1)

    def test_accepts_dates_within_stay(self):
        VacateValidator.validate_leaving_date(self.joined, self.joined, today=self.today)
        VacateValidator.validate_leaving_date(self.today, self.joined, today=self.today)

    def test_missing_date(self):
        with self.assertRaises(ValidationError) as ctx:
            VacateValidator.validate_leaving_date(None, self.joined, today=self.today)
        self.assertEqual(ctx.exception.code, 'LEAVING_DATE_REQUIRED')

    def test_future_date(self):
        with self.assertRaises(ValidationError) as ctx:
            VacateValidator.validate_leaving_date(self.today + timedelta(days=1), self.joined, today=self.today)
        self.assertEqual(ctx.exception.code, 'LEAVING_DATE_IN_FUTURE')

    def test_before_joining(self):
        with self.assertRaises(ValidationError) as ctx:
            VacateValidator.validate_leaving_date(self.joined - timedelta(days=1), self.joined, today=self.today)
        self.assertEqual(ctx.exception.code, 'LEAVING_DATE_BEFORE_JOINING')
        self.assertEqual(ctx.exception.field, 'leaving_date')


class CapacityAndChoiceValidatorTests(SimpleTestCase):

    def test_zero_capacity_is_unlimited(self):
        CapacityValidator.validate(500, 0, 'beds')

    def test_capacity_reached(self):
        CapacityValidator.validate(1, 2, 'beds')
        with self.assertRaises(CapacityExceededError) as ctx:
            CapacityValidator.validate(2, 2, 'beds', scope='Room')
        self.assertIn('Room capacity is 2 beds', ctx.exception.message)

    def test_choice(self):
        self.assertEqual(ChoiceValidator.validate('UPI', PaymentMode.CHOICES, 'payment_mode'), 'UPI')
        with self.assertRaises(ValidationError) as ctx:
            ChoiceValidator.validate('BITCOIN', PaymentMode.CHOICES, 'payment_mode')
        self.assertEqual(ctx.exception.field, 'payment_mode')


class ExceptionTests(SimpleTestCase):

    def test_not_found_message(self):
        exc = NotFoundError(resource_type='Tenant', resource_id=7)
        self.assertEqual(exc.message, 'Tenant not found')
        self.assertEqual(exc.title, 'Not Found')

    def test_validation_error_without_field_has_no_field_errors(self):
        self.assertEqual(ValidationError('bad').errors, {})


class ServiceLoggingTests(SimpleTestCase):

    def test_context_is_sorted_and_skips_none(self):
        self.assertEqual(format_context({'tenant_id': 3, 'bed_id': 7, 'reason': None}), 'bed_id=7 tenant_id=3')

    def test_log_line_carries_context(self):
        service = BaseService()
        with self.assertLogs('core.services', level='INFO') as logs:
            service.log_info('Tenant vacated: GR004', tenant_id=12)
        self.assertEqual(logs.records[0].getMessage(), 'Tenant vacated: GR004 | tenant_id=12')
