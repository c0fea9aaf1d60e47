"""
Validation utilities and validators.
Centralized validation logic following single responsibility principle.

Validators only read their inputs and raise core.exceptions.ValidationError
(or a BusinessLogicError subclass); they never touch the database.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from django.utils import timezone

from core.constants import IdProofType
from core.exceptions import CapacityExceededError, ValidationError


# pattern, label, help text
ID_PROOF_FORMATS = {
    IdProofType.AADHAR: (re.compile(r'^\d{12}$'), 'Aadhar Card', '12-digit Aadhar number'),
    IdProofType.PAN: (re.compile(r'^[A-Z]{5}[0-9]{4}[A-Z]$'), 'PAN Card', '10-character PAN (ABCDE1234F)'),
    IdProofType.PASSPORT: (re.compile(r'^[A-Z][0-9]{7}$'), 'Passport', '8-character Passport (A1234567)'),
    IdProofType.DRIVING_LICENSE: (
        re.compile(r'^[A-Z]{2}[0-9]{13}$'), 'Driving License', '15-character DL number (DL1420110012345)'
    ),
    IdProofType.VOTER_ID: (re.compile(r'^[A-Z]{3}[0-9]{7}$'), 'Voter ID', '10-character Voter ID (ABC1234567)'),
}


class IdProofValidator:
    """Validates ID proof numbers against the format of their type"""

    @staticmethod
    def normalize(number: Optional[str]) -> str:
        """Upper-case and drop spaces and separators, as operators type them"""
        return re.sub(r'[^A-Z0-9]', '', (number or '').upper())

    @staticmethod
    def validate(id_proof_type: str, number: Optional[str]) -> str:
        """Return the normalized number, or raise if it does not match its type"""
        if id_proof_type not in ID_PROOF_FORMATS:
            raise ValidationError(
                message=f"Unsupported ID proof type: {id_proof_type}",
                code="INVALID_ID_PROOF_TYPE",
                field="id_proof_type",
            )

        normalized = IdProofValidator.normalize(number)
        if not normalized:
            return ''

        pattern, label, help_text = ID_PROOF_FORMATS[id_proof_type]
        if not pattern.match(normalized):
            raise ValidationError(
                message=f"Please enter a valid {label} number. Format: {help_text}",
                code="INVALID_ID_PROOF_NUMBER",
                field="id_proof_number",
            )
        return normalized


class TenantValidator:
    """Validates tenant form input before anything is written"""

    REQUIRED_FIELDS = [
        ('full_name', 'Please enter tenant full name'),
        ('phone', 'Please enter phone number'),
        ('address', 'Please enter address'),
    ]

    @staticmethod
    def validate_required(data):
        for field_name, message in TenantValidator.REQUIRED_FIELDS:
            value = getattr(data, field_name, '') or ''
            if not value.strip():
                raise ValidationError(message=message, code="REQUIRED", field=field_name)

    @staticmethod
    def validate_amount(value, field_name) -> Optional[Decimal]:
        """Blank stays None so the caller can apply a suggested default"""
        if value is None or value == '':
            return None
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValidationError(
                message="Enter a valid amount",
                code="INVALID_AMOUNT",
                field=field_name,
            )
        if amount < 0:
            raise ValidationError(
                message="Amount cannot be negative",
                code="INVALID_AMOUNT",
                field=field_name,
            )
        return amount

    @staticmethod
    def validate_new_tenant(data):
        """Full check for the create form; returns the normalized ID proof number"""
        TenantValidator.validate_required(data)

        if not data.bed_id:
            raise ValidationError(
                message="Please select a bed for the tenant",
                code="BED_REQUIRED",
                field="bed_id",
            )

        id_proof_number = IdProofValidator.validate(data.id_proof_type, data.id_proof_number)

        if data.terms_accepted is not True:
            raise ValidationError(
                message="Please accept the terms and conditions to proceed",
                code="TERMS_NOT_ACCEPTED",
                field="terms_accepted",
            )
        return id_proof_number


class VacateValidator:
    """Validates the leaving date of a vacate request"""

    @staticmethod
    def validate_leaving_date(leaving_date, joining_date, today=None):
        if not leaving_date:
            raise ValidationError(
                message="Please select a leaving date",
                code="LEAVING_DATE_REQUIRED",
                field="leaving_date",
            )

        today = today or timezone.localdate()
        if leaving_date > today:
            raise ValidationError(
                message="Leaving date cannot be in the future",
                code="LEAVING_DATE_IN_FUTURE",
                field="leaving_date",
            )

        if joining_date and leaving_date < joining_date:
            raise ValidationError(
                message="Leaving date cannot be before the joining date",
                code="LEAVING_DATE_BEFORE_JOINING",
                field="leaving_date",
                details={"joining_date": joining_date.isoformat()},
            )


class CapacityValidator:
    """Validates declared floor/room/bed capacity limits (0 means unlimited)"""

    @staticmethod
    def validate(current_count: int, capacity: int, resource_name: str, scope: str = "Property"):
        if capacity > 0 and current_count >= capacity:
            raise CapacityExceededError(
                message=f"Cannot add more {resource_name}. {scope} capacity is {capacity} {resource_name}.",
                code="CAPACITY_EXCEEDED",
                details={
                    "current": current_count,
                    "capacity": capacity,
                    "resource": resource_name,
                },
            )


class ChoiceValidator:
    """Validates a value against a model CHOICES list"""

    @staticmethod
    def validate(value, choices, field_name, label="value"):
        allowed = [key for key, _ in choices]
        if value not in allowed:
            raise ValidationError(
                message=f"Invalid {label}: {value}",
                code="INVALID_CHOICE",
                field=field_name,
                details={"allowed": allowed},
            )
        return value
