"""
Application-wide constants.
Centralized constants following DRY principle.
"""
from decimal import Decimal


# Property Status
class PropertyStatus:
    ACTIVE = 'ACTIVE'
    INACTIVE = 'INACTIVE'

    CHOICES = [
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
    ]


# Bed Status
class BedStatus:
    AVAILABLE = 'AVAILABLE'
    OCCUPIED = 'OCCUPIED'
    MAINTENANCE = 'MAINTENANCE'

    CHOICES = [
        (AVAILABLE, 'Available'),
        (OCCUPIED, 'Occupied'),
        (MAINTENANCE, 'Maintenance'),
    ]

    # Statuses an operator may set by hand; OCCUPIED only follows a tenant
    MANUAL = [AVAILABLE, MAINTENANCE]


# Tenant Status
class TenantStatus:
    PENDING = 'PENDING'
    ACTIVE = 'ACTIVE'
    VACATED = 'VACATED'

    CHOICES = [
        (PENDING, 'Pending'),
        (ACTIVE, 'Active'),
        (VACATED, 'Vacated'),
    ]


# ID Proof Types
class IdProofType:
    AADHAR = 'AADHAR'
    PAN = 'PAN'
    PASSPORT = 'PASSPORT'
    DRIVING_LICENSE = 'DRIVING_LICENSE'
    VOTER_ID = 'VOTER_ID'

    CHOICES = [
        (AADHAR, 'Aadhar Card'),
        (PAN, 'PAN Card'),
        (PASSPORT, 'Passport'),
        (DRIVING_LICENSE, 'Driving License'),
        (VOTER_ID, 'Voter ID'),
    ]


# Payment Modes
class PaymentMode:
    CASH = 'CASH'
    UPI = 'UPI'
    BANK_TRANSFER = 'BANK_TRANSFER'
    CHEQUE = 'CHEQUE'
    CARD = 'CARD'
    NET_BANKING = 'NET_BANKING'

    CHOICES = [
        (CASH, 'Cash Payment'),
        (UPI, 'UPI/Digital Payment'),
        (BANK_TRANSFER, 'Bank Transfer'),
        (CHEQUE, 'Cheque'),
        (CARD, 'Debit/Credit Card'),
        (NET_BANKING, 'Net Banking'),
    ]


# Payment Types
class PaymentType:
    RENT = 'RENT'
    DEPOSIT = 'DEPOSIT'
    ADVANCE = 'ADVANCE'
    REFUND = 'REFUND'

    CHOICES = [
        (RENT, 'Rent'),
        (DEPOSIT, 'Security Deposit'),
        (ADVANCE, 'Advance Rent'),
        (REFUND, 'Refund'),
    ]


# Payment Status
class PaymentStatus:
    PENDING = 'PENDING'
    PAID = 'PAID'
    OVERDUE = 'OVERDUE'
    CANCELLED = 'CANCELLED'

    CHOICES = [
        (PENDING, 'Pending'),
        (PAID, 'Paid'),
        (OVERDUE, 'Overdue'),
        (CANCELLED, 'Cancelled'),
    ]

    OUTSTANDING = [PENDING, OVERDUE]


# Tenancy defaults
class TenancyDefaults:
    RENT_DUE_DAY = 5
    SECURITY_DEPOSIT_MONTHS = Decimal('2')
    ADVANCE_RENT_MONTHS = Decimal('1')
    TENANT_CODE_PREFIX = 'PG'
    TENANT_CODE_PREFIX_LENGTH = 2
    TENANT_CODE_DIGITS = 3
    VACATE_REASON = 'Tenant vacated'
    DAYS_PER_MONTH = 30


# Selector labels
class OccupancyLabels:
    FULL = 'Full'
    CURRENT = 'Current'


# Pagination
class Pagination:
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100
