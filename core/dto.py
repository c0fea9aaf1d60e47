"""
Data Transfer Objects (DTOs).
Used for passing data between layers without exposing domain models.
"""
from dataclasses import dataclass, field
from typing import Optional, List
from decimal import Decimal
from datetime import date


@dataclass
class PropertyDTO:
    """Data Transfer Object for Property"""
    id: Optional[int] = None
    name: str = ""
    address: str = ""
    floor_capacity: int = 0
    room_capacity: int = 0
    bed_capacity: int = 0
    monthly_rent: Decimal = Decimal('0')
    security_deposit: Decimal = Decimal('0')
    amenities: List[str] = field(default_factory=list)


@dataclass
class FloorDTO:
    """Data Transfer Object for Floor"""
    id: Optional[int] = None
    property_id: int = None
    name: str = ""
    floor_number: int = 0


@dataclass
class RoomDTO:
    """Data Transfer Object for Room"""
    id: Optional[int] = None
    floor_id: int = None
    room_number: str = ""
    room_type: str = ""
    capacity: int = 0
    amenities: List[str] = field(default_factory=list)


@dataclass
class BedDTO:
    """Data Transfer Object for Bed"""
    id: Optional[int] = None
    room_id: int = None
    bed_number: str = ""
    bed_type: str = ""
    rent: Decimal = Decimal('0')
    deposit: Decimal = Decimal('0')
    status: str = "AVAILABLE"


@dataclass
class TenantDTO:
    """Data Transfer Object for Tenant (create and edit forms)"""
    id: Optional[int] = None
    full_name: str = ""
    phone: str = ""
    address: str = ""
    email: str = ""
    alternate_phone: str = ""
    emergency_contact: str = ""
    id_proof_type: str = "AADHAR"
    id_proof_number: str = ""
    occupation: str = ""
    company: str = ""
    monthly_income: Optional[Decimal] = None
    bed_id: Optional[int] = None
    security_deposit: Optional[Decimal] = None
    advance_rent: Optional[Decimal] = None
    payment_mode: str = "CASH"
    terms_accepted: bool = False
    status: str = "PENDING"


@dataclass
class VacateDTO:
    """Data Transfer Object for the vacate workflow"""
    leaving_date: Optional[date] = None
    reason: str = ""
    refund_amount: Decimal = Decimal('0')
