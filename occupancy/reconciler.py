"""
Occupancy reconciler.

Pure functions that derive bed availability and occupancy statistics from
bed and tenant collections. They work on model instances and on plain
objects alike (anything with the attributes used below), never query the
database and never raise: inconsistent input is reported by
find_inconsistencies(), not repaired.

Bed attributes used:    id, status, room_id, bed_number, bed_type, rent
Room attributes used:   id, floor_id, room_number, room_type
Floor attributes used:  id, name
Tenant attributes used: id, status, bed_id
"""
from collections import Counter, defaultdict
from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional

from django.utils import timezone

from core.constants import BedStatus, OccupancyLabels, TenancyDefaults, TenantStatus


@dataclass(frozen=True)
class OccupancyStats:
    total_beds: int
    occupied_beds: int
    available_beds: int
    maintenance_beds: int
    occupancy_rate: int
    projected_monthly_revenue: Decimal

    def as_dict(self):
        return asdict(self)


def _current_bed_id(editing_tenant) -> Optional[int]:
    """The bed an ACTIVE tenant holds; a vacated tenant keeps bed_id only as history"""
    if editing_tenant is None or editing_tenant.status != TenantStatus.ACTIVE:
        return None
    return getattr(editing_tenant, 'bed_id', None)


def is_assignable(bed, editing_tenant=None) -> bool:
    """A bed can be picked if it is AVAILABLE, or is the editing tenant's own bed"""
    if bed.status == BedStatus.AVAILABLE:
        return True
    current = _current_bed_id(editing_tenant)
    return current is not None and bed.id == current


def available_beds(beds: Iterable, editing_tenant=None) -> List:
    """
    Beds open for assignment.

    When a tenant is being edited, their current bed stays selectable even
    though it is OCCUPIED (by them).
    """
    return [bed for bed in beds if is_assignable(bed, editing_tenant)]


def bed_label(bed, current=False) -> str:
    label = f"Bed {bed.bed_number}"
    if bed.bed_type:
        label += f" - {bed.bed_type}"
    label += f" (₹{bed.rent}/month)"
    if current:
        label += f" - {OccupancyLabels.CURRENT}"
    return label


def bed_options(beds: Iterable, editing_tenant=None) -> List[dict]:
    """Selector options for beds; the editing tenant's bed comes first, marked Current"""
    current_id = _current_bed_id(editing_tenant)
    options = []
    for bed in available_beds(beds, editing_tenant):
        current = bed.id == current_id
        option = {
            'value': bed.id,
            'label': bed_label(bed, current=current),
            'room_id': bed.room_id,
            'rent': bed.rent,
            'current': current,
        }
        if current:
            options.insert(0, option)
        else:
            options.append(option)
    return options


def _availability_label(base: str, available: int) -> str:
    if available:
        return f"{base} ({available} beds available)"
    return f"{base} ({OccupancyLabels.FULL})"


def occupancy_by_room(rooms: Iterable, beds: Iterable, editing_tenant=None) -> Dict[int, dict]:
    """
    Per-room availability for cascading selectors.
    Rooms with nothing free are kept but flagged disabled and labelled Full.
    """
    beds = list(beds)
    totals = Counter(bed.room_id for bed in beds)
    free = Counter(bed.room_id for bed in available_beds(beds, editing_tenant))

    result = {}
    for room in rooms:
        available = free.get(room.id, 0)
        base = f"Room {room.room_number}"
        if room.room_type:
            base += f" - {room.room_type}"
        result[room.id] = {
            'available': available,
            'total': totals.get(room.id, 0),
            'disabled': available == 0,
            'label': _availability_label(base, available),
        }
    return result


def occupancy_by_floor(floors: Iterable, rooms: Iterable, beds: Iterable, editing_tenant=None) -> Dict[int, dict]:
    """
    Per-floor availability for cascading selectors.
    Floors with nothing free are kept but flagged disabled and labelled Full.
    """
    floor_of_room = {room.id: room.floor_id for room in rooms}
    beds = list(beds)

    totals = defaultdict(int)
    for bed in beds:
        totals[floor_of_room.get(bed.room_id)] += 1

    free = defaultdict(int)
    for bed in available_beds(beds, editing_tenant):
        free[floor_of_room.get(bed.room_id)] += 1

    result = {}
    for floor in floors:
        available = free.get(floor.id, 0)
        result[floor.id] = {
            'available': available,
            'total': totals.get(floor.id, 0),
            'disabled': available == 0,
            'label': _availability_label(floor.name, available),
        }
    return result


def occupancy_rate(occupied_beds: int, total_beds: int) -> int:
    """Occupied share of beds as a whole percent, rounded half up; 0 when there are no beds"""
    if not total_beds:
        return 0
    rate = Decimal(occupied_beds * 100) / Decimal(total_beds)
    return int(rate.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def compute_stats(beds: Iterable) -> OccupancyStats:
    """Aggregate counts for a set of beds. available = total - occupied, always"""
    total = occupied = maintenance = 0
    revenue = Decimal('0')
    for bed in beds:
        total += 1
        if bed.status == BedStatus.OCCUPIED:
            occupied += 1
            revenue += Decimal(bed.rent or 0)
        elif bed.status == BedStatus.MAINTENANCE:
            maintenance += 1

    return OccupancyStats(
        total_beds=total,
        occupied_beds=occupied,
        available_beds=total - occupied,
        maintenance_beds=maintenance,
        occupancy_rate=occupancy_rate(occupied, total),
        projected_monthly_revenue=revenue,
    )


def active_tenant_index(tenants: Iterable) -> Dict[int, object]:
    """
    bed_id -> tenant id for ACTIVE tenants.
    If a bed has several active tenants the last one wins; see find_inconsistencies().
    """
    return {
        tenant.bed_id: tenant.id
        for tenant in tenants
        if tenant.status == TenantStatus.ACTIVE and tenant.bed_id is not None
    }


def find_inconsistencies(beds: Iterable, tenants: Iterable) -> List[str]:
    """Describe every way bed state disagrees with tenant state. Empty list means consistent."""
    beds = list(beds)
    tenants = list(tenants)
    problems = []

    active = [t for t in tenants if t.status == TenantStatus.ACTIVE]
    per_bed = Counter(t.bed_id for t in active if t.bed_id is not None)
    index = active_tenant_index(active)
    bed_ids = {bed.id for bed in beds}

    for tenant in active:
        if tenant.bed_id is None:
            problems.append(f"Active tenant {tenant.id} has no bed")
        elif tenant.bed_id not in bed_ids:
            problems.append(f"Active tenant {tenant.id} points at unknown bed {tenant.bed_id}")

    for bed in beds:
        if per_bed.get(bed.id, 0) > 1:
            problems.append(f"Bed {bed.id} has {per_bed[bed.id]} active tenants")
        has_tenant = bed.id in index
        if has_tenant and bed.status != BedStatus.OCCUPIED:
            problems.append(f"Bed {bed.id} has active tenant {index[bed.id]} but status {bed.status}")
        if not has_tenant and bed.status == BedStatus.OCCUPIED:
            problems.append(f"Bed {bed.id} is OCCUPIED without an active tenant")

    return problems


def stay_duration(joining_date, leaving_date=None, today=None) -> dict:
    """Length of stay in days, also split into 30-day months"""
    end = leaving_date or today or timezone.localdate()
    days = max((end - joining_date).days, 0)
    return {
        'days': days,
        'months': days // TenancyDefaults.DAYS_PER_MONTH,
        'remaining_days': days % TenancyDefaults.DAYS_PER_MONTH,
    }
