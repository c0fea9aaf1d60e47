"""
Tenant service - Tenant lifecycle business logic.

Every operation validates its input first and then applies all of its writes
(tenant, bed, payment, audit) inside one transaction.atomic() block with the
rows it decides on locked, so a failure leaves nothing half done.
"""
from datetime import date

from django.db import IntegrityError, transaction
from django.utils import timezone

from audit.helpers import log_action
from audit.models import AuditLog
from core.constants import PaymentMode, TenancyDefaults, TenantStatus
from core.dto import TenantDTO, VacateDTO
from core.exceptions import (
    ConfirmationRequiredError, ConflictError, NotFoundError, PermissionDeniedError, ValidationError
)
from core.services import BaseService
from core.validators import ChoiceValidator, IdProofValidator, TenantValidator, VacateValidator
from occupancy.reconciler import is_assignable
from payments.services import PaymentService
from properties.access import can_access_property
from properties.repositories import PropertyRepository
from rooms.repositories import BedRepository
from .models import Tenant
from .repositories import TenantRepository
from .utils import format_tenant_code, next_tenant_sequence, tenant_code_prefix


def delete_confirmation_message(tenant) -> str:
    return (
        f'Are you sure you want to delete tenant "{tenant.full_name}"? '
        'This action cannot be undone.'
    )


class TenantService(BaseService):
    """Service for the tenant lifecycle: create, edit, assign, relocate, vacate, delete"""

    def __init__(self):
        super().__init__()
        self.tenant_repo = TenantRepository()
        self.property_repo = PropertyRepository()
        self.bed_repo = BedRepository()
        self.payment_service = PaymentService()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_tenant(self, tenant_id: int, user) -> Tenant:
        """
        Get a tenant with access control.

        Raises:
            NotFoundError: If tenant doesn't exist
            PermissionDeniedError: If user can't access the tenant's property
        """
        tenant = self.tenant_repo.with_location().filter(id=tenant_id).first()
        if tenant is None:
            raise NotFoundError(resource_type="Tenant", resource_id=tenant_id)

        if not can_access_property(user, tenant.property_id):
            raise PermissionDeniedError("You don't have access to this tenant")

        return tenant

    def _get_property(self, property_id: int, user):
        property_obj = self.property_repo.get_by_id(property_id)
        if property_obj is None:
            raise NotFoundError(resource_type="Property", resource_id=property_id)
        if not can_access_property(user, property_obj):
            raise PermissionDeniedError("You don't have access to this property")
        return property_obj

    def _generate_tenant_code(self, property_obj) -> str:
        """Next free code for the property; caller holds the property row lock"""
        prefix = tenant_code_prefix(property_obj.name)
        sequence = next_tenant_sequence(self.tenant_repo.codes_for_property(property_obj.id), prefix)
        code = format_tenant_code(prefix, sequence)
        while self.tenant_repo.exists(property_id=property_obj.id, tenant_id=code):
            sequence += 1
            code = format_tenant_code(prefix, sequence)
        return code

    def _check_assignable(self, bed, property_id: int, editing_tenant=None):
        """
        Raises:
            ConflictError: If the bed is gone, belongs elsewhere or was taken
        """
        if bed is None or bed.room.floor.property_id != property_id:
            raise ConflictError(
                message="Selected bed is no longer available. Please refresh and choose another bed.",
                code="BED_NOT_AVAILABLE",
            )
        exclude_id = editing_tenant.id if editing_tenant is not None else None
        if not is_assignable(bed, editing_tenant) or self.tenant_repo.has_active_on_bed(bed.id, exclude_id):
            raise ConflictError(
                message=f"Bed {bed.bed_number} is no longer available. Please refresh and choose another bed.",
                code="BED_NOT_AVAILABLE",
                details={"bed_id": bed.id, "status": bed.status},
            )
        return bed

    def _lock_bed(self, bed_id: int):
        return self.bed_repo.lock_many([bed_id]).get(bed_id)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_tenant(self, property_id: int, data: TenantDTO, user, today: date = None) -> Tenant:
        """
        Create an ACTIVE tenant on an available bed.

        Blank deposits default to 2x (security) and 1x (advance) the bed
        rent. The first rent payment is raised PENDING, due on the rent day
        of next month.

        Raises:
            ValidationError: On any invalid field, before anything is written
            ConflictError: If the bed was taken since the form was loaded
        """
        property_obj = self._get_property(property_id, user)

        id_proof_number = TenantValidator.validate_new_tenant(data)
        ChoiceValidator.validate(data.payment_mode, PaymentMode.CHOICES, "payment_mode", "payment mode")
        security_deposit = TenantValidator.validate_amount(data.security_deposit, "security_deposit")
        advance_rent = TenantValidator.validate_amount(data.advance_rent, "advance_rent")
        monthly_income = TenantValidator.validate_amount(data.monthly_income, "monthly_income")

        today = today or timezone.localdate()

        with transaction.atomic():
            property_obj = self.property_repo.lock(property_obj.id)
            bed = self._check_assignable(self._lock_bed(data.bed_id), property_obj.id)

            if security_deposit is None:
                security_deposit = bed.rent * TenancyDefaults.SECURITY_DEPOSIT_MONTHS
            if advance_rent is None:
                advance_rent = bed.rent * TenancyDefaults.ADVANCE_RENT_MONTHS

            try:
                tenant = self.tenant_repo.create(
                    property=property_obj,
                    tenant_id=self._generate_tenant_code(property_obj),
                    full_name=data.full_name.strip(),
                    email=(data.email or '').strip(),
                    phone=data.phone.strip(),
                    alternate_phone=(data.alternate_phone or '').strip(),
                    emergency_contact=(data.emergency_contact or '').strip(),
                    address=data.address.strip(),
                    id_proof_type=data.id_proof_type,
                    id_proof_number=id_proof_number,
                    occupation=(data.occupation or '').strip(),
                    company=(data.company or '').strip(),
                    monthly_income=monthly_income,
                    bed=bed,
                    security_deposit=security_deposit,
                    advance_rent=advance_rent,
                    payment_mode=data.payment_mode,
                    joining_date=today,
                    status=TenantStatus.ACTIVE,
                    terms_accepted_at=timezone.now(),
                    created_by=user if user.is_authenticated else None,
                )
            except IntegrityError as exc:
                self.log_error(
                    "Tenant create rejected by constraint",
                    error=exc, property_id=property_obj.id, bed_id=bed.id,
                )
                raise ConflictError(
                    message="Selected bed is no longer available. Please refresh and choose another bed.",
                    code="BED_NOT_AVAILABLE",
                )
            self.bed_repo.occupy(bed)
            self.payment_service.create_rent_payment(tenant, bed, user, today=today)

            log_action(
                user=user,
                action=AuditLog.ACTION_CREATE,
                resource_type=AuditLog.RESOURCE_TENANT,
                resource_id=tenant.id,
                description=f"Created tenant {tenant.full_name} ({tenant.tenant_id}) on bed {bed.bed_number}",
                property_id=property_obj.id,
                metadata={
                    "bed_id": bed.id,
                    "security_deposit": str(security_deposit),
                    "advance_rent": str(advance_rent),
                },
            )

        self.log_info(
            f"Tenant created: {tenant.tenant_id}",
            tenant_id=tenant.id, property_id=property_obj.id, bed_id=bed.id,
        )
        return tenant

    # ------------------------------------------------------------------
    # Edit / assign / relocate
    # ------------------------------------------------------------------

    def update_tenant(self, tenant_id: int, data: TenantDTO, user, today: date = None) -> Tenant:
        """
        Edit a tenant's details.

        tenant_id, status and joining_date cannot change here. A different
        bed_id is routed to relocate (ACTIVE) or assign (PENDING).
        """
        tenant = self.get_tenant(tenant_id, user)

        TenantValidator.validate_required(data)
        id_proof_number = IdProofValidator.validate(data.id_proof_type, data.id_proof_number)
        ChoiceValidator.validate(data.payment_mode, PaymentMode.CHOICES, "payment_mode", "payment mode")
        security_deposit = TenantValidator.validate_amount(data.security_deposit, "security_deposit")
        advance_rent = TenantValidator.validate_amount(data.advance_rent, "advance_rent")
        monthly_income = TenantValidator.validate_amount(data.monthly_income, "monthly_income")

        with transaction.atomic():
            tenant = self.tenant_repo.lock(tenant.id)

            fields = {
                'full_name': data.full_name.strip(),
                'email': (data.email or '').strip(),
                'phone': data.phone.strip(),
                'alternate_phone': (data.alternate_phone or '').strip(),
                'emergency_contact': (data.emergency_contact or '').strip(),
                'address': data.address.strip(),
                'id_proof_type': data.id_proof_type,
                'id_proof_number': id_proof_number,
                'occupation': (data.occupation or '').strip(),
                'company': (data.company or '').strip(),
                'monthly_income': monthly_income,
                'payment_mode': data.payment_mode,
            }
            if security_deposit is not None:
                fields['security_deposit'] = security_deposit
            if advance_rent is not None:
                fields['advance_rent'] = advance_rent
            self.tenant_repo.update(tenant, **fields)

            log_action(
                user=user,
                action=AuditLog.ACTION_UPDATE,
                resource_type=AuditLog.RESOURCE_TENANT,
                resource_id=tenant.id,
                description=f"Updated tenant {tenant.full_name} ({tenant.tenant_id})",
                property_id=tenant.property_id,
            )

            if data.bed_id and data.bed_id != tenant.bed_id:
                if tenant.status == TenantStatus.ACTIVE:
                    tenant = self.relocate_tenant(tenant.id, data.bed_id, user, today=today)
                elif tenant.status == TenantStatus.PENDING:
                    tenant = self.assign_bed(tenant.id, data.bed_id, user, today=today)
                else:
                    raise ConflictError(
                        message="A vacated tenant cannot be moved to a bed",
                        code="TENANT_VACATED",
                    )

        self.log_info(f"Tenant updated: {tenant.tenant_id}", tenant_id=tenant.id)
        return tenant

    def assign_bed(self, tenant_id: int, bed_id: int, user, today: date = None) -> Tenant:
        """Give a PENDING tenant a bed; the tenant becomes ACTIVE"""
        tenant = self.get_tenant(tenant_id, user)

        with transaction.atomic():
            tenant = self.tenant_repo.lock(tenant.id)
            if tenant.status != TenantStatus.PENDING:
                raise ConflictError(
                    message="Only pending tenants can be assigned a bed",
                    code="TENANT_NOT_PENDING",
                )

            bed = self._check_assignable(self._lock_bed(bed_id), tenant.property_id)
            self.tenant_repo.update(tenant, bed=bed, status=TenantStatus.ACTIVE)
            self.bed_repo.occupy(bed)
            self.payment_service.create_rent_payment(tenant, bed, user, today=today)

            log_action(
                user=user,
                action=AuditLog.ACTION_ASSIGN_BED,
                resource_type=AuditLog.RESOURCE_TENANT,
                resource_id=tenant.id,
                description=f"Assigned tenant {tenant.tenant_id} to bed {bed.bed_number}",
                property_id=tenant.property_id,
                metadata={"bed_id": bed.id},
            )

        self.log_info(f"Bed assigned: {tenant.tenant_id}", tenant_id=tenant.id, bed_id=bed.id)
        return tenant

    def relocate_tenant(self, tenant_id: int, new_bed_id: int, user, today: date = None) -> Tenant:
        """
        Move an ACTIVE tenant to another bed of the same property.

        The old bed is released and the new one occupied in the same
        transaction. A new rent payment is raised when the rent differs.
        """
        tenant = self.get_tenant(tenant_id, user)

        with transaction.atomic():
            tenant = self.tenant_repo.lock(tenant.id)
            if tenant.status != TenantStatus.ACTIVE:
                raise ConflictError(
                    message="Only active tenants can be relocated",
                    code="TENANT_NOT_ACTIVE",
                )
            if new_bed_id == tenant.bed_id:
                raise ValidationError(
                    message="Tenant is already assigned to this bed",
                    code="SAME_BED",
                    field="bed_id",
                )

            old_bed_id = tenant.bed_id
            beds = self.bed_repo.lock_many([b for b in (old_bed_id, new_bed_id) if b])
            old_bed = beds.get(old_bed_id)
            new_bed = self._check_assignable(beds.get(new_bed_id), tenant.property_id)

            self.tenant_repo.update(tenant, bed=new_bed)
            if old_bed is not None:
                self.bed_repo.release(old_bed)
            self.bed_repo.occupy(new_bed)

            if old_bed is None or old_bed.rent != new_bed.rent:
                self.payment_service.create_rent_payment(
                    tenant, new_bed, user, today=today,
                    description=f"Rent after relocation to bed {new_bed.bed_number}",
                )

            log_action(
                user=user,
                action=AuditLog.ACTION_RELOCATE,
                resource_type=AuditLog.RESOURCE_TENANT,
                resource_id=tenant.id,
                description=f"Relocated tenant {tenant.tenant_id} to bed {new_bed.bed_number}",
                property_id=tenant.property_id,
                metadata={"from_bed_id": old_bed_id, "to_bed_id": new_bed.id},
            )

        self.log_info(
            f"Tenant relocated: {tenant.tenant_id}",
            tenant_id=tenant.id, from_bed_id=old_bed_id, to_bed_id=new_bed.id,
        )
        return tenant

    # ------------------------------------------------------------------
    # Vacate / delete
    # ------------------------------------------------------------------

    def vacate_tenant(self, tenant_id: int, data: VacateDTO, user, today: date = None) -> Tenant:
        """
        Vacate an ACTIVE tenant and free their bed.

        VACATED is terminal. The tenant keeps its bed link as history; the
        bed itself goes back to AVAILABLE.

        Raises:
            ConflictError: If the tenant is not ACTIVE
            ValidationError: If leaving_date is missing, in the future or
                before the joining date
        """
        tenant = self.get_tenant(tenant_id, user)
        refund_amount = TenantValidator.validate_amount(data.refund_amount, "refund_amount")

        with transaction.atomic():
            tenant = self.tenant_repo.lock(tenant.id)
            if tenant.status != TenantStatus.ACTIVE:
                raise ConflictError(
                    message="Only active tenants can be vacated",
                    code="TENANT_NOT_ACTIVE",
                )
            VacateValidator.validate_leaving_date(data.leaving_date, tenant.joining_date, today=today)

            reason = (data.reason or '').strip() or TenancyDefaults.VACATE_REASON
            bed = self._lock_bed(tenant.bed_id) if tenant.bed_id else None

            self.tenant_repo.update(
                tenant,
                status=TenantStatus.VACATED,
                leaving_date=data.leaving_date,
                vacate_reason=reason,
            )
            if bed is not None:
                self.bed_repo.release(bed)
            if refund_amount:
                self.payment_service.record_refund(tenant, refund_amount, user, on=today)

            log_action(
                user=user,
                action=AuditLog.ACTION_VACATE,
                resource_type=AuditLog.RESOURCE_TENANT,
                resource_id=tenant.id,
                description=f"Vacated tenant {tenant.full_name} ({tenant.tenant_id}): {reason}",
                property_id=tenant.property_id,
                metadata={
                    "bed_id": tenant.bed_id,
                    "leaving_date": data.leaving_date.isoformat(),
                    "reason": reason,
                    "refund_amount": str(refund_amount or 0),
                },
            )

        self.log_info(f"Tenant vacated: {tenant.tenant_id}", tenant_id=tenant.id, bed_id=tenant.bed_id)
        return tenant

    def delete_tenant(self, tenant_id: int, user, confirmed: bool = False) -> None:
        """
        Permanently delete a tenant and its payments.

        An ACTIVE tenant's bed is released first; PENDING and VACATED
        tenants leave bed state untouched.

        Raises:
            ConfirmationRequiredError: Unless confirmed is True
        """
        tenant = self.get_tenant(tenant_id, user)
        if confirmed is not True:
            raise ConfirmationRequiredError(
                message=delete_confirmation_message(tenant),
                code="CONFIRM_DELETE",
                details={"tenant_id": tenant.id},
            )

        with transaction.atomic():
            tenant = self.tenant_repo.lock(tenant.id)
            released_bed_id = None
            if tenant.status == TenantStatus.ACTIVE and tenant.bed_id:
                bed = self._lock_bed(tenant.bed_id)
                if bed is not None:
                    self.bed_repo.release(bed)
                    released_bed_id = bed.id

            code, name, property_id = tenant.tenant_id, tenant.full_name, tenant.property_id
            self.tenant_repo.delete(tenant)

            log_action(
                user=user,
                action=AuditLog.ACTION_DELETE,
                resource_type=AuditLog.RESOURCE_TENANT,
                resource_id=tenant_id,
                description=f"Deleted tenant {name} ({code})",
                property_id=property_id,
                metadata={"tenant_code": code, "released_bed_id": released_bed_id},
            )

        self.log_info(f"Tenant deleted: {code}", tenant_id=tenant_id, released_bed_id=released_bed_id)

    def payments(self, tenant_id: int, user):
        tenant = self.get_tenant(tenant_id, user)
        return tenant.payments.select_related('bed').all()
