from django.contrib import admin
from .models import Tenant
from .services import TenantService


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    """
    Tenant records. Status and bed are read-only here; deleting goes through
    TenantService so an active tenant's bed is released with it.
    """
    list_display = ['tenant_id', 'full_name', 'phone', 'property', 'bed', 'status', 'joining_date']
    list_filter = ['status', 'property', 'joining_date']
    search_fields = ['tenant_id', 'full_name', 'phone', 'email', 'id_proof_number']
    readonly_fields = ['tenant_id', 'status', 'bed', 'joining_date', 'leaving_date', 'terms_accepted_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('property', 'tenant_id', 'full_name', 'phone', 'email', 'alternate_phone')
        }),
        ('Identity', {
            'fields': ('id_proof_type', 'id_proof_number')
        }),
        ('Additional Information', {
            'fields': ('address', 'emergency_contact', 'occupation', 'company', 'monthly_income')
        }),
        ('Tenancy', {
            'fields': (
                'status', 'bed', 'joining_date', 'leaving_date', 'vacate_reason',
                'security_deposit', 'advance_rent', 'payment_mode', 'terms_accepted_at',
            )
        }),
    )

    def delete_model(self, request, obj):
        TenantService().delete_tenant(obj.id, request.user, confirmed=True)

    def delete_queryset(self, request, queryset):
        service = TenantService()
        for tenant_pk in queryset.values_list('id', flat=True):
            service.delete_tenant(tenant_pk, request.user, confirmed=True)
