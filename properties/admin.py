from django.contrib import admin
from .models import Property, Floor


class FloorInline(admin.TabularInline):
    model = Floor
    extra = 0
    can_delete = False


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ['name', 'owner', 'status', 'total_beds', 'occupied_beds', 'occupancy_rate', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['name', 'address', 'owner__username']
    inlines = [FloorInline]

    fieldsets = (
        ('Basic Information', {
            'fields': ('owner', 'name', 'address', 'status')
        }),
        ('Capacity', {
            'fields': ('floor_capacity', 'room_capacity', 'bed_capacity')
        }),
        ('Defaults', {
            'fields': ('monthly_rent', 'security_deposit', 'amenities')
        }),
    )

    # deletion is guarded by PropertyService (active tenants); use the API
    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Floor)
class FloorAdmin(admin.ModelAdmin):
    list_display = ['name', 'property', 'floor_number']
    list_filter = ['property']
    search_fields = ['name', 'property__name']

    def has_delete_permission(self, request, obj=None):
        return False
