from django.contrib import admin
from .models import Room, Bed


class BedInline(admin.TabularInline):
    model = Bed
    extra = 0
    can_delete = False
    readonly_fields = ['status']


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ['room_number', 'floor', 'room_type', 'capacity', 'occupied_beds', 'available_beds']
    list_filter = ['floor__property']
    search_fields = ['room_number', 'floor__property__name']
    inlines = [BedInline]

    # deleting would orphan tenants on its beds; use the API
    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Bed)
class BedAdmin(admin.ModelAdmin):
    list_display = ['bed_number', 'room', 'bed_type', 'rent', 'status']
    list_filter = ['status', 'room__floor__property']
    search_fields = ['bed_number', 'room__room_number']
    # status follows tenants; change it through the API
    readonly_fields = ['status']

    def has_delete_permission(self, request, obj=None):
        return False
