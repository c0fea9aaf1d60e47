import json

from django.contrib import admin
from django.utils.html import format_html

from audit.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """
    Read-only trail browser.

    Entries are written by the services inside their transactions; nothing
    can be added, changed or deleted here.
    """
    list_display = ['timestamp', 'property_id', 'action', 'resource', 'performed_by', 'summary']
    list_filter = ['action', 'resource_type', ('user', admin.RelatedOnlyFieldListFilter)]
    search_fields = ['description', 'resource_id', 'user__username']
    date_hierarchy = 'timestamp'
    ordering = ['-timestamp']
    readonly_fields = [
        'timestamp', 'property_id', 'user', 'action', 'resource_type', 'resource_id',
        'description', 'ip_address', 'pretty_metadata',
    ]
    exclude = ['metadata']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description='Resource')
    def resource(self, obj):
        return f"{obj.resource_type} #{obj.resource_id}"

    @admin.display(description='By')
    def performed_by(self, obj):
        return obj.user_display

    @admin.display(description='Description')
    def summary(self, obj):
        if len(obj.description) > 80:
            return f"{obj.description[:80]}..."
        return obj.description

    @admin.display(description='Metadata')
    def pretty_metadata(self, obj):
        if not obj.metadata:
            return "-"
        return format_html('<pre>{}</pre>', json.dumps(obj.metadata, indent=2, default=str))
