from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['payment_id', 'tenant', 'property', 'amount', 'payment_type', 'status', 'due_date', 'paid_date']
    list_filter = ['status', 'payment_type', 'property', 'month']
    search_fields = ['payment_id', 'tenant__full_name', 'tenant__tenant_id']
    date_hierarchy = 'due_date'
