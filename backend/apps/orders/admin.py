from django.contrib import admin

from .models import Order


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'plan', 'connections', 'price', 'status', 'payment_confirmed_at', 'created_at')
    list_filter = ('status', 'credentials_type', 'plan')
    search_fields = ('user__email', 'payment_method_name')
    raw_id_fields = ('user', 'verified_by', 'rejected_by')
    readonly_fields = (
        'price', 'payment_method_name', 'payment_method_type', 'payment_confirmed_at',
        'verified_at', 'verified_by', 'rejected_at', 'rejected_by', 'created_at', 'updated_at',
    )
    date_hierarchy = 'created_at'
