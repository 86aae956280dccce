from django.contrib import admin

from .models import PaymentMethod, PaymentWidget, Plan, PlanPricing


class PlanPricingInline(admin.TabularInline):
    model = PlanPricing
    extra = 0
    ordering = ('connections',)


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    list_display = ('name', 'duration_days', 'max_connections', 'is_active', 'created_at')
    list_filter = ('is_active',)
    search_fields = ('name',)
    inlines = [PlanPricingInline]


@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    list_display = ('name', 'type', 'plan', 'min_connections', 'max_connections', 'is_active', 'sort_order')
    list_filter = ('type', 'is_active', 'plan')
    ordering = ('sort_order', 'id')


@admin.register(PaymentWidget)
class PaymentWidgetAdmin(admin.ModelAdmin):
    list_display = ('name', 'plan', 'invoice_id', 'min_connections', 'max_connections', 'is_active')
    list_filter = ('is_active', 'plan')
