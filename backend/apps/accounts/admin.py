from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import ActivityLog, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('email', 'name', 'role', 'is_verified', 'is_active', 'date_joined')
    list_filter = ('role', 'is_active', 'is_verified')
    search_fields = ('email', 'name')
    ordering = ('-date_joined',)
    readonly_fields = ('date_joined', 'last_login', 'updated_at')

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        (_('Profile'), {'fields': ('name', 'role')}),
        (_('Status'), {'fields': ('is_active', 'is_verified', 'is_staff', 'is_superuser')}),
        (_('Timestamps'), {'fields': ('date_joined', 'last_login', 'updated_at')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'password1', 'password2'),
        }),
    )


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'entity_type', 'entity_id', 'ip_address', 'created_at')
    list_filter = ('action', 'entity_type')
    search_fields = ('user__email', 'entity_type')
    readonly_fields = [f.name for f in ActivityLog._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
