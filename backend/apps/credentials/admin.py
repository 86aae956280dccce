from django.contrib import admin

from .models import IptvCredential


@admin.register(IptvCredential)
class IptvCredentialAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'order', 'connection_number', 'credential_type', 'expires_at', 'is_active')
    list_filter = ('credential_type', 'is_active')
    search_fields = ('user__email', 'username', 'mac_address')
    raw_id_fields = ('user', 'order')
