from django.conf import settings
from rest_framework import serializers

from .models import IptvCredential


class IptvCredentialSerializer(serializers.ModelSerializer):
    user_email = serializers.EmailField(source='user.email', read_only=True)
    is_usable = serializers.BooleanField(read_only=True)

    class Meta:
        model = IptvCredential
        fields = [
            'id', 'user', 'user_email', 'order', 'connection_number', 'credential_type',
            'server_url', 'username', 'password', 'm3u_url', 'epg_url',
            'portal_url', 'mac_address', 'expires_at', 'is_active', 'is_usable',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields


class _AccessFieldsMixin(serializers.Serializer):
    server_url = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    username = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    password = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    m3u_url = serializers.CharField(max_length=1000, required=False, allow_blank=True, allow_null=True)
    epg_url = serializers.CharField(max_length=1000, required=False, allow_blank=True, allow_null=True)
    portal_url = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    mac_address = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False)


class CredentialCreateSerializer(_AccessFieldsMixin):
    user_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    order_id = serializers.IntegerField(min_value=1)
    connection_number = serializers.IntegerField(min_value=1, max_value=settings.MAX_CONNECTIONS)
    credential_type = serializers.ChoiceField(choices=IptvCredential.Type.choices)


class CredentialUpdateSerializer(_AccessFieldsMixin):
    credential_type = serializers.ChoiceField(choices=IptvCredential.Type.choices, required=False)
