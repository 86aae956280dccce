# FILE: /backend/apps/accounts/serializers.py
from rest_framework import serializers

from .models import ActivityLog, User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'id', 'email', 'name', 'role', 'is_active', 'is_verified',
            'date_joined', 'last_login'
        ]
        read_only_fields = fields


class UserRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=User.Role.choices)


class ActivityLogSerializer(serializers.ModelSerializer):
    user_email = serializers.EmailField(source='user.email', read_only=True, default=None)

    class Meta:
        model = ActivityLog
        fields = [
            'id', 'user', 'user_email', 'action', 'entity_type', 'entity_id',
            'details', 'ip_address', 'user_agent', 'created_at'
        ]
        read_only_fields = fields
