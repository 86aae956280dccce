# backend/apps/notifications/views.py
from rest_framework import serializers
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema

from backend.apps.accounts.permissions import IsAdmin

from .diagnostics import run_email_diagnostic
from .services import NotificationService


class TestEmailSerializer(serializers.Serializer):
    to = serializers.EmailField()


class TestEmailView(APIView):
    """Send a diagnostic email so admins can check SMTP settings."""
    permission_classes = [IsAdmin]

    @extend_schema(request=TestEmailSerializer)
    def post(self, request):
        serializer = TestEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(NotificationService.send_test_email(serializer.validated_data['to']))


class EmailDiagnosticView(APIView):
    """Report which email settings are present and whether the relay answers."""
    permission_classes = [IsAdmin]

    @extend_schema(responses=OpenApiTypes.OBJECT)
    def get(self, request):
        return Response(run_email_diagnostic())
