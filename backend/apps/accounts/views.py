# FILE: /backend/apps/accounts/views.py
"""
Admin endpoints for user management and the activity trail.
"""
from django.conf import settings
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, extend_schema_view

from .models import ActivityLog, User
from .permissions import IsAdmin
from .serializers import ActivityLogSerializer, UserRoleSerializer, UserSerializer
from . import services


@extend_schema_view(
    list=extend_schema(description="List all users"),
    retrieve=extend_schema(description="Retrieve a specific user"),
    destroy=extend_schema(description="Delete a user (never yourself)"),
)
class UserViewSet(mixins.ListModelMixin,
                  mixins.RetrieveModelMixin,
                  mixins.DestroyModelMixin,
                  viewsets.GenericViewSet):
    queryset = User.objects.all().order_by('-date_joined')
    serializer_class = UserSerializer
    permission_classes = [IsAdmin]
    lookup_value_regex = r'\d+'
    filterset_fields = ['role', 'is_active']
    ordering_fields = ['date_joined', 'email']

    @extend_schema(request=UserRoleSerializer, responses=UserSerializer)
    @action(detail=True, methods=['post'], url_path='role')
    def update_role(self, request, pk=None):
        serializer = UserRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = services.update_user_role(
            request.user, pk, serializer.validated_data['role'], request=request
        )
        return Response({'success': True, 'user': UserSerializer(user).data})

    @action(detail=False, methods=['get'], permission_classes=[IsAuthenticated])
    def me(self, request):
        """Return the signed in user's own profile; open to every role."""
        return Response(self.get_serializer(request.user).data)

    def destroy(self, request, *args, **kwargs):
        services.delete_user(request.user, kwargs['pk'], request=request)
        return Response({'success': True}, status=status.HTTP_200_OK)


class ActivityLogViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Most recent activity first. ``limit`` caps the page (default 100, max 500)
    and ``user`` narrows the trail to a single actor.
    """
    serializer_class = ActivityLogSerializer
    permission_classes = [IsAdmin]

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return ActivityLog.objects.none()
        return ActivityLog.objects.select_related('user').order_by('-created_at', '-id')

    def list(self, request, *args, **kwargs):
        queryset = self.get_queryset()
        user_id = request.query_params.get('user')
        if user_id:
            try:
                queryset = queryset.filter(user_id=int(user_id))
            except ValueError:
                raise ValidationError({'user': ['A valid user id is required.']})

        try:
            limit = int(request.query_params.get('limit', settings.ACTIVITY_LOG_DEFAULT_LIMIT))
        except ValueError:
            limit = settings.ACTIVITY_LOG_DEFAULT_LIMIT
        limit = max(1, min(limit, settings.ACTIVITY_LOG_MAX_LIMIT))

        serializer = self.get_serializer(queryset[:limit], many=True)
        return Response(serializer.data)
