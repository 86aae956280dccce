"""
Plan catalogue and payment option endpoints.
"""
import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from backend.apps.accounts.models import ActivityLog
from backend.apps.accounts.permissions import IsAdmin, is_admin
from backend.apps.accounts.services import log_activity

from . import services
from .models import PaymentMethod, PaymentWidget, Plan
from .serializers import (
    PaymentMethodSerializer,
    PaymentOptionQuerySerializer,
    PaymentWidgetSerializer,
    PlanSerializer,
)

logger = logging.getLogger(__name__)


def _active_only(request):
    return request.query_params.get('active_only', '').lower() in ('1', 'true', 'yes')


# ----------------------------------------------------------------------
# Permission & audit mixins
# ----------------------------------------------------------------------
class AdminWritePermissionMixin:
    """
    Write actions require an admin, reads are public.
    """
    public_actions = ['list', 'retrieve']

    def get_permissions(self):
        if self.action in self.public_actions:
            permission_classes = [AllowAny]
        else:
            permission_classes = [IsAdmin]
        return [permission() for permission in permission_classes]


class AuditedWriteMixin:
    """Record create/update/delete in the activity trail."""
    entity_type = None
    audit_actions = {}

    def _audit(self, kind, instance_id, details=None):
        log_activity(
            self.request.user, self.audit_actions[kind],
            entity_type=self.entity_type, entity_id=instance_id,
            details=details, request=self.request,
        )

    def perform_create(self, serializer):
        instance = serializer.save()
        self._audit('create', instance.pk, {'name': instance.name})

    def perform_update(self, serializer):
        instance = serializer.save()
        self._audit('update', instance.pk, {'fields': sorted(serializer.validated_data)})

    def perform_destroy(self, instance):
        instance_id = instance.pk
        instance.delete()
        self._audit('delete', instance_id)


# ----------------------------------------------------------------------
# Plans
# ----------------------------------------------------------------------
class PlanViewSet(AdminWritePermissionMixin, viewsets.ModelViewSet):
    serializer_class = PlanSerializer
    lookup_value_regex = r'\d+'
    queryset = Plan.objects.prefetch_related('pricing').order_by('id')
    http_method_names = ['get', 'post', 'patch', 'put', 'delete', 'head', 'options']

    def list(self, request, *args, **kwargs):
        # Inactive plans stay hidden from the storefront
        active_only = _active_only(request) or not is_admin(request.user)
        plans = services.list_plans(active_only=active_only)
        return Response(self.get_serializer(plans, many=True).data)

    def retrieve(self, request, *args, **kwargs):
        plan = services.get_plan(kwargs['pk'])
        return Response(self.get_serializer(plan).data if plan else None)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        pricing = data.pop('pricing', None)
        plan = services.create_plan(request.user, data, pricing, request=request)
        return Response(
            {'success': True, 'plan': self.get_serializer(services.get_plan(plan.pk)).data},
            status=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        plan = self.get_object()
        serializer = self.get_serializer(plan, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        pricing = data.pop('pricing', None)
        services.update_plan(request.user, plan, data, pricing, request=request)
        return Response({'success': True, 'plan': self.get_serializer(services.get_plan(plan.pk)).data})

    def destroy(self, request, *args, **kwargs):
        services.delete_plan(request.user, self.get_object(), request=request)
        return Response({'success': True}, status=status.HTTP_200_OK)


# ----------------------------------------------------------------------
# Payment methods
# ----------------------------------------------------------------------
class PaymentMethodViewSet(AdminWritePermissionMixin, AuditedWriteMixin, viewsets.ModelViewSet):
    serializer_class = PaymentMethodSerializer
    lookup_value_regex = r'\d+'
    public_actions = ['list', 'retrieve', 'for_plan']
    filterset_fields = ['plan', 'type']
    entity_type = 'payment_method'
    audit_actions = {
        'create': ActivityLog.Action.CREATE_PAYMENT_METHOD,
        'update': ActivityLog.Action.UPDATE_PAYMENT_METHOD,
        'delete': ActivityLog.Action.DELETE_PAYMENT_METHOD,
    }

    def get_queryset(self):
        queryset = PaymentMethod.objects.select_related('plan').order_by('sort_order', 'id')
        if getattr(self, "swagger_fake_view", False):
            return queryset
        if self.action in ('list', 'retrieve') and (_active_only(self.request) or not is_admin(self.request.user)):
            queryset = queryset.filter(is_active=True)
        return queryset

    def retrieve(self, request, *args, **kwargs):
        method = self.get_queryset().filter(pk=kwargs['pk']).first()
        return Response(self.get_serializer(method).data if method else None)

    @extend_schema(parameters=[PaymentOptionQuerySerializer], responses=PaymentMethodSerializer(many=True))
    @action(detail=False, methods=['get'], url_path='for-plan')
    def for_plan(self, request):
        query = PaymentOptionQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        methods = services.get_payment_methods_for_plan(
            query.validated_data['plan_id'], query.validated_data['connections']
        )
        return Response(self.get_serializer(methods, many=True).data)


# ----------------------------------------------------------------------
# Payment widgets
# ----------------------------------------------------------------------
class PaymentWidgetViewSet(AdminWritePermissionMixin, AuditedWriteMixin, viewsets.ModelViewSet):
    serializer_class = PaymentWidgetSerializer
    public_actions = ['for_plan']
    filterset_fields = ['plan']
    entity_type = 'payment_widget'
    audit_actions = {
        'create': ActivityLog.Action.CREATE_PAYMENT_WIDGET,
        'update': ActivityLog.Action.UPDATE_PAYMENT_WIDGET,
        'delete': ActivityLog.Action.DELETE_PAYMENT_WIDGET,
    }

    def get_queryset(self):
        return PaymentWidget.objects.select_related('plan').order_by('id')

    @extend_schema(parameters=[PaymentOptionQuerySerializer], responses=PaymentWidgetSerializer)
    @action(detail=False, methods=['get'], url_path='for-plan')
    def for_plan(self, request):
        query = PaymentOptionQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        widget = services.get_payment_widget_for_plan(
            query.validated_data['plan_id'], query.validated_data['connections']
        )
        return Response(self.get_serializer(widget).data if widget else None)
