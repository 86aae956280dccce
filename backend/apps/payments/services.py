# FILE: /backend/apps/payments/services.py
"""
Plan pricing and payment option resolution.

The resolver functions are pure reads: they never raise for "nothing
matches", an empty list or None is a valid answer.
"""
import logging

from django.db import transaction
from django.db.models import ProtectedError
from rest_framework.exceptions import ValidationError

from backend.apps.accounts.models import ActivityLog
from backend.apps.accounts.permissions import require_admin
from backend.apps.accounts.services import log_activity

from .models import PaymentMethod, PaymentWidget, Plan, PlanPricing

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Payment option resolver
# ----------------------------------------------------------------------
def _applicable(queryset, plan_id, connections):
    return queryset.filter(
        plan_id=plan_id,
        is_active=True,
        min_connections__lte=connections,
        max_connections__gte=connections,
    )


def get_payment_methods_for_plan(plan_id, connections):
    """Active methods for the plan whose window covers ``connections``, by sort order."""
    return list(
        _applicable(PaymentMethod.objects.all(), plan_id, connections).order_by('sort_order', 'id')
    )


def get_payment_widget_for_plan(plan_id, connections):
    """First active widget for the plan whose window covers ``connections``, or None."""
    return _applicable(PaymentWidget.objects.all(), plan_id, connections).order_by('id').first()


# ----------------------------------------------------------------------
# Plan catalogue
# ----------------------------------------------------------------------
def list_plans(active_only=False):
    queryset = Plan.objects.prefetch_related('pricing').order_by('id')
    if active_only:
        queryset = queryset.filter(is_active=True)
    return list(queryset)


def get_plan(plan_id):
    """Plan with its pricing rows, or None."""
    return Plan.objects.prefetch_related('pricing').filter(pk=plan_id).first()


def set_plan_pricing(plan, pricing):
    """Replace the full price list of ``plan`` with ``pricing`` [{connections, price}]."""
    with transaction.atomic():
        PlanPricing.objects.filter(plan=plan).delete()
        PlanPricing.objects.bulk_create([
            PlanPricing(plan=plan, connections=row['connections'], price=row['price'])
            for row in pricing
        ])


def create_plan(actor, data, pricing=None, *, request=None):
    require_admin(actor)
    with transaction.atomic():
        plan = Plan.objects.create(**data)
        if pricing:
            set_plan_pricing(plan, pricing)

    log_activity(
        actor, ActivityLog.Action.CREATE_PLAN,
        entity_type='plan', entity_id=plan.pk,
        details={'name': plan.name},
        request=request,
    )
    logger.info("Plan %s created by %s", plan.pk, actor.pk)
    return plan


def update_plan(actor, plan, data, pricing=None, *, request=None):
    """Apply field changes; a provided ``pricing`` list replaces the old one."""
    require_admin(actor)
    with transaction.atomic():
        for field, value in data.items():
            setattr(plan, field, value)
        plan.save()
        if pricing is not None:
            set_plan_pricing(plan, pricing)

    log_activity(
        actor, ActivityLog.Action.UPDATE_PLAN,
        entity_type='plan', entity_id=plan.pk,
        details={'fields': sorted(data), 'pricing_replaced': pricing is not None},
        request=request,
    )
    return plan


def delete_plan(actor, plan, *, request=None):
    require_admin(actor)
    plan_id, name = plan.pk, plan.name
    try:
        plan.delete()
    except ProtectedError:
        raise ValidationError('Plan has orders on record; deactivate it instead.')
    log_activity(
        actor, ActivityLog.Action.DELETE_PLAN,
        entity_type='plan', entity_id=plan_id,
        details={'name': name},
        request=request,
    )
    logger.info("Plan %s deleted by %s", plan_id, actor.pk)
