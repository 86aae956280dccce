# FILE: /backend/apps/orders/services.py
"""
Order lifecycle: creation, buyer payment confirmation, staff verification
and rejection, plus the guest checkout composite.

Transitions out of ``pending`` are conditional updates, so two staff
members acting on the same order cannot both win.
"""
import logging
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from backend.apps.accounts.models import ActivityLog, User
from backend.apps.accounts.permissions import (
    is_owner,
    require_authenticated,
    require_owner_or_staff,
    require_staff,
)
from backend.apps.accounts.services import log_activity
from backend.apps.notifications.services import NotificationService
from backend.apps.payments.models import PaymentMethod, PaymentWidget, Plan
from backend.core.exceptions import ExistingAccountError, OrderStateConflict
from backend.core.validators import is_valid_mac_address

from .models import Order

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Validation helpers
# ----------------------------------------------------------------------
def _resolve_plan(plan_id):
    plan = Plan.objects.filter(pk=plan_id).first()
    if plan is None:
        raise ValidationError({'plan_id': ['Plan not found.']})
    if not plan.is_active:
        raise ValidationError({'plan_id': ['Plan is not available.']})
    return plan


def _check_connections(plan, connections):
    if connections is None or not 1 <= connections <= settings.MAX_CONNECTIONS:
        raise ValidationError(
            {'connections': [f'Connections must be between 1 and {settings.MAX_CONNECTIONS}.']}
        )
    if connections > plan.max_connections:
        raise ValidationError(
            {'connections': [f'This plan allows at most {plan.max_connections} connections.']}
        )


def authoritative_price(plan, connections, quoted_price):
    """
    Return the configured price for (plan, connections).

    The caller's quote must agree with it within ``ORDER_PRICE_TOLERANCE``.
    """
    price = plan.price_for(connections)
    if price is None:
        raise ValidationError({'price': [f'No price configured for {connections} connection(s).']})

    if quoted_price is not None:
        tolerance = Decimal(str(settings.ORDER_PRICE_TOLERANCE))
        if abs(Decimal(str(quoted_price)) - price) > tolerance:
            raise ValidationError({'price': [f'Price does not match the current plan price ({price}).']})
    return price


def _check_device(credentials_type, mac_address):
    if credentials_type and credentials_type not in Order.CredentialsType.values:
        raise ValidationError({'credentials_type': [f"Unknown credentials type '{credentials_type}'."]})
    if credentials_type == Order.CredentialsType.MAG and not is_valid_mac_address(mac_address):
        raise ValidationError(
            {'mac_address': ['A valid MAC address (e.g. 00:1A:79:XX:XX:XX) is required for MAG devices.']}
        )


def _resolve_payment_channel(plan, connections, payment_method_id, payment_widget_id):
    """Return (method, widget); at most one may be given and it must fit the order."""
    if payment_method_id and payment_widget_id:
        raise ValidationError('Choose either a payment method or a payment widget, not both.')

    method = widget = None
    if payment_method_id:
        method = PaymentMethod.objects.filter(pk=payment_method_id, plan=plan, is_active=True).first()
        if method is None or not method.covers(connections):
            raise ValidationError({'payment_method_id': ['Payment method is not available for this order.']})
    if payment_widget_id:
        widget = PaymentWidget.objects.filter(pk=payment_widget_id, plan=plan, is_active=True).first()
        if widget is None or not widget.covers(connections):
            raise ValidationError({'payment_widget_id': ['Payment widget is not available for this order.']})
    return method, widget


# ----------------------------------------------------------------------
# Lifecycle operations
# ----------------------------------------------------------------------
def create_order(actor, plan_id, connections, price, payment_method_id=None,
                 payment_widget_id=None, payment_method_name=None, payment_method_type=None,
                 credentials_type=None, mac_address=None, *, request=None):
    require_authenticated(actor)

    plan = _resolve_plan(plan_id)
    _check_connections(plan, connections)
    price = authoritative_price(plan, connections, price)
    _check_device(credentials_type, mac_address)
    method, widget = _resolve_payment_channel(plan, connections, payment_method_id, payment_widget_id)

    if method is not None:
        payment_method_name = payment_method_name or method.name
        payment_method_type = payment_method_type or method.type
    elif widget is not None:
        payment_method_name = payment_method_name or widget.name
        payment_method_type = payment_method_type or PaymentMethod.Type.CRYPTO

    order = Order.objects.create(
        user=actor,
        plan=plan,
        connections=connections,
        price=price,
        payment_method=method,
        payment_widget=widget,
        payment_method_name=payment_method_name or '',
        payment_method_type=payment_method_type or '',
        credentials_type=credentials_type or '',
        mac_address=(mac_address or '').strip() if credentials_type == Order.CredentialsType.MAG else '',
    )

    log_activity(
        actor, ActivityLog.Action.CREATE_ORDER,
        entity_type='order', entity_id=order.pk,
        details={'plan_id': plan.pk, 'connections': connections, 'price': str(price)},
        request=request,
    )
    NotificationService.order_created(order)
    logger.info("Order %s created by user %s (plan %s x%s)", order.pk, actor.pk, plan.pk, connections)
    return order


def _load(order_id):
    try:
        return Order.objects.select_related('user', 'plan').get(pk=order_id)
    except Order.DoesNotExist:
        raise NotFound('Order not found')


def confirm_payment(actor, order_id, *, request=None):
    """
    Buyer's claim that they paid. Advisory only: the status is untouched.
    """
    require_authenticated(actor)
    order = _load(order_id)
    if not is_owner(actor, order):
        raise PermissionDenied('Only the buyer can confirm payment for this order')

    order.payment_confirmed_at = timezone.now()
    order.save(update_fields=['payment_confirmed_at', 'updated_at'])

    log_activity(
        actor, ActivityLog.Action.CONFIRM_PAYMENT,
        entity_type='order', entity_id=order.pk,
        request=request,
    )
    logger.info("Payment for order %s confirmed by buyer", order.pk)
    return order


def _transition(order_id, **changes):
    """
    Move a pending order to a terminal status in one conditional UPDATE.
    """
    changes['updated_at'] = timezone.now()
    updated = Order.objects.filter(pk=order_id, status=Order.Status.PENDING).update(**changes)
    if not updated:
        current = Order.objects.filter(pk=order_id).values_list('status', flat=True).first()
        if current is None:
            raise NotFound('Order not found')
        raise OrderStateConflict(f'Order is already {current}.')
    return _load(order_id)


def verify_order(actor, order_id, notes=None, *, request=None):
    require_staff(actor)
    changes = {
        'status': Order.Status.VERIFIED,
        'verified_at': timezone.now(),
        'verified_by': actor,
    }
    if notes:
        changes['notes'] = notes
    order = _transition(order_id, **changes)

    log_activity(
        actor, ActivityLog.Action.VERIFY_ORDER,
        entity_type='order', entity_id=order.pk,
        details={'notes': notes or ''},
        request=request,
    )
    NotificationService.order_status_changed(order)
    logger.info("Order %s verified by %s", order.pk, actor.pk)
    return order


def reject_order(actor, order_id, reason, *, request=None):
    require_staff(actor)
    reason = (reason or '').strip()
    if not reason:
        raise ValidationError({'reason': ['A rejection reason is required.']})

    order = _transition(
        order_id,
        status=Order.Status.REJECTED,
        rejected_at=timezone.now(),
        rejected_by=actor,
        rejection_reason=reason,
    )

    log_activity(
        actor, ActivityLog.Action.REJECT_ORDER,
        entity_type='order', entity_id=order.pk,
        details={'reason': reason},
        request=request,
    )
    NotificationService.order_status_changed(order)
    logger.info("Order %s rejected by %s", order.pk, actor.pk)
    return order


# ----------------------------------------------------------------------
# Queries
# ----------------------------------------------------------------------
def _order_queryset():
    return Order.objects.select_related('user', 'plan', 'verified_by', 'rejected_by')


def list_orders(actor, status=None):
    require_staff(actor)
    queryset = _order_queryset()
    if status:
        if status not in Order.Status.values:
            raise ValidationError({'status': [f"Unknown status '{status}'."]})
        queryset = queryset.filter(status=status)
    return list(queryset.order_by('-created_at', '-id'))


def my_orders(actor):
    require_authenticated(actor)
    return list(_order_queryset().filter(user=actor).order_by('-created_at', '-id'))


def get_order(actor, order_id):
    """Order visible to the actor, or None when it does not exist."""
    require_authenticated(actor)
    order = _order_queryset().filter(pk=order_id).first()
    if order is not None:
        require_owner_or_staff(actor, order)
    return order


# ----------------------------------------------------------------------
# Guest checkout
# ----------------------------------------------------------------------
def _guest_account(email, password, name):
    """Return (user, is_new) for a checkout email."""
    user = User.objects.filter(email__iexact=email).first()
    if user is not None:
        if not user.is_active or not user.check_password(password):
            raise ExistingAccountError()
        return user, False

    user = User.objects.create_user(
        email=email,
        password=password,
        name=name or email.split('@')[0],
        is_verified=True,
    )
    return user, True


def guest_checkout(email, password, plan_id, connections, price, *, name=None, request=None, **order_fields):
    """
    Find or create the account for ``email`` and place the order in one
    transaction. A failed order leaves no account behind.

    Returns (order, user, is_new_user).
    """
    email = User.objects.normalize_email(email).strip()
    try:
        with transaction.atomic():
            user, is_new = _guest_account(email, password, name)
            order = create_order(user, plan_id, connections, price, request=request, **order_fields)
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        logger.warning("Guest checkout for %s collided with a concurrent signup", email)
        raise ExistingAccountError()
    except DjangoValidationError as e:
        raise ValidationError(e.messages)

    log_activity(
        user, ActivityLog.Action.GUEST_CHECKOUT,
        entity_type='order', entity_id=order.pk,
        details={'is_new_user': is_new},
        request=request,
    )
    logger.info("Guest checkout order %s for user %s (new=%s)", order.pk, user.pk, is_new)
    return order, user, is_new
