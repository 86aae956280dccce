# FILE: /backend/apps/credentials/services.py
"""
Credential issuance. Credentials are only issued against verified orders,
one per connection slot.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from backend.apps.accounts.models import ActivityLog
from backend.apps.accounts.permissions import (
    require_admin,
    require_authenticated,
    require_owner_or_staff,
)
from backend.apps.accounts.services import log_activity
from backend.apps.notifications.services import NotificationService
from backend.apps.orders.models import Order
from backend.core.exceptions import CredentialSlotTaken, OrderNotVerified

from .models import IptvCredential

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('credential_type', 'expires_at', 'is_active') + IptvCredential.ACCESS_FIELDS


def _default_expiry():
    return timezone.now() + timedelta(days=settings.CREDENTIAL_DEFAULT_VALIDITY_DAYS)


def _check_type(credential_type):
    if credential_type not in IptvCredential.Type.values:
        raise ValidationError({'credential_type': [f"Unknown credential type '{credential_type}'."]})


def _save_unique(credential, **save_kwargs):
    try:
        with transaction.atomic():
            credential.save(**save_kwargs)
    except IntegrityError:
        raise CredentialSlotTaken(
            f'Connection {credential.connection_number} of order {credential.order_id} already has credentials.'
        )


def create_credential(actor, user_id, order_id, connection_number, credential_type,
                      expires_at=None, is_active=True, *, request=None, **fields):
    require_admin(actor)
    _check_type(credential_type)
    unknown = set(fields) - set(IptvCredential.ACCESS_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown credential fields: {', '.join(sorted(unknown))}")

    try:
        order = Order.objects.select_related('user').get(pk=order_id)
    except Order.DoesNotExist:
        raise NotFound('Order not found')

    if order.status != Order.Status.VERIFIED:
        raise OrderNotVerified()
    if user_id is not None and int(user_id) != order.user_id:
        raise ValidationError({'user_id': ['Credentials must belong to the buyer of the order.']})
    if not 1 <= connection_number <= order.connections:
        raise ValidationError(
            {'connection_number': [f'Order {order.pk} has {order.connections} connection(s).']}
        )

    credential = IptvCredential(
        user=order.user,
        order=order,
        connection_number=connection_number,
        credential_type=credential_type,
        expires_at=expires_at or _default_expiry(),
        is_active=is_active,
        **{field: value or '' for field, value in fields.items()}
    )
    credential.clear_foreign_fields()
    _save_unique(credential)

    log_activity(
        actor, ActivityLog.Action.CREATE_CREDENTIAL,
        entity_type='credential', entity_id=credential.pk,
        details={'order_id': order.pk, 'connection_number': connection_number, 'type': credential_type},
        request=request,
    )
    NotificationService.credential_issued(credential)
    logger.info(
        "Credential %s (%s) issued for order %s connection %s",
        credential.pk, credential_type, order.pk, connection_number
    )
    return credential


def _load(credential_id):
    try:
        return IptvCredential.objects.select_related('user', 'order').get(pk=credential_id)
    except IptvCredential.DoesNotExist:
        raise NotFound('Credential not found')


def update_credential(actor, credential_id, *, request=None, **fields):
    require_admin(actor)
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    credential = _load(credential_id)
    if 'credential_type' in fields:
        _check_type(fields['credential_type'])

    for field, value in fields.items():
        if field in IptvCredential.ACCESS_FIELDS:
            value = value or ''
        setattr(credential, field, value)
    credential.clear_foreign_fields()
    _save_unique(credential)

    log_activity(
        actor, ActivityLog.Action.UPDATE_CREDENTIAL,
        entity_type='credential', entity_id=credential.pk,
        details={'fields': sorted(fields)},
        request=request,
    )
    return credential


def delete_credential(actor, credential_id, *, request=None):
    require_admin(actor)
    credential = _load(credential_id)
    order_id = credential.order_id
    credential.delete()

    log_activity(
        actor, ActivityLog.Action.DELETE_CREDENTIAL,
        entity_type='credential', entity_id=int(credential_id),
        details={'order_id': order_id},
        request=request,
    )
    logger.info("Credential %s deleted by %s", credential_id, actor.pk)


# ----------------------------------------------------------------------
# Queries
# ----------------------------------------------------------------------
def list_credentials(actor):
    require_admin(actor)
    return list(IptvCredential.objects.select_related('user', 'order').order_by('-created_at', '-id'))


def my_credentials(actor):
    """Every credential of the actor, active or not."""
    require_authenticated(actor)
    return list(
        IptvCredential.objects.filter(user=actor).select_related('order').order_by('-created_at', '-id')
    )


def get_credentials_by_order(actor, order_id):
    require_authenticated(actor)
    order = Order.objects.filter(pk=order_id).first()
    if order is None:
        return []
    require_owner_or_staff(actor, order)
    return list(order.credentials.order_by('connection_number'))
