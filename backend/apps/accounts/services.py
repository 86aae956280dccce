# FILE: /backend/apps/accounts/services.py
"""
Service layer for accounts: the activity trail and admin user management.
"""
import logging

from django.db import transaction
from django.db.models import ProtectedError
from rest_framework.exceptions import NotFound, ValidationError

from .models import ActivityLog, User
from .permissions import require_admin

logger = logging.getLogger(__name__)


def request_meta(request):
    """Return (ip_address, user_agent) for a request, tolerating None."""
    if request is None:
        return None, ''
    return User.get_client_ip(request), request.META.get('HTTP_USER_AGENT', '')


def log_activity(actor, action, *, entity_type='', entity_id=None, details=None, request=None):
    """
    Append an activity log entry.

    A failing audit write never aborts the business operation; the savepoint
    keeps an enclosing transaction usable.
    """
    ip_address, user_agent = request_meta(request)
    try:
        with transaction.atomic():
            return ActivityLog.objects.create(
                user=actor if getattr(actor, 'pk', None) else None,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                details=details or {},
                ip_address=ip_address,
                user_agent=user_agent,
            )
    except Exception:
        logger.exception("Failed to record activity %s on %s:%s", action, entity_type, entity_id)
        return None


# ----------------------------------------------------------------------
# Admin user management
# ----------------------------------------------------------------------
def update_user_role(actor, user_id, role, *, request=None):
    require_admin(actor)
    if role not in User.Role.values:
        raise ValidationError({'role': [f"Unknown role '{role}'."]})

    try:
        user = User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise NotFound('User not found')

    previous = user.role
    user.role = role
    user.save(update_fields=['role', 'updated_at'])

    log_activity(
        actor, ActivityLog.Action.UPDATE_USER_ROLE,
        entity_type='user', entity_id=user.pk,
        details={'from': previous, 'to': role},
        request=request,
    )
    logger.info("User %s role changed %s -> %s by %s", user.pk, previous, role, actor.pk)
    return user


def delete_user(actor, user_id, *, request=None):
    require_admin(actor)
    if actor.pk == int(user_id):
        raise ValidationError('You cannot delete your own account.')

    try:
        user = User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise NotFound('User not found')

    email = user.email
    try:
        user.delete()
    except ProtectedError:
        raise ValidationError('User has orders on record and cannot be deleted.')

    log_activity(
        actor, ActivityLog.Action.DELETE_USER,
        entity_type='user', entity_id=int(user_id),
        details={'email': email},
        request=request,
    )
    logger.info("User %s deleted by %s", user_id, actor.pk)
