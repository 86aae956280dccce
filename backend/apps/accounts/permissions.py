# FILE: /backend/apps/accounts/permissions.py
from rest_framework import permissions
from rest_framework.exceptions import NotAuthenticated, PermissionDenied

from .models import User


# ----------------------------------------------------------------------
# Role constants
# ----------------------------------------------------------------------
ADMIN_ROLES = [User.Role.ADMIN]
STAFF_ROLES = [User.Role.ADMIN, User.Role.AGENT]


# ----------------------------------------------------------------------
# Capability predicates – shared by DRF permissions and the service layer
# ----------------------------------------------------------------------
def _is_authenticated(user):
    return bool(user and getattr(user, 'is_authenticated', False))


def is_admin(user):
    return _is_authenticated(user) and getattr(user, 'role', None) in ADMIN_ROLES


def is_staff_member(user):
    """Admins and agents."""
    return _is_authenticated(user) and getattr(user, 'role', None) in STAFF_ROLES


def is_owner(user, obj):
    if not _is_authenticated(user):
        return False
    return getattr(obj, 'user_id', None) == user.pk


def is_owner_or_staff(user, obj):
    return is_owner(user, obj) or is_staff_member(user)


def require_authenticated(actor):
    if not _is_authenticated(actor):
        raise NotAuthenticated()


def require_admin(actor):
    """Raise unless the actor holds the admin role."""
    require_authenticated(actor)
    if not is_admin(actor):
        raise PermissionDenied('Admin access required')


def require_staff(actor):
    """Raise unless the actor is an admin or an agent."""
    require_authenticated(actor)
    if not is_staff_member(actor):
        raise PermissionDenied('Staff access required')


def require_owner_or_staff(actor, obj):
    require_authenticated(actor)
    if not is_owner_or_staff(actor, obj):
        raise PermissionDenied('You do not have access to this resource')


# ----------------------------------------------------------------------
# Role‑based permissions
# ----------------------------------------------------------------------
class IsAdmin(permissions.BasePermission):
    """
    Permission check for Admin users.
    """
    message = 'Admin access required'

    def has_permission(self, request, view):
        return is_admin(request.user)


class IsStaffMember(permissions.BasePermission):
    """
    Permission check for support staff (admins and agents).
    """
    message = 'Staff access required'

    def has_permission(self, request, view):
        return is_staff_member(request.user)

