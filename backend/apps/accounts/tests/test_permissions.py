from django.contrib.auth.models import AnonymousUser
from django.test import TestCase
from rest_framework.exceptions import NotAuthenticated, PermissionDenied

from tests.factories import AdminFactory, AgentFactory, OrderFactory, UserFactory

from ..permissions import (
    is_admin,
    is_owner_or_staff,
    is_staff_member,
    require_admin,
    require_owner_or_staff,
    require_staff,
)


class CapabilityTests(TestCase):

    def setUp(self):
        self.user = UserFactory()
        self.agent = AgentFactory()
        self.admin = AdminFactory()
        self.anonymous = AnonymousUser()

    def test_role_predicates(self):
        self.assertTrue(is_admin(self.admin))
        self.assertFalse(is_admin(self.agent))
        self.assertTrue(is_staff_member(self.agent))
        self.assertTrue(is_staff_member(self.admin))
        self.assertFalse(is_staff_member(self.user))
        self.assertFalse(is_staff_member(self.anonymous))
        self.assertFalse(is_admin(None))

    def test_require_admin(self):
        require_admin(self.admin)
        with self.assertRaises(PermissionDenied):
            require_admin(self.agent)
        with self.assertRaises(NotAuthenticated):
            require_admin(self.anonymous)

    def test_require_staff(self):
        require_staff(self.agent)
        with self.assertRaises(PermissionDenied):
            require_staff(self.user)

    def test_owner_or_staff(self):
        order = OrderFactory(user=self.user)

        self.assertTrue(is_owner_or_staff(self.user, order))
        self.assertTrue(is_owner_or_staff(self.agent, order))
        self.assertFalse(is_owner_or_staff(UserFactory(), order))
        require_owner_or_staff(self.user, order)
        with self.assertRaises(PermissionDenied):
            require_owner_or_staff(UserFactory(), order)
