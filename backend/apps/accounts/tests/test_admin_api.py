from unittest import mock

from rest_framework import status
from rest_framework.test import APITestCase

from tests.factories import AdminFactory, AgentFactory, OrderFactory, UserFactory

from ..models import ActivityLog, User
from ..services import log_activity


class UserAdminApiTests(APITestCase):

    def setUp(self):
        self.admin = AdminFactory()
        self.client.force_authenticate(user=self.admin)

    def test_list_users(self):
        UserFactory()

        response = self.client.get('/api/v1/auth/users/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_agent_cannot_list_users(self):
        self.client.force_authenticate(user=AgentFactory())

        response = self.client.get('/api/v1/auth/users/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_role(self):
        user = UserFactory()

        response = self.client.post(f'/api/v1/auth/users/{user.pk}/role/', {'role': 'AGENT'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertEqual(user.role, User.Role.AGENT)
        log = ActivityLog.objects.get(action=ActivityLog.Action.UPDATE_USER_ROLE)
        self.assertEqual(log.details, {'from': 'USER', 'to': 'AGENT'})

    def test_unknown_role(self):
        user = UserFactory()

        response = self.client.post(f'/api/v1/auth/users/{user.pk}/role/', {'role': 'owner'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_user(self):
        user = UserFactory()

        response = self.client.delete(f'/api/v1/auth/users/{user.pk}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(User.objects.filter(pk=user.pk).exists())

    def test_cannot_delete_self(self):
        response = self.client.delete(f'/api/v1/auth/users/{self.admin.pk}/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_non_numeric_id_is_not_routed(self):
        for method, url in (
            ('get', '/api/v1/auth/users/abc/'),
            ('delete', '/api/v1/auth/users/abc/'),
            ('post', '/api/v1/auth/users/abc/role/'),
        ):
            with self.subTest(method=method, url=url):
                response = getattr(self.client, method)(url)
                self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_user_with_orders_is_kept(self):
        order = OrderFactory()

        response = self.client.delete(f'/api/v1/auth/users/{order.user_id}/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(User.objects.filter(pk=order.user_id).exists())


class ActivityLogApiTests(APITestCase):

    def setUp(self):
        self.admin = AdminFactory()
        self.other = UserFactory()
        for i in range(5):
            log_activity(self.admin, ActivityLog.Action.UPDATE_PLAN, entity_type='plan', entity_id=i)
        log_activity(self.other, ActivityLog.Action.CONFIRM_PAYMENT, entity_type='order', entity_id=1)
        self.client.force_authenticate(user=self.admin)

    def test_limit(self):
        response = self.client.get('/api/v1/auth/activity-logs/', {'limit': 2})

        self.assertEqual(len(response.data), 2)

    def test_newest_first(self):
        response = self.client.get('/api/v1/auth/activity-logs/')

        self.assertEqual(response.data[0]['action'], 'confirm_payment')

    def test_filter_by_user(self):
        response = self.client.get('/api/v1/auth/activity-logs/', {'user': self.other.pk})

        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['user_email'], self.other.email)

    def test_non_numeric_user_filter(self):
        response = self.client.get('/api/v1/auth/activity-logs/', {'user': 'abc'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_failed_audit_write_is_swallowed(self):
        with mock.patch.object(ActivityLog.objects, 'create', side_effect=RuntimeError("db hiccup")):
            with self.assertLogs('backend.apps.accounts.services', level='ERROR'):
                result = log_activity(self.admin, ActivityLog.Action.DELETE_PLAN)

        self.assertIsNone(result)


class CurrentUserApiTests(APITestCase):
    url = '/api/v1/auth/users/me/'

    def test_plain_user_sees_own_profile(self):
        user = UserFactory(name="Jamie Buyer")
        self.client.force_authenticate(user=user)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], user.pk)
        self.assertEqual(response.data['email'], user.email)
        self.assertEqual(response.data['role'], 'USER')
        self.assertNotIn('password', response.data)

    def test_anonymous_is_rejected(self):
        response = self.client.get(self.url)

        self.assertIn(response.status_code, [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN])
