# FILE: tests/smoke/test_api_endpoints.py
from decimal import Decimal
from unittest import mock

from django.urls import NoReverseMatch, reverse
from rest_framework import status
from rest_framework.test import APITestCase

from tests.factories import PlanFactory, PlanPricingFactory, UserFactory


class SmokeTests(APITestCase):
    def setUp(self):
        self.password = "testpass123"
        self.user = UserFactory(email="smoke@example.com")
        self.plan = PlanFactory()
        PlanPricingFactory(plan=self.plan, connections=1, price=Decimal('10.00'))

    @mock.patch('backend.apps.health_check.views.Redis')
    def test_health_check(self, redis_cls):
        response = self.client.get('/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('ok', response.json())

    def test_plan_list_is_public(self):
        try:
            url = reverse('plan-list')
        except NoReverseMatch:
            self.skipTest("URL 'plan-list' not configured")
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['id'], self.plan.id)

    def test_jwt_login_then_my_orders(self):
        """Obtain a token with email and password and use it as a bearer."""
        response = self.client.post(
            '/api/v1/auth/token/', {'email': self.user.email, 'password': self.password}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        response = self.client.get('/api/v1/orders/mine/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_unauthenticated_access(self):
        """Authenticated-only endpoints should reject unauthenticated requests."""
        for url in ('/api/v1/orders/mine/', '/api/v1/credentials/mine/'):
            with self.subTest(url=url):
                response = self.client.get(url)
                self.assertIn(response.status_code, [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN])

    def test_api_responses_are_not_cached(self):
        response = self.client.get('/api/v1/plans/')
        self.assertEqual(response['Cache-Control'], 'no-store')

    def test_schema(self):
        response = self.client.get('/api/schema/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
