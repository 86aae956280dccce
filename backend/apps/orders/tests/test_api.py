from decimal import Decimal

from rest_framework import status
from rest_framework.test import APITestCase

from tests.factories import AgentFactory, OrderFactory, PlanFactory, PlanPricingFactory, UserFactory

from ..models import Order


class OrderApiTests(APITestCase):

    def setUp(self):
        self.buyer = UserFactory()
        self.agent = AgentFactory()
        self.plan = PlanFactory()
        PlanPricingFactory(plan=self.plan, connections=1, price=Decimal('10.00'))
        PlanPricingFactory(plan=self.plan, connections=2, price=Decimal('18.00'))

    def test_create_order(self):
        self.client.force_authenticate(user=self.buyer)
        response = self.client.post('/api/v1/orders/', {
            'plan_id': self.plan.pk,
            'connections': 2,
            'price': '18.00',
            'credentials_type': 'xtream',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        order = Order.objects.get(pk=response.data['orderId'])
        self.assertEqual(order.status, Order.Status.PENDING)
        self.assertEqual(response.data['order']['price'], '18.00')

    def test_create_order_requires_authentication(self):
        response = self.client.post('/api/v1/orders/', {
            'plan_id': self.plan.pk, 'connections': 1, 'price': '10.00',
        }, format='json')

        self.assertIn(response.status_code, [status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN])

    def test_bad_mac_address_returns_error_envelope(self):
        self.client.force_authenticate(user=self.buyer)
        response = self.client.post('/api/v1/orders/', {
            'plan_id': self.plan.pk,
            'connections': 1,
            'price': '10.00',
            'credentials_type': 'mag',
            'mac_address': 'ZZ:1A:79:AA:BB:CC',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data['error'])
        self.assertIn('mac_address', response.data['details'])

    def test_price_mismatch_is_a_validation_error(self):
        self.client.force_authenticate(user=self.buyer)
        response = self.client.post('/api/v1/orders/', {
            'plan_id': self.plan.pk, 'connections': 2, 'price': '1.00',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('price', response.data['details'])

    def test_mine_lists_only_own_orders(self):
        own = OrderFactory(user=self.buyer, plan=self.plan)
        OrderFactory(plan=self.plan)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.get('/api/v1/orders/mine/')

        self.assertEqual([o['id'] for o in response.data], [own.pk])

    def test_list_is_staff_only(self):
        OrderFactory(plan=self.plan)
        self.client.force_authenticate(user=self.buyer)
        self.assertEqual(self.client.get('/api/v1/orders/').status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.agent)
        response = self.client.get('/api/v1/orders/', {'status': 'pending'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_retrieve_missing_order_returns_null(self):
        self.client.force_authenticate(user=self.buyer)
        response = self.client.get('/api/v1/orders/999999/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data)

    def test_confirm_payment_by_owner(self):
        order = OrderFactory(user=self.buyer, plan=self.plan)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(f'/api/v1/orders/{order.pk}/confirm-payment/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNotNone(response.data['order']['payment_confirmed_at'])
        self.assertEqual(response.data['order']['status'], 'pending')

    def test_confirm_payment_by_stranger_is_forbidden(self):
        order = OrderFactory(plan=self.plan)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(f'/api/v1/orders/{order.pk}/confirm-payment/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_verify_twice_returns_conflict(self):
        order = OrderFactory(user=self.buyer, plan=self.plan)
        self.client.force_authenticate(user=self.agent)

        first = self.client.post(f'/api/v1/orders/{order.pk}/verify/', {'notes': 'ok'}, format='json')
        second = self.client.post(f'/api/v1/orders/{order.pk}/verify/', {}, format='json')

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data['order']['status'], 'verified')
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(second.data['details']['detail'].code, 'order_state_conflict')

    def test_reject_with_empty_reason_fails(self):
        order = OrderFactory(user=self.buyer, plan=self.plan)
        self.client.force_authenticate(user=self.agent)

        response = self.client.post(f'/api/v1/orders/{order.pk}/reject/', {'reason': ''}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        order.refresh_from_db()
        self.assertEqual(order.status, Order.Status.PENDING)

    def test_reject(self):
        order = OrderFactory(user=self.buyer, plan=self.plan)
        self.client.force_authenticate(user=self.agent)

        response = self.client.post(
            f'/api/v1/orders/{order.pk}/reject/', {'reason': 'Payment not found'}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['order']['rejection_reason'], 'Payment not found')

    def test_buyer_cannot_verify(self):
        order = OrderFactory(user=self.buyer, plan=self.plan)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(f'/api/v1/orders/{order.pk}/verify/', {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
