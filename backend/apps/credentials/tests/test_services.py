# FILE: /backend/apps/credentials/tests/test_services.py
from datetime import timedelta
from decimal import Decimal

from django.core import mail
from django.test import TestCase
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from backend.apps.orders import services as order_services
from backend.apps.orders.models import Order
from backend.core.exceptions import CredentialSlotTaken, OrderNotVerified
from tests.factories import (
    AdminFactory,
    AgentFactory,
    IptvCredentialFactory,
    OrderFactory,
    PlanFactory,
    PlanPricingFactory,
    UserFactory,
)

from .. import services
from ..models import IptvCredential


class CredentialIssueTests(TestCase):

    def setUp(self):
        self.admin = AdminFactory()
        self.buyer = UserFactory()
        self.order = OrderFactory(user=self.buyer, connections=2, status=Order.Status.VERIFIED)

    def issue(self, connection_number=1, credential_type='xtream', **fields):
        fields.setdefault('server_url', 'http://line.example.tv:8080')
        fields.setdefault('username', 'buyer01')
        fields.setdefault('password', 'pa55')
        return services.create_credential(
            self.admin, self.buyer.pk, self.order.pk, connection_number, credential_type, **fields
        )

    def test_default_expiry_is_thirty_days(self):
        before = timezone.now()
        credential = self.issue()

        credential.refresh_from_db()
        self.assertGreaterEqual(credential.expires_at, before + timedelta(days=30))
        self.assertLessEqual(credential.expires_at, timezone.now() + timedelta(days=30))

    def test_explicit_expiry_is_kept(self):
        expires = timezone.now() + timedelta(days=90)

        credential = self.issue(expires_at=expires)

        self.assertEqual(credential.expires_at, expires)

    def test_pending_order_is_refused(self):
        self.order.status = Order.Status.PENDING
        self.order.save()

        with self.assertRaises(OrderNotVerified):
            self.issue()
        self.assertFalse(IptvCredential.objects.exists())

    def test_rejected_order_is_refused(self):
        self.order.status = Order.Status.REJECTED
        self.order.save()

        with self.assertRaises(OrderNotVerified):
            self.issue()

    def test_duplicate_slot_conflicts(self):
        self.issue(connection_number=1)

        with self.assertRaises(CredentialSlotTaken):
            self.issue(connection_number=1)
        self.assertEqual(self.order.credentials.count(), 1)

    def test_one_credential_per_connection(self):
        self.issue(connection_number=1)
        self.issue(connection_number=2)

        self.assertEqual(
            list(self.order.credentials.order_by('connection_number').values_list('connection_number', flat=True)),
            [1, 2]
        )

    def test_connection_number_beyond_order(self):
        with self.assertRaises(ValidationError):
            self.issue(connection_number=3)
        with self.assertRaises(ValidationError):
            self.issue(connection_number=0)

    def test_user_must_own_order(self):
        with self.assertRaises(ValidationError):
            services.create_credential(self.admin, UserFactory().pk, self.order.pk, 1, 'xtream')

    def test_missing_order(self):
        with self.assertRaises(NotFound):
            services.create_credential(self.admin, self.buyer.pk, 999999, 1, 'xtream')

    def test_admin_only(self):
        with self.assertRaises(PermissionDenied):
            services.create_credential(AgentFactory(), self.buyer.pk, self.order.pk, 1, 'xtream')

    def test_unknown_type(self):
        with self.assertRaises(ValidationError):
            self.issue(credential_type='satellite')

    def test_m3u_credential_drops_xtream_fields(self):
        credential = self.issue(
            credential_type='m3u',
            m3u_url='http://line.example.tv/get.php?type=m3u',
            epg_url='http://line.example.tv/xmltv.php',
        )

        credential.refresh_from_db()
        self.assertEqual(credential.server_url, '')
        self.assertEqual(credential.username, '')
        self.assertEqual(credential.password, '')
        self.assertEqual(credential.m3u_url, 'http://line.example.tv/get.php?type=m3u')

    def test_m3u_delivery_email_lists_only_playlist_urls(self):
        with self.captureOnCommitCallbacks(execute=True):
            self.issue(
                credential_type='m3u',
                m3u_url='http://line.example.tv/get.php?type=m3u',
                epg_url='http://line.example.tv/xmltv.php',
            )

        self.assertEqual(len(mail.outbox), 1)
        message = mail.outbox[0]
        self.assertEqual(message.subject, "Your IPTV Credentials")
        self.assertEqual(message.to, [self.buyer.email])
        html = message.alternatives[0][0]
        for body in (message.body, html):
            self.assertIn('http://line.example.tv/get.php?type=m3u', body)
            self.assertIn('http://line.example.tv/xmltv.php', body)
            self.assertNotIn('Server URL', body)
            self.assertNotIn('Username', body)
            self.assertNotIn('Password', body)
            self.assertNotIn('buyer01', body)

    def test_portal_keeps_portal_fields(self):
        credential = self.issue(
            credential_type='portal',
            portal_url='http://portal.example.tv/c/',
            mac_address='00:1A:79:AA:BB:CC',
        )

        self.assertEqual(credential.portal_url, 'http://portal.example.tv/c/')
        self.assertEqual(credential.mac_address, '00:1A:79:AA:BB:CC')
        self.assertEqual(credential.username, '')

    def test_combined_keeps_everything(self):
        credential = self.issue(credential_type='combined', m3u_url='http://line.example.tv/m3u')

        self.assertEqual(credential.username, 'buyer01')
        self.assertEqual(credential.m3u_url, 'http://line.example.tv/m3u')


class CredentialMaintenanceTests(TestCase):

    def setUp(self):
        self.admin = AdminFactory()
        self.credential = IptvCredentialFactory()

    def test_update_fields(self):
        updated = services.update_credential(self.admin, self.credential.pk, password='n3w', is_active=False)

        self.assertEqual(updated.password, 'n3w')
        self.assertFalse(updated.is_active)

    def test_changing_type_clears_foreign_fields(self):
        updated = services.update_credential(
            self.admin, self.credential.pk, credential_type='m3u', m3u_url='http://line.example.tv/m3u'
        )

        self.assertEqual(updated.username, '')
        self.assertEqual(updated.m3u_url, 'http://line.example.tv/m3u')

    def test_delete(self):
        services.delete_credential(self.admin, self.credential.pk)

        self.assertFalse(IptvCredential.objects.filter(pk=self.credential.pk).exists())
        with self.assertRaises(NotFound):
            services.delete_credential(self.admin, self.credential.pk)

    def test_owner_cannot_update(self):
        with self.assertRaises(PermissionDenied):
            services.update_credential(self.credential.user, self.credential.pk, password='x')


class CredentialQueryTests(TestCase):

    def setUp(self):
        self.buyer = UserFactory()
        self.order = OrderFactory(user=self.buyer, connections=2, status=Order.Status.VERIFIED)
        self.active = IptvCredentialFactory(order=self.order, connection_number=1)
        self.expired = IptvCredentialFactory(
            order=self.order, connection_number=2, expires_at=timezone.now() - timedelta(days=1)
        )
        IptvCredentialFactory()

    def test_my_credentials_includes_inactive_and_expired(self):
        credentials = services.my_credentials(self.buyer)

        self.assertEqual({c.pk for c in credentials}, {self.active.pk, self.expired.pk})
        self.assertTrue(self.active.is_usable)
        self.assertFalse(self.expired.is_usable)

    def test_by_order_for_owner_and_staff(self):
        self.assertEqual(services.get_credentials_by_order(self.buyer, self.order.pk), [self.active, self.expired])
        self.assertEqual(len(services.get_credentials_by_order(AgentFactory(), self.order.pk)), 2)

    def test_by_order_for_stranger_is_forbidden(self):
        with self.assertRaises(PermissionDenied):
            services.get_credentials_by_order(UserFactory(), self.order.pk)

    def test_by_missing_order_is_empty(self):
        self.assertEqual(services.get_credentials_by_order(self.buyer, 999999), [])


class OrderToCredentialScenarioTests(TestCase):
    """Priced plan, order, staff verification, then credential delivery."""

    def test_full_flow(self):
        plan = PlanFactory()
        PlanPricingFactory(plan=plan, connections=1, price=Decimal('10.00'))
        PlanPricingFactory(plan=plan, connections=2, price=Decimal('18.00'))
        buyer = UserFactory()
        staff = AgentFactory()
        admin = AdminFactory()

        order = order_services.create_order(buyer, plan.pk, 2, Decimal('18.00'))
        self.assertEqual(order.status, Order.Status.PENDING)

        order = order_services.verify_order(staff, order.pk)
        self.assertEqual(order.status, Order.Status.VERIFIED)
        self.assertEqual(order.verified_by_id, staff.pk)

        mail.outbox = []
        with self.captureOnCommitCallbacks(execute=True):
            credential = services.create_credential(
                admin, buyer.pk, order.pk, 1, 'xtream',
                server_url='http://line.example.tv:8080', username='flow', password='pw',
            )

        credential.refresh_from_db()
        expected = credential.created_at + timedelta(days=30)
        self.assertLess(abs(credential.expires_at - expected), timedelta(seconds=5))
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn(credential.expires_at.strftime('%Y-%m-%d'), mail.outbox[0].body)
