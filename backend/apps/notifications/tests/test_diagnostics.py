from smtplib import SMTPException
from unittest import mock

from django.test import TestCase, override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from tests.factories import AdminFactory, AgentFactory

from ..diagnostics import run_email_diagnostic

CONFIGURED = dict(
    EMAIL_HOST='smtp.example.com',
    EMAIL_HOST_USER='relay-user',
    DEFAULT_FROM_EMAIL='noreply@example.com',
    ADMIN_NOTIFICATION_EMAIL='alerts@example.com',
    FRONTEND_URL='https://tv.example.com',
)


class EmailDiagnosticTests(TestCase):

    @override_settings(**CONFIGURED)
    def test_fully_configured(self):
        report = run_email_diagnostic()

        self.assertEqual(report['recommendations'], [])
        self.assertEqual(report['relay']['status'], 'success')
        self.assertEqual(report['environment']['EMAIL_HOST']['value'], 'smtp.example.com')
        self.assertTrue(all(r['status'] == 'success' for r in report['environment'].values()))

    @override_settings(**{**CONFIGURED, 'EMAIL_HOST_USER': '', 'ADMIN_NOTIFICATION_EMAIL': ''})
    def test_missing_settings_are_graded(self):
        report = run_email_diagnostic()

        self.assertEqual(report['environment']['EMAIL_HOST_USER']['status'], 'error')
        self.assertEqual(report['environment']['ADMIN_NOTIFICATION_EMAIL']['status'], 'warning')
        self.assertEqual(len(report['recommendations']), 2)

    @override_settings(**CONFIGURED)
    def test_unreachable_relay(self):
        connection = mock.Mock()
        connection.open.side_effect = SMTPException("connection refused")

        with mock.patch('backend.apps.notifications.diagnostics.get_connection', return_value=connection):
            report = run_email_diagnostic()

        self.assertEqual(report['relay']['status'], 'error')
        self.assertIn('connection refused', report['relay']['error'])
        self.assertEqual(len(report['recommendations']), 1)


class EmailDiagnosticViewTests(APITestCase):
    url = '/api/v1/notifications/diagnostic/'

    def test_admin_gets_report(self):
        self.client.force_authenticate(user=AdminFactory())

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('relay', response.data)
        self.assertIn('DEFAULT_FROM_EMAIL', response.data['environment'])

    def test_agent_is_forbidden(self):
        self.client.force_authenticate(user=AgentFactory())

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
