"""
Email configuration report for the admin settings page.

Each setting is reported as ``success``, ``warning`` (optional, unset) or
``error`` (required, unset); the relay check opens and closes one
connection through the configured backend. Nothing is sent.
"""
import logging

from django.conf import settings
from django.core.mail import get_connection
from django.utils import timezone

logger = logging.getLogger(__name__)

# (setting, required, advice when unset)
EMAIL_SETTINGS = (
    ('EMAIL_HOST', True, 'Set EMAIL_HOST to the SMTP relay host.'),
    ('EMAIL_HOST_USER', True, 'Set EMAIL_HOST_USER and EMAIL_HOST_PASSWORD for the SMTP relay.'),
    ('DEFAULT_FROM_EMAIL', True, 'Set DEFAULT_FROM_EMAIL to a verified sender address.'),
    ('ADMIN_NOTIFICATION_EMAIL', False, 'Set ADMIN_NOTIFICATION_EMAIL to receive new order alerts.'),
    ('FRONTEND_URL', False, 'Set FRONTEND_URL so links in emails point at the storefront.'),
)


def check_setting(name, required=True):
    value = getattr(settings, name, '')
    if not value:
        return {
            'status': 'error' if required else 'warning',
            'message': f'{name} is not set',
            'required': required,
        }
    return {'status': 'success', 'message': f'{name} is configured', 'value': value}


def check_relay():
    backend = settings.EMAIL_BACKEND
    try:
        connection = get_connection(fail_silently=False)
        connection.open()
        connection.close()
    except Exception as e:
        logger.warning(f'Email relay check failed: {e}')
        return {'status': 'error', 'message': 'Could not connect to the email relay', 'backend': backend, 'error': str(e)}
    return {'status': 'success', 'message': 'Connected to the email relay', 'backend': backend}


def run_email_diagnostic():
    environment = {}
    recommendations = []
    for name, required, advice in EMAIL_SETTINGS:
        result = check_setting(name, required)
        environment[name] = result
        if result['status'] != 'success':
            recommendations.append(advice)

    relay = check_relay()
    if relay['status'] == 'error':
        recommendations.append('Check the relay host, port, TLS and credentials; the connection was refused.')

    return {
        'timestamp': timezone.now().isoformat(),
        'environment': environment,
        'relay': relay,
        'recommendations': recommendations,
    }
