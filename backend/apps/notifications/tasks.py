# backend/apps/notifications/tasks.py
"""
Transactional email for the order and credential lifecycle.

Every task reloads its subject from the database, renders a text and an
HTML template under ``notifications/email/`` and sends one message.
"""
import logging

from celery import shared_task, Task
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone

from backend.apps.credentials.models import IptvCredential
from backend.apps.orders.models import Order

logger = logging.getLogger(__name__)


class BaseEmailTask(Task):
    """
    Base task class for email operations with retry logic.
    """
    max_retries = 3
    default_retry_delay = 60  # 1 minute

    def retry_unless_eager(self, exc):
        """Inline runs fail fast; only worker runs back off and retry."""
        if self.request.is_eager:
            return exc
        return self.retry(exc=exc)

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        logger.error(f"Task {task_id} failed: {exc}")
        super().on_failure(exc, task_id, args, kwargs, einfo)


def _base_context():
    return {
        'brand_name': settings.EMAIL_BRAND_NAME,
        'support_email': settings.SUPPORT_EMAIL,
        'frontend_url': settings.FRONTEND_URL,
        'current_year': timezone.now().year,
    }


def _send(template, subject, to, context):
    context = {**_base_context(), **context}
    html_content = render_to_string(f'notifications/email/{template}.html', context)
    text_content = render_to_string(f'notifications/email/{template}.txt', context)

    email = EmailMultiAlternatives(
        subject=subject,
        body=text_content,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[to],
        reply_to=[settings.SUPPORT_EMAIL],
    )
    email.attach_alternative(html_content, "text/html")
    email.send(fail_silently=False)


def _load_order(order_id, purpose):
    try:
        return Order.objects.select_related('user', 'plan').get(pk=order_id)
    except Order.DoesNotExist:
        logger.error(f"Order {order_id} not found for {purpose}")
        raise


def _order_context(order, **extra):
    return {'order': order, 'user': order.user, 'plan': order.plan, **extra}


@shared_task(base=BaseEmailTask, bind=True)
def send_order_confirmation_email(self, order_id):
    """
    Tell the buyer their order was received and is awaiting verification.
    """
    order = _load_order(order_id, 'order confirmation')
    try:
        _send('order_confirmation', f"Order Confirmation #{order.pk}", order.user.email, _order_context(order))
    except Exception as e:
        logger.error(f"Failed to send order confirmation for {order_id}: {e}")
        raise self.retry_unless_eager(e)

    logger.info(f"Order confirmation for #{order.pk} sent to {order.user.email}")
    return {'status': 'success', 'message': f"Order confirmation sent to {order.user.email}"}


@shared_task(base=BaseEmailTask, bind=True)
def send_admin_new_order_email(self, order_id):
    """
    Alert the operations inbox about a new order.
    """
    recipient = settings.ADMIN_NOTIFICATION_EMAIL or settings.DEFAULT_FROM_EMAIL
    order = _load_order(order_id, 'new order alert')
    try:
        _send(
            'admin_new_order',
            f"New Order #{order.pk} - {order.plan.name}",
            recipient,
            _order_context(order),
        )
    except Exception as e:
        logger.error(f"Failed to send new order alert for {order_id}: {e}")
        raise self.retry_unless_eager(e)

    logger.info(f"New order alert for #{order.pk} sent to {recipient}")
    return {'status': 'success', 'message': f"New order alert sent to {recipient}"}


@shared_task(base=BaseEmailTask, bind=True)
def send_order_status_email(self, order_id):
    """
    Tell the buyer their payment was verified or rejected.
    """
    order = _load_order(order_id, 'status email')
    if order.status == Order.Status.PENDING:
        logger.warning(f"Order {order_id} is still pending, status email skipped")
        return {'status': 'skipped', 'message': 'Order still pending'}

    status_label = order.get_status_display()
    try:
        _send(
            'order_status',
            f"Payment {status_label} - Order #{order.pk}",
            order.user.email,
            _order_context(order, status_label=status_label),
        )
    except Exception as e:
        logger.error(f"Failed to send status email for {order_id}: {e}")
        raise self.retry_unless_eager(e)

    logger.info(f"Payment {order.status} email for #{order.pk} sent to {order.user.email}")
    return {'status': 'success', 'message': f"Status email sent to {order.user.email}"}


@shared_task(base=BaseEmailTask, bind=True)
def send_credentials_email(self, credential_id):
    """
    Deliver access credentials. Only the fields that belong to the
    credential's type are rendered.
    """
    try:
        credential = IptvCredential.objects.select_related('user', 'order', 'order__plan').get(pk=credential_id)
    except IptvCredential.DoesNotExist:
        logger.error(f"Credential {credential_id} not found for delivery email")
        raise

    context = {
        'credential': credential,
        'user': credential.user,
        'order': credential.order,
        'rows': credential.delivery_rows(),
    }
    try:
        _send('credentials', "Your IPTV Credentials", credential.user.email, context)
    except Exception as e:
        logger.error(f"Failed to deliver credentials {credential_id}: {e}")
        raise self.retry_unless_eager(e)

    logger.info(f"Credentials {credential.pk} delivered to {credential.user.email}")
    return {'status': 'success', 'message': f"Credentials sent to {credential.user.email}"}


@shared_task(base=BaseEmailTask)
def send_test_email(to):
    """
    Send a diagnostic message to verify the SMTP configuration.
    """
    _send(
        'test',
        f"Test Email - {settings.EMAIL_BRAND_NAME}",
        to,
        {'sent_at': timezone.now(), 'email_host': settings.EMAIL_HOST},
    )
    logger.info(f"Test email sent to {to}")
    return {'status': 'success', 'message': f"Test email sent to {to}"}
