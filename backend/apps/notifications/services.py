# FILE: backend/apps/notifications/services.py
import logging

from django.db import transaction

from . import tasks

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Fire-and-forget notifications for lifecycle events.

    Messages are enqueued only once the surrounding transaction commits, and a
    failure to enqueue (or, with eager tasks, to send) is logged and never
    reaches the caller.
    Usage:
        NotificationService.order_created(order)
    """

    @classmethod
    def order_created(cls, order):
        cls._dispatch(tasks.send_order_confirmation_email, order.pk)
        cls._dispatch(tasks.send_admin_new_order_email, order.pk)

    @classmethod
    def order_status_changed(cls, order):
        cls._dispatch(tasks.send_order_status_email, order.pk)

    @classmethod
    def credential_issued(cls, credential):
        cls._dispatch(tasks.send_credentials_email, credential.pk)

    @classmethod
    def send_test_email(cls, to):
        """Send synchronously and report the outcome instead of raising."""
        try:
            tasks.send_test_email(to)
        except Exception as e:
            logger.exception(f"Test email to {to} failed")
            return {'success': False, 'error': str(e)}
        return {'success': True}

    @classmethod
    def _dispatch(cls, task, *args):
        transaction.on_commit(lambda: cls._enqueue(task, *args))

    @staticmethod
    def _enqueue(task, *args):
        try:
            task.delay(*args)
        except Exception:
            logger.exception(f"Notification {task.name}{args} could not be delivered")
