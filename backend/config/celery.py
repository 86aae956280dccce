import os

from celery import Celery
from kombu import Queue
from django.conf import settings

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'backend.config.settings')

app = Celery('iptv_platform')

# Configure Celery using Django settings
app.config_from_object('django.conf:settings', namespace='CELERY')

app.autodiscover_tasks(lambda: settings.INSTALLED_APPS)

app.conf.task_queues = (
    Queue('default'),
    Queue('emails'),
)

app.conf.task_default_queue = 'default'
app.conf.task_default_exchange = 'default'
app.conf.task_default_routing_key = 'default'

app.conf.task_routes = {
    'backend.apps.notifications.tasks.send_*': {
        'queue': 'emails'
    },
}

# Task time limits
app.conf.task_time_limit = 120
app.conf.task_soft_time_limit = 90

app.conf.worker_prefetch_multiplier = 1
app.conf.task_acks_late = True
app.conf.task_reject_on_worker_lost = True

app.conf.broker_transport_options = {
    'visibility_timeout': 3600,
    'socket_connect_timeout': 5,
    'retry_on_timeout': True,
}

