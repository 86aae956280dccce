import logging

from django.conf import settings
from django.db import connections
from django.db.utils import OperationalError
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_GET
from redis import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


def check_database():
    try:
        with connections['default'].cursor() as cursor:
            cursor.execute('SELECT 1')
            cursor.fetchone()
    except OperationalError as e:
        logger.exception('Database health check failed')
        return {'status': 'unavailable', 'error': str(e)}
    return {'status': 'ok', 'backend': connections['default'].vendor}


def check_redis():
    """Broker and cache reachability. Reported, never fatal."""
    try:
        client = Redis.from_url(settings.REDIS_URL, socket_connect_timeout=2, socket_timeout=2)
        client.ping()
    except RedisError as e:
        logger.warning(f'Redis health check failed: {e}')
        return {'status': 'unavailable', 'error': str(e)}
    return {'status': 'ok'}


@never_cache
@require_GET
def health(request):
    """
    ``ok`` follows the database only; Redis degrades email delivery but the
    API keeps serving.
    """
    database = check_database()
    payload = {
        'ok': database['status'] == 'ok',
        'timestamp': timezone.now().isoformat(),
        'database': database,
        'redis': check_redis(),
    }
    return JsonResponse(payload, status=200 if payload['ok'] else 503)
