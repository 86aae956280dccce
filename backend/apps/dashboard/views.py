"""
Admin dashboard headline figures.
"""
import logging
from decimal import Decimal

from django.core.cache import cache
from django.db.models import Count, Q, Sum
from django.utils import timezone
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.apps.accounts.models import User
from backend.apps.accounts.permissions import IsAdmin
from backend.apps.credentials.models import IptvCredential
from backend.apps.orders.models import Order

logger = logging.getLogger(__name__)

STATS_CACHE_KEY = 'admin_dashboard_stats'
STATS_CACHE_TIMEOUT = 60


def collect_stats():
    now = timezone.now()
    orders = Order.objects.aggregate(
        total=Count('id'),
        pending=Count('id', filter=Q(status=Order.Status.PENDING)),
        verified=Count('id', filter=Q(status=Order.Status.VERIFIED)),
        revenue=Sum('price', filter=Q(status=Order.Status.VERIFIED)),
    )
    active_credentials = IptvCredential.objects.filter(is_active=True).filter(
        Q(expires_at__isnull=True) | Q(expires_at__gt=now)
    ).count()

    return {
        'totalUsers': User.objects.count(),
        'totalOrders': orders['total'],
        'pendingOrders': orders['pending'],
        'verifiedOrders': orders['verified'],
        'totalRevenue': str((orders['revenue'] or Decimal('0')).quantize(Decimal('0.01'))),
        'activeCredentials': active_credentials,
    }


class DashboardStatsView(APIView):
    """
    Counts and verified revenue for the admin panel, cached briefly.
    """
    permission_classes = [IsAdmin]

    def get(self, request):
        data = cache.get(STATS_CACHE_KEY)
        if data is not None:
            logger.debug("Dashboard stats served from cache.")
            return Response(data)

        data = collect_stats()
        cache.set(STATS_CACHE_KEY, data, STATS_CACHE_TIMEOUT)
        return Response(data)
