"""
URL configuration for the IPTV subscription platform.
"""
from django.contrib import admin
from django.urls import path, include
from django.http import HttpResponse
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView

from backend.apps.orders.views import GuestCheckoutView


def favicon_view(request):
    """Handle favicon.ico requests gracefully."""
    return HttpResponse(status=204)


urlpatterns = [
    path("favicon.ico", favicon_view, name="favicon"),
    path("admin/", admin.site.urls),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/schema/swagger-ui/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/schema/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),

    # Anonymous checkout lives outside the versioned API
    path("api/guest-checkout", GuestCheckoutView.as_view(), name="guest-checkout"),

    path("api/v1/auth/", include("backend.apps.accounts.urls")),
    path("api/v1/", include("backend.apps.payments.urls")),
    path("api/v1/", include("backend.apps.orders.urls")),
    path("api/v1/", include("backend.apps.credentials.urls")),
    path("api/v1/dashboard/", include("backend.apps.dashboard.urls")),
    path("api/v1/notifications/", include("backend.apps.notifications.urls")),
    path("health/", include("backend.apps.health_check.urls")),
]
