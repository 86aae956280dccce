from django.urls import path, include
from rest_framework import routers

from .views import PaymentMethodViewSet, PaymentWidgetViewSet, PlanViewSet

router = routers.DefaultRouter()
router.register(r'plans', PlanViewSet, basename='plan')
router.register(r'payment-methods', PaymentMethodViewSet, basename='payment-method')
router.register(r'payment-widgets', PaymentWidgetViewSet, basename='payment-widget')

urlpatterns = [
    path('', include(router.urls)),
]
