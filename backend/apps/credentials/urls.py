from django.urls import path, include
from rest_framework import routers

from .views import CredentialViewSet

router = routers.DefaultRouter()
router.register(r'credentials', CredentialViewSet, basename='credential')

urlpatterns = [
    path('', include(router.urls)),
]
