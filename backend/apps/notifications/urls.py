from django.urls import path

from .views import EmailDiagnosticView, TestEmailView

urlpatterns = [
    path('test-email/', TestEmailView.as_view(), name='notifications-test-email'),
    path('diagnostic/', EmailDiagnosticView.as_view(), name='notifications-diagnostic'),
]
