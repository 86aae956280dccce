from django.apps import AppConfig


class HealthCheckConfig(AppConfig):
    """Liveness endpoint for load balancers and uptime probes."""
    name = 'backend.apps.health_check'
    verbose_name = 'System Health'
