"""
Plan catalogue and payment option models.
"""
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from backend.core.validators import validate_connection_range

MAX_CONNECTIONS = 10

connections_validators = [MinValueValidator(1), MaxValueValidator(MAX_CONNECTIONS)]


class Plan(models.Model):
    """
    A sellable subscription: duration, connection ceiling and marketing copy.
    Prices live in PlanPricing, one row per connection count.
    """
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    duration_days = models.PositiveIntegerField(default=30, validators=[MinValueValidator(1)])
    max_connections = models.PositiveSmallIntegerField(default=MAX_CONNECTIONS, validators=connections_validators)
    is_active = models.BooleanField(default=True)
    features = models.JSONField(default=list, blank=True)  # e.g. ["HD channels", "EPG"]
    promo_text = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("plan")
        verbose_name_plural = _("plans")
        ordering = ['id']

    def __str__(self):
        return f"{self.name} ({self.duration_days} days)"

    def price_for(self, connections):
        """Authoritative price for a connection count, or None if not configured."""
        row = self.pricing.filter(connections=connections).first()
        return row.price if row else None


class PlanPricing(models.Model):
    plan = models.ForeignKey(Plan, on_delete=models.CASCADE, related_name='pricing')
    connections = models.PositiveSmallIntegerField(validators=connections_validators)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))])

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("plan price")
        verbose_name_plural = _("plan pricing")
        ordering = ['plan', 'connections']
        constraints = [
            models.UniqueConstraint(fields=['plan', 'connections'], name='unique_plan_connections_price'),
        ]

    def __str__(self):
        return f"{self.plan.name} x{self.connections}: {self.price}"


class ConnectionWindowMixin(models.Model):
    """Shared [min_connections, max_connections] applicability window."""
    min_connections = models.PositiveSmallIntegerField(default=1, validators=connections_validators)
    max_connections = models.PositiveSmallIntegerField(default=MAX_CONNECTIONS, validators=connections_validators)

    class Meta:
        abstract = True

    def clean(self):
        super().clean()
        validate_connection_range(self.min_connections, self.max_connections)

    def covers(self, connections):
        return self.min_connections <= connections <= self.max_connections


class PaymentMethod(ConnectionWindowMixin):
    """Manual payment instructions shown for a plan and connection window."""

    class Type(models.TextChoices):
        CARD = 'card', _('Card')
        PAYPAL = 'paypal', _('PayPal')
        CRYPTO = 'crypto', _('Crypto')
        CUSTOM = 'custom', _('Custom')

    name = models.CharField(max_length=255)
    type = models.CharField(max_length=20, choices=Type.choices)
    plan = models.ForeignKey(Plan, on_delete=models.CASCADE, related_name='payment_methods')
    instructions = models.TextField(blank=True)
    payment_link = models.URLField(max_length=500, blank=True)
    icon_url = models.URLField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)
    sort_order = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("payment method")
        verbose_name_plural = _("payment methods")
        ordering = ['sort_order', 'id']
        indexes = [
            models.Index(fields=['plan', 'is_active'], name='payment_method_plan_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_type_display()})"


class PaymentWidget(ConnectionWindowMixin):
    """Embedded crypto checkout (NowPayments invoice) for a plan and window."""
    name = models.CharField(max_length=255)
    plan = models.ForeignKey(Plan, on_delete=models.CASCADE, related_name='payment_widgets')
    invoice_id = models.CharField(max_length=255)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("payment widget")
        verbose_name_plural = _("payment widgets")
        ordering = ['id']
        indexes = [
            models.Index(fields=['plan', 'is_active'], name='payment_widget_plan_idx'),
        ]

    def __str__(self):
        return f"{self.name} [{self.invoice_id}]"
