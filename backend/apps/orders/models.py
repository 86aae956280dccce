"""
Order model: one purchase of a plan for a number of connections.
"""
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from backend.apps.payments.models import MAX_CONNECTIONS


class Order(models.Model):
    """
    Status moves pending -> verified or pending -> rejected, never back.
    Price and payment method details are snapshots taken at creation.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', _('Pending')
        VERIFIED = 'verified', _('Verified')
        REJECTED = 'rejected', _('Rejected')

    class CredentialsType(models.TextChoices):
        XTREAM = 'xtream', _('Xtream Codes')
        MAG = 'mag', _('MAG box')
        M3U = 'm3u', _('M3U playlist')
        ENIGMA2 = 'enigma2', _('Enigma2')

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='orders'
    )
    plan = models.ForeignKey(
        'payments.Plan',
        on_delete=models.PROTECT,
        related_name='orders'
    )
    connections = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(MAX_CONNECTIONS)]
    )
    price = models.DecimalField(max_digits=10, decimal_places=2)

    # Payment channel: at most one of method / widget
    payment_method = models.ForeignKey(
        'payments.PaymentMethod',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders'
    )
    payment_widget = models.ForeignKey(
        'payments.PaymentWidget',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders'
    )
    payment_method_name = models.CharField(max_length=255, blank=True)
    payment_method_type = models.CharField(max_length=50, blank=True)

    # Requested device setup
    credentials_type = models.CharField(max_length=20, choices=CredentialsType.choices, blank=True)
    mac_address = models.CharField(max_length=50, blank=True)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True)
    payment_confirmed_at = models.DateTimeField(null=True, blank=True)
    verified_at = models.DateTimeField(null=True, blank=True)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='verified_orders'
    )
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejected_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='rejected_orders'
    )
    rejection_reason = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("order")
        verbose_name_plural = _("orders")
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'created_at'], name='order_user_created_idx'),
            models.Index(fields=['status', 'created_at'], name='order_status_created_idx'),
        ]

    def __str__(self):
        return f"Order #{self.pk} ({self.get_status_display()})"
