"""
IPTV access credentials, one row per connection slot of a verified order.
"""
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from backend.apps.payments.models import MAX_CONNECTIONS


class IptvCredential(models.Model):
    """Access details delivered to the buyer for a single connection."""

    class Type(models.TextChoices):
        XTREAM = "xtream", _("Xtream Codes")
        M3U = "m3u", _("M3U playlist")
        PORTAL = "portal", _("Portal (MAG)")
        COMBINED = "combined", _("Combined")

    # Fields each type carries; anything else is blanked on save
    GERMANE_FIELDS = {
        Type.XTREAM: ("server_url", "username", "password"),
        Type.M3U: ("m3u_url", "epg_url"),
        Type.PORTAL: ("portal_url", "mac_address"),
        Type.COMBINED: ("server_url", "username", "password", "m3u_url", "epg_url", "portal_url", "mac_address"),
    }
    ACCESS_FIELDS = GERMANE_FIELDS[Type.COMBINED]

    FIELD_LABELS = {
        "server_url": _("Server URL"),
        "username": _("Username"),
        "password": _("Password"),
        "m3u_url": _("M3U URL"),
        "epg_url": _("EPG URL"),
        "portal_url": _("Portal URL"),
        "mac_address": _("MAC Address"),
    }

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="iptv_credentials"
    )
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="credentials"
    )
    connection_number = models.PositiveSmallIntegerField(
        _("connection number"),
        validators=[MinValueValidator(1), MaxValueValidator(MAX_CONNECTIONS)]
    )
    credential_type = models.CharField(_("credential type"), max_length=20, choices=Type.choices)

    # Xtream Codes
    server_url = models.CharField(_("server URL"), max_length=500, blank=True)
    username = models.CharField(_("username"), max_length=255, blank=True)
    password = models.CharField(_("password"), max_length=255, blank=True)

    # M3U playlist
    m3u_url = models.CharField(_("M3U URL"), max_length=1000, blank=True)
    epg_url = models.CharField(_("EPG URL"), max_length=1000, blank=True)

    # Portal
    portal_url = models.CharField(_("portal URL"), max_length=500, blank=True)
    mac_address = models.CharField(_("MAC address"), max_length=50, blank=True)

    expires_at = models.DateTimeField(_("expires at"), null=True, blank=True)
    is_active = models.BooleanField(_("active"), default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("IPTV credential")
        verbose_name_plural = _("IPTV credentials")
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["order", "connection_number"], name="unique_order_connection_credential"),
        ]
        indexes = [
            models.Index(fields=["user", "is_active"], name="credential_user_active_idx"),
        ]

    def __str__(self):
        return f"{self.get_credential_type_display()} #{self.connection_number} for order {self.order_id}"

    @classmethod
    def germane_fields(cls, credential_type):
        return cls.GERMANE_FIELDS.get(credential_type, ())

    def clear_foreign_fields(self):
        """Blank the access fields that do not belong to this credential's type."""
        keep = self.germane_fields(self.credential_type)
        for field in self.ACCESS_FIELDS:
            if field not in keep:
                setattr(self, field, "")

    def delivery_rows(self):
        """(label, value) pairs for the delivery email, germane and filled only."""
        return [
            (self.FIELD_LABELS[field], getattr(self, field))
            for field in self.germane_fields(self.credential_type)
            if getattr(self, field)
        ]

    @property
    def is_expired(self):
        return self.expires_at is not None and self.expires_at <= timezone.now()

    @property
    def is_usable(self):
        return self.is_active and not self.is_expired
