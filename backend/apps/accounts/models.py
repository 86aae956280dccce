# backend/apps/accounts/models.py
"""
Accounts models for the IPTV subscription platform.
"""
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """Custom user manager for User model."""

    def create_user(self, email, password=None, **extra_fields):
        """Create and save a regular User with the given email and password."""
        if not email:
            raise ValueError("The Email field must be set")

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """Create and save an admin that can also use the Django admin site."""
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", User.Role.ADMIN)
        extra_fields.setdefault("is_verified", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Custom User model with role-based permissions."""

    class Role(models.TextChoices):
        USER = "USER", _("User")
        ADMIN = "ADMIN", _("Admin")
        AGENT = "AGENT", _("Agent")

    email = models.EmailField(_("email address"), unique=True, db_index=True)
    name = models.CharField(_("name"), max_length=150, blank=True)
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.USER,
        db_index=True
    )

    # Status flags
    is_active = models.BooleanField(_("active"), default=True)
    is_staff = models.BooleanField(_("staff status"), default=False)
    is_verified = models.BooleanField(_("verified"), default=False)

    # Timestamps
    date_joined = models.DateTimeField(_("date joined"), default=timezone.now)
    last_login = models.DateTimeField(_("last login"), null=True, blank=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = _("user")
        verbose_name_plural = _("users")
        ordering = ["-date_joined"]
        indexes = [
            models.Index(fields=["role", "is_active"], name="user_role_active_idx"),
            models.Index(fields=["date_joined"], name="user_date_joined_idx"),
        ]

    def __str__(self):
        return f"{self.email} ({self.get_role_display()})"

    def get_full_name(self):
        return self.name or self.email

    def get_short_name(self):
        return self.name or self.email.split("@")[0]

    @staticmethod
    def get_client_ip(request):
        """
        Extract the real client IP address from request headers.
        Handles proxies and load balancers.
        """
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            return x_forwarded_for.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR')


class ActivityLog(models.Model):
    """Append-only trail of business actions for audit purposes."""

    class Action(models.TextChoices):
        CREATE_ORDER = "create_order", _("Order created")
        CONFIRM_PAYMENT = "confirm_payment", _("Payment confirmed by buyer")
        VERIFY_ORDER = "verify_order", _("Order verified")
        REJECT_ORDER = "reject_order", _("Order rejected")
        CREATE_CREDENTIAL = "create_credential", _("Credential created")
        UPDATE_CREDENTIAL = "update_credential", _("Credential updated")
        DELETE_CREDENTIAL = "delete_credential", _("Credential deleted")
        CREATE_PLAN = "create_plan", _("Plan created")
        UPDATE_PLAN = "update_plan", _("Plan updated")
        DELETE_PLAN = "delete_plan", _("Plan deleted")
        CREATE_PAYMENT_METHOD = "create_payment_method", _("Payment method created")
        UPDATE_PAYMENT_METHOD = "update_payment_method", _("Payment method updated")
        DELETE_PAYMENT_METHOD = "delete_payment_method", _("Payment method deleted")
        CREATE_PAYMENT_WIDGET = "create_payment_widget", _("Payment widget created")
        UPDATE_PAYMENT_WIDGET = "update_payment_widget", _("Payment widget updated")
        DELETE_PAYMENT_WIDGET = "delete_payment_widget", _("Payment widget deleted")
        UPDATE_USER_ROLE = "update_user_role", _("User role updated")
        DELETE_USER = "delete_user", _("User deleted")
        GUEST_CHECKOUT = "guest_checkout", _("Guest checkout")

    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activity_logs"
    )
    action = models.CharField(_("action"), max_length=50, choices=Action.choices)
    entity_type = models.CharField(_("entity type"), max_length=50, blank=True)
    entity_id = models.BigIntegerField(_("entity ID"), null=True, blank=True)

    details = models.JSONField(_("details"), default=dict, blank=True)
    ip_address = models.GenericIPAddressField(_("IP address"), null=True, blank=True)
    user_agent = models.TextField(_("user agent"), blank=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        verbose_name = _("activity log")
        verbose_name_plural = _("activity logs")
        indexes = [
            models.Index(fields=["user", "created_at"], name="activity_user_created_idx"),
            models.Index(fields=["action", "created_at"], name="activity_action_created_idx"),
            models.Index(fields=["entity_type", "entity_id"], name="activity_entity_idx"),
        ]
        ordering = ["-created_at", "-id"]

    def __str__(self):
        actor = self.user.email if self.user else "System"
        return f"{self.get_action_display()} by {actor}"
