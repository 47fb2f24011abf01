"""User and staff models for the Shahzaib Autos dashboard.

Customers of the storefront never log in; accounts exist only for the
workshop team. A ``CustomUser`` authenticates with email and password, and
an ``Admin`` record attached to it is what grants access to the dashboard
API. Removing a team member deletes that record and leaves the account
itself in place.
"""

from __future__ import annotations

from typing import Any

from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.core.validators import PHONE_VALIDATOR


class CustomUserManager(BaseUserManager):
    """Manager that uses email as the login field."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Email is required to create a user.")
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)


class CustomUser(AbstractUser):
    """Team account authenticated by email."""

    username = models.CharField(_("Display name"), max_length=150, blank=True)
    email = models.EmailField(_("Email"), unique=True)
    full_name = models.CharField(_("Full name"), max_length=150, blank=True)
    phone = models.CharField(_("Phone"), max_length=20, blank=True, validators=[PHONE_VALIDATOR])
    avatar_url = models.URLField(_("Avatar URL"), max_length=500, blank=True)
    failed_login_attempts = models.PositiveIntegerField(default=0)
    locked_until = models.DateTimeField(_("Locked until"), null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: list[str] = []

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.email

    @property
    def display_name(self) -> str:
        return self.full_name or self.get_full_name() or self.email

    def is_dashboard_admin(self) -> bool:
        """Superusers, plus anyone holding an active Admin record."""
        if self.is_superuser:
            return True
        access = getattr(self, "admin_access", None)
        return bool(access and access.status == Admin.Status.ACTIVE)

    @property
    def is_locked(self) -> bool:
        return bool(self.locked_until and self.locked_until > timezone.now())

    def lock(self, minutes: int = 15) -> None:
        self.locked_until = timezone.now() + timezone.timedelta(minutes=minutes)
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def unlock(self) -> None:
        self.locked_until = None
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def register_failed_attempt(self, threshold: int = 5) -> None:
        self.failed_login_attempts += 1
        if self.failed_login_attempts >= threshold:
            self.lock()
            return
        self.save(update_fields=["failed_login_attempts"])


class Admin(models.Model):
    """Dashboard access grant plus the team profile shown on the Team page."""

    class Status(models.TextChoices):
        ACTIVE = "active", _("Active")
        INACTIVE = "inactive", _("Inactive")

    user = models.OneToOneField(
        CustomUser,
        on_delete=models.CASCADE,
        related_name="admin_access",
    )
    full_name = models.CharField(max_length=150, blank=True)
    role = models.CharField(max_length=50, default="Admin")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    phone = models.CharField(max_length=20, blank=True)
    avatar_url = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Admin")
        verbose_name_plural = _("Admins")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.user.email} ({self.role})"


class PasswordResetToken(models.Model):
    """Six-digit code used both for password reset and for team invites."""

    class Purpose(models.TextChoices):
        RESET = "reset", _("Password reset")
        INVITE = "invite", _("Team invite")

    user = models.ForeignKey(
        CustomUser,
        on_delete=models.CASCADE,
        related_name="password_reset_tokens",
    )
    code = models.CharField(max_length=6)
    purpose = models.CharField(max_length=10, choices=Purpose.choices, default=Purpose.RESET)
    expires_at = models.DateTimeField()
    attempts_left = models.PositiveSmallIntegerField(default=3)
    is_used = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Password reset token")
        verbose_name_plural = _("Password reset tokens")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["code", "expires_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.get_purpose_display()} token for {self.user_id}"

    @property
    def is_expired(self) -> bool:
        return timezone.now() >= self.expires_at

    def mark_used(self) -> None:
        self.is_used = True
        self.save(update_fields=["is_used"])

    def decrement_attempt(self) -> None:
        if self.attempts_left > 0:
            self.attempts_left -= 1
            self.save(update_fields=["attempts_left"])


User = CustomUser
