"""Notification preferences and newsletter subscribers.

``NotificationSettings`` is a single-row table (pk=1) holding the toggles
the dashboard exposes on the Settings > Notifications page. Every sender
checks the relevant toggle before emailing. Newsletter subscribers are
kept after unsubscribing so a later re-subscribe updates the same row.
"""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class NotificationSettings(models.Model):
    """Global on/off switches for outgoing notifications."""

    new_order_email = models.BooleanField(default=True)
    new_booking_email = models.BooleanField(default=True)
    new_lead_email = models.BooleanField(default=True)
    order_status_email = models.BooleanField(default=False)
    low_stock_email = models.BooleanField(default=True)
    stale_order_email = models.BooleanField(default=True)
    booking_reminder_sms = models.BooleanField(default=True)
    order_confirm_sms = models.BooleanField(default=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Notification settings")
        verbose_name_plural = _("Notification settings")

    def __str__(self) -> str:
        return "Notification settings"

    def save(self, *args, **kwargs):  # type: ignore
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> "NotificationSettings":
        obj, _created = cls.objects.get_or_create(pk=1)
        return obj


class NewsletterSubscriber(models.Model):
    email = models.EmailField(unique=True)
    subscribed = models.BooleanField(default=True)
    subscribed_at = models.DateTimeField(default=timezone.now)
    unsubscribed_at = models.DateTimeField(null=True, blank=True)
    source = models.CharField(max_length=50, default="website")
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=500, blank=True)

    class Meta:
        verbose_name = _("Newsletter subscriber")
        verbose_name_plural = _("Newsletter subscribers")
        ordering = ["-subscribed_at"]

    def __str__(self) -> str:
        state = "subscribed" if self.subscribed else "unsubscribed"
        return f"{self.email} ({state})"
