"""Workshop and home-service bookings."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.core.references import generate_unique_reference


def default_operating_hours() -> list[dict]:
    """Mon-Fri 09:00-18:00; weekends closed. ``day_of_week`` 0 is Sunday."""
    return [
        {
            "day_of_week": day,
            "is_open": 1 <= day <= 5,
            "open_time": "09:00",
            "close_time": "18:00",
        }
        for day in range(7)
    ]


class Booking(models.Model):
    class Status(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        CONFIRMED = "CONFIRMED", _("Confirmed")
        IN_PROGRESS = "IN_PROGRESS", _("In progress")
        COMPLETED = "COMPLETED", _("Completed")
        CANCELLED = "CANCELLED", _("Cancelled")
        NO_SHOW = "NO_SHOW", _("No show")

    booking_number = models.CharField(max_length=20, unique=True, editable=False)
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
    )
    customer_name = models.CharField(max_length=150)
    customer_phone = models.CharField(max_length=20)
    customer_email = models.EmailField(blank=True)
    service_type = models.CharField(max_length=500)
    vehicle_info = models.CharField(max_length=200, blank=True)
    date = models.DateField(db_index=True)
    time_slot = models.CharField(max_length=5, blank=True)
    address = models.TextField()
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True)
    whatsapp_sent = models.BooleanField(default=False)
    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-date", "-created_at"]
        indexes = [
            models.Index(fields=["date", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.booking_number} ({self.date} {self.time_slot})"

    def save(self, *args, **kwargs):  # type: ignore
        if not self.booking_number:
            self.booking_number = generate_unique_reference(Booking, "booking_number", "BKG")
        super().save(*args, **kwargs)


class BookingSettings(models.Model):
    """Singleton row (pk=1) holding slot rules and opening hours."""

    slot_duration = models.PositiveIntegerField(default=60, help_text=_("Minutes"))
    buffer_time = models.PositiveIntegerField(default=15, help_text=_("Minutes"))
    advance_booking_days = models.PositiveIntegerField(default=30)
    allow_same_day_booking = models.BooleanField(default=True)
    operating_hours = models.JSONField(default=default_operating_hours)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking settings")
        verbose_name_plural = _("Booking settings")

    def __str__(self) -> str:
        return "Booking settings"

    def save(self, *args, **kwargs):  # type: ignore
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> "BookingSettings":
        obj, _created = cls.objects.get_or_create(pk=1)
        return obj

    def hours_for(self, day_of_week: int) -> dict | None:
        for entry in self.operating_hours or []:
            if entry.get("day_of_week") == day_of_week:
                return entry
        return None


class BookingActivityLog(models.Model):
    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name="activity_logs")
    activity = models.CharField(max_length=500)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"{self.booking_id}: {self.activity}"
