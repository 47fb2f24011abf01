"""Customer directory built up from storefront orders and bookings."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.core.validators import PHONE_VALIDATOR


class Customer(models.Model):
    """A person who ordered or booked. The phone number identifies them."""

    name = models.CharField(max_length=150)
    email = models.EmailField(blank=True, db_index=True)
    phone = models.CharField(max_length=20, unique=True, validators=[PHONE_VALIDATOR])
    address = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    is_vip = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Customer")
        verbose_name_plural = _("Customers")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.name} ({self.phone})"
