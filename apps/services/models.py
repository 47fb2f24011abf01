"""Workshop service catalogue (detailing, PPF, ceramic coating and so on)."""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Service(models.Model):
    class Location(models.TextChoices):
        WORKSHOP = "WORKSHOP", _("At the workshop")
        HOME = "HOME", _("At the customer's home")
        BOTH = "BOTH", _("Workshop or home")

    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    duration = models.PositiveIntegerField(default=60, help_text=_("Duration in minutes."))
    location = models.CharField(max_length=10, choices=Location.choices, default=Location.BOTH)
    features = models.JSONField(default=list, blank=True)
    # Image URLs; the first one is the primary image
    images = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Service")
        verbose_name_plural = _("Services")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.title

    @property
    def primary_image(self) -> str | None:
        return self.images[0] if self.images else None
