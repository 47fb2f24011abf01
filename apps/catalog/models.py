"""Catalog models: products, their stock, images and storefront badges.

Prices are PKR amounts stored as decimals. The effective selling price of a
product is its ``sale_price`` when one is set, otherwise ``price``. Stock
lives in a separate one-to-one ``Inventory`` row so stock updates never
touch the product row itself.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator, RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

HEX_COLOR_VALIDATOR = RegexValidator(
    regex=r"^#[0-9a-fA-F]{6}$",
    message=_("Color must be a hex value like #3b82f6."),
)


class Badge(models.Model):
    """Label shown on product cards ("New", "Hot", "Sale") and used as a tag filter."""

    name = models.CharField(max_length=50, unique=True)
    color = models.CharField(max_length=7, default="#3b82f6", validators=[HEX_COLOR_VALIDATOR])
    is_active = models.BooleanField(default=True)
    sort_order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Badge")
        verbose_name_plural = _("Badges")
        ordering = ["sort_order", "-created_at"]

    def __str__(self) -> str:
        return self.name


class Product(models.Model):
    class Status(models.TextChoices):
        ACTIVE = "ACTIVE", _("Active")
        OUT_OF_STOCK = "OUT_OF_STOCK", _("Out of stock")
        DRAFT = "DRAFT", _("Draft")
        ARCHIVED = "ARCHIVED", _("Archived")

    name = models.CharField(max_length=200)
    slug = models.SlugField(max_length=220, unique=True)
    sku = models.CharField(max_length=64, unique=True, null=True, blank=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    sale_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    cost_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    barcode = models.CharField(max_length=64, blank=True)
    category = models.CharField(max_length=100, blank=True, db_index=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    badge = models.ForeignKey(
        Badge,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )
    is_active = models.BooleanField(default=True)
    is_archived = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Product")
        verbose_name_plural = _("Products")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active", "is_archived"]),
            models.Index(fields=["status"]),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def effective_price(self) -> Decimal:
        return self.sale_price if self.sale_price is not None else self.price

    @property
    def stock_quantity(self) -> int:
        inventory = getattr(self, "inventory", None)
        return inventory.quantity if inventory is not None else 0

    @property
    def primary_image_url(self) -> str | None:
        images = list(self.images.all())
        for image in images:
            if image.is_primary:
                return image.url
        return images[0].url if images else None


class Inventory(models.Model):
    product = models.OneToOneField(Product, on_delete=models.CASCADE, related_name="inventory")
    quantity = models.IntegerField(default=0)
    low_stock_at = models.PositiveIntegerField(default=10)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Inventory")
        verbose_name_plural = _("Inventory")

    def __str__(self) -> str:
        return f"{self.product.name}: {self.quantity}"

    @property
    def is_low(self) -> bool:
        return self.quantity <= self.low_stock_at


class ProductImage(models.Model):
    """Image stored in the object storage bucket; ``public_id`` is the bucket key."""

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="images")
    url = models.URLField(max_length=1000)
    public_id = models.CharField(max_length=500, blank=True)
    alt = models.CharField(max_length=200, blank=True)
    sort_order = models.PositiveIntegerField(default=0)
    is_primary = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Product image")
        verbose_name_plural = _("Product images")
        ordering = ["sort_order", "id"]

    def __str__(self) -> str:
        return self.public_id or self.url
