"""Catalog business logic: product lifecycle, stock automation, storefront queries."""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any, Iterable

from django.db import transaction  # type: ignore
from django.db.models import Count, DecimalField, F, Max, Min, Q, QuerySet, Sum  # type: ignore
from django.db.models.functions import Coalesce  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.text import slugify  # type: ignore

from apps.core.exceptions import DomainError
from apps.core.storage import get_image_storage

from .models import Badge, Inventory, Product, ProductImage

logger = logging.getLogger(__name__)

RESERVED_ORDER_STATUSES = ("NEW", "CONFIRMED", "PROCESSING")
DEFAULT_MAX_PRICE = Decimal("100000")


class ProductDeleteBlockedError(DomainError):
    """Raised when a product with order history is hard-deleted."""

    def __init__(self, order_count: int):
        self.order_count = order_count
        super().__init__(f"Cannot delete product with {order_count} order(s). Archive it instead.")


class InsufficientStockError(DomainError):
    def __init__(self, product_name: str, available: int):
        self.product_name = product_name
        self.available = available
        super().__init__(f'Insufficient stock for "{product_name}". Only {available} available.')


# ============================================================================
# HELPERS
# ============================================================================

def with_effective_price(queryset: QuerySet) -> QuerySet:
    return queryset.annotate(
        effective_price_value=Coalesce(
            "sale_price",
            "price",
            output_field=DecimalField(max_digits=12, decimal_places=2),
        )
    )


def generate_slug(name: str, exclude_pk: int | None = None) -> str:
    """Slug from the name, suffixed ``-1``, ``-2`` ... until it is unique."""
    base = slugify(name) or "product"
    slug = base
    counter = 1
    existing = Product.objects.all()
    if exclude_pk is not None:
        existing = existing.exclude(pk=exclude_pk)
    while existing.filter(slug=slug).exists():
        slug = f"{base}-{counter}"
        counter += 1
    return slug


def determine_status_from_stock(quantity: int, current_status: str | None = None) -> str:
    if quantity <= 0:
        return Product.Status.OUT_OF_STOCK
    if current_status == Product.Status.OUT_OF_STOCK:
        return Product.Status.ACTIVE
    return current_status or Product.Status.ACTIVE


def _add_images(product: Product, images: Iterable[dict]) -> None:
    existing = ProductImage.objects.filter(product=product)
    start = existing.count()
    has_primary = existing.filter(is_primary=True).exists()
    for offset, image in enumerate(images):
        ProductImage.objects.create(
            product=product,
            url=image["url"],
            public_id=image.get("public_id", ""),
            alt=image.get("alt", "") or product.name,
            sort_order=start + offset,
            is_primary=not has_primary and offset == 0,
        )


def _apply_stock_status(product: Product, quantity: int) -> None:
    if product.is_archived:
        return
    new_status = determine_status_from_stock(quantity, product.status)
    if new_status != product.status:
        product.status = new_status
        product.save(update_fields=["status", "updated_at"])


# ============================================================================
# ADMIN PRODUCT LIFECYCLE
# ============================================================================

@transaction.atomic
def create_product(data: dict[str, Any], images: Iterable[dict] = ()) -> Product:
    data = dict(data)
    quantity = data.pop("stock", 0) or 0
    low_stock_at = data.pop("low_stock_at", None)
    slug = data.pop("slug", None) or generate_slug(data["name"])
    status = determine_status_from_stock(quantity, data.pop("status", None))

    product = Product.objects.create(slug=slug, status=status, **data)
    Inventory.objects.create(
        product=product,
        quantity=quantity,
        low_stock_at=low_stock_at if low_stock_at is not None else 10,
    )
    _add_images(product, images)
    logger.info(f"Product created: {product.slug} (stock {quantity})")
    return product


def update_product(
    product: Product,
    data: dict[str, Any],
    *,
    keep_image_public_ids: list[str] | None = None,
    new_images: Iterable[dict] = (),
) -> Product:
    """Apply field changes, stock automation and image sync.

    Images whose ``public_id`` is not in ``keep_image_public_ids`` are removed
    from storage first and then from the database. Passing ``None`` leaves the
    existing images alone.
    """
    data = dict(data)
    quantity = data.pop("stock", None)
    low_stock_at = data.pop("low_stock_at", None)

    if keep_image_public_ids is not None:
        removed = list(ProductImage.objects.filter(product=product).exclude(public_id__in=keep_image_public_ids))
        if removed:
            get_image_storage().delete_many(img.public_id for img in removed)
            ProductImage.objects.filter(pk__in=[img.pk for img in removed]).delete()

    with transaction.atomic():
        if "slug" in data and not data["slug"]:
            data.pop("slug")
        requested_status = data.pop("status", None)
        for field, value in data.items():
            setattr(product, field, value)

        if quantity is not None:
            product.status = determine_status_from_stock(quantity, requested_status or product.status)
        elif requested_status:
            product.status = requested_status
        product.save()

        if quantity is not None or low_stock_at is not None:
            try:
                inventory = product.inventory
            except Inventory.DoesNotExist:
                inventory = Inventory(product=product)
            if quantity is not None:
                inventory.quantity = quantity
            if low_stock_at is not None:
                inventory.low_stock_at = low_stock_at
            inventory.save()

        _add_images(product, new_images)

    return product


def deactivate_product(product: Product) -> Product:
    product.is_active = False
    product.save(update_fields=["is_active", "updated_at"])
    return product


def toggle_product_active(product: Product) -> Product:
    product.is_active = not product.is_active
    product.save(update_fields=["is_active", "updated_at"])
    return product


def archive_product(product: Product) -> Product:
    product.is_archived = True
    product.is_active = False
    product.status = Product.Status.ARCHIVED
    product.save(update_fields=["is_archived", "is_active", "status", "updated_at"])
    return product


def unarchive_product(product: Product) -> Product:
    product.is_archived = False
    product.is_active = True
    product.status = determine_status_from_stock(product.stock_quantity)
    product.save(update_fields=["is_archived", "is_active", "status", "updated_at"])
    return product


def order_item_count(product: Product) -> int:
    from apps.orders.models import OrderItem

    return OrderItem.objects.filter(product=product).count()


def delete_product(product: Product) -> None:
    """Hard delete; refused while any order item references the product."""
    order_count = order_item_count(product)
    if order_count:
        raise ProductDeleteBlockedError(order_count)

    public_ids = list(product.images.values_list("public_id", flat=True))
    if public_ids:
        get_image_storage().delete_many(public_ids)
    slug = product.slug
    product.delete()
    logger.info(f"Product deleted: {slug}")


def bulk_archive_products(ids: list[int]) -> int:
    return Product.objects.filter(pk__in=ids).update(
        is_archived=True,
        is_active=False,
        status=Product.Status.ARCHIVED,
        updated_at=timezone.now(),
    )


def bulk_delete_products(ids: list[int]) -> dict[str, list]:
    deleted: list[int] = []
    failed: list[dict] = []
    products = {p.pk: p for p in Product.objects.filter(pk__in=ids)}
    for pk in ids:
        product = products.get(pk)
        if product is None:
            failed.append({"id": pk, "reason": "Product not found"})
            continue
        try:
            delete_product(product)
        except ProductDeleteBlockedError as exc:
            failed.append({"id": pk, "reason": str(exc)})
            continue
        deleted.append(pk)
    return {"deleted": deleted, "failed": failed}


def product_categories(*, storefront: bool = False) -> list[str]:
    queryset = Product.objects.exclude(category="")
    if storefront:
        queryset = queryset.filter(is_active=True, is_archived=False)
    return list(queryset.order_by("category").values_list("category", flat=True).distinct())


def low_stock_products(limit: int | None = 10) -> QuerySet:
    queryset = (
        Product.objects.filter(is_active=True, inventory__quantity__lte=F("inventory__low_stock_at"))
        .select_related("inventory")
        .prefetch_related("images")
        .order_by("inventory__quantity", "name")
    )
    return queryset[:limit] if limit else queryset


# ============================================================================
# STOCK
# ============================================================================

@transaction.atomic
def update_stock(product: Product, quantity: int, operation: str = "set") -> Inventory:
    inventory, _created = Inventory.objects.select_for_update().get_or_create(product=product)
    if operation == "set":
        inventory.quantity = quantity
    elif operation == "increment":
        inventory.quantity += quantity
    elif operation == "decrement":
        inventory.quantity = max(inventory.quantity - quantity, 0)
    else:
        raise DomainError(f"Unknown stock operation: {operation}")
    inventory.save(update_fields=["quantity", "updated_at"])
    _apply_stock_status(product, inventory.quantity)
    return inventory


def rebalance_stock(items: list[dict]) -> dict[str, Any]:
    """Set stock for several products; per-item failures are collected, not raised."""
    errors: list[str] = []
    updated_count = 0
    for item in items:
        product_id = item["product_id"]
        try:
            product = Product.objects.get(pk=product_id)
            update_stock(product, item["quantity"], "set")
            updated_count += 1
        except Product.DoesNotExist:
            errors.append(f"Product {product_id}: not found")
        except Exception as e:
            logger.error(f"Rebalance failed for product {product_id}: {e}", exc_info=True)
            errors.append(f"Product {product_id}: {e}")
    return {"success": not errors, "updated_count": updated_count, "errors": errors}


def stock_details(product: Product) -> dict[str, int]:
    """Warehouse quantity plus units held by open orders and units delivered."""
    from apps.orders.models import OrderItem

    items = OrderItem.objects.filter(product=product)
    reserved = items.filter(order__status__in=RESERVED_ORDER_STATUSES).aggregate(total=Sum("quantity"))["total"]
    sold = items.filter(order__status="DELIVERED").aggregate(total=Sum("quantity"))["total"]
    return {
        "available": product.stock_quantity,
        "reserved": reserved or 0,
        "sold": sold or 0,
    }


# ============================================================================
# BADGES
# ============================================================================

def badges_with_usage() -> QuerySet:
    return Badge.objects.annotate(usage_count=Count("products"))


@transaction.atomic
def delete_badge(badge: Badge) -> None:
    Product.objects.filter(badge=badge).update(badge=None)
    badge.delete()


# ============================================================================
# STOREFRONT
# ============================================================================

def storefront_products() -> QuerySet:
    return with_effective_price(
        Product.objects.filter(is_active=True, is_archived=False)
        .select_related("badge", "inventory")
        .prefetch_related("images")
    )


def related_products(product: Product, limit: int = 4) -> QuerySet:
    if not product.category:
        return Product.objects.none()
    return (
        storefront_products()
        .filter(category__iexact=product.category)
        .exclude(pk=product.pk)
        .order_by("-created_at")[:limit]
    )


def latest_products(limit: int = 4) -> QuerySet:
    return storefront_products().order_by("-created_at")[:limit]


def price_range() -> dict[str, Decimal]:
    result = storefront_products().aggregate(
        min=Min("effective_price_value"),
        max=Max("effective_price_value"),
    )
    return {
        "min": result["min"] if result["min"] is not None else Decimal("0"),
        "max": result["max"] if result["max"] is not None else DEFAULT_MAX_PRICE,
    }


def _recent_sales(days: int):  # type: ignore
    from apps.orders.models import OrderItem

    since = timezone.now() - timedelta(days=days)
    return OrderItem.objects.filter(order__created_at__gte=since).exclude(order__status="CANCELLED")


def top_sellers(days: int = 7, limit: int = 4) -> list[Product]:
    """Best selling storefront products by units sold in the window."""
    grouped = (
        _recent_sales(days)
        .filter(product__is_active=True, product__is_archived=False)
        .values("product_id")
        .annotate(sold=Sum("quantity"))
        .order_by("-sold", "product_id")[:limit]
    )
    sold_by_id = {row["product_id"]: row["sold"] for row in grouped}
    products = {p.pk: p for p in storefront_products().filter(pk__in=sold_by_id)}
    result = []
    for product_id, sold in sold_by_id.items():
        product = products.get(product_id)
        if product is not None:
            product.sold = sold
            result.append(product)
    return result


def top_categories(days: int = 7, limit: int = 5) -> list[str]:
    rows = (
        _recent_sales(days)
        .values("product__category")
        .annotate(units=Sum("quantity"))
        .order_by("-units", "product__category")
    )
    counts: dict[str, int] = {}
    for row in rows:
        category = row["product__category"] or "Uncategorized"
        counts[category] = counts.get(category, 0) + (row["units"] or 0)
    ranked = sorted(counts.items(), key=lambda pair: (-pair[1], pair[0]))
    return [category for category, _units in ranked[:limit]]


def top_tags(limit: int = 3) -> list[dict]:
    live = Q(products__is_active=True, products__is_archived=False)
    badges = (
        Badge.objects.filter(is_active=True)
        .annotate(usage_count=Count("products", filter=live))
        .filter(usage_count__gt=0)
        .order_by("-usage_count", "sort_order")[:limit]
    )
    return [
        {"id": badge.pk, "name": badge.name, "color": badge.color, "usage_count": badge.usage_count}
        for badge in badges
    ]
