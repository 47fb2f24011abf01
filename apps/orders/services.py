"""Order workflows: storefront checkout, dashboard edits, stale-order sweep."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Iterable

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Count, Q, Sum  # type: ignore
from django.utils import timezone  # type: ignore

from apps.catalog.models import Inventory, Product
from apps.catalog.services import InsufficientStockError, determine_status_from_stock
from apps.core.exceptions import DomainError
from apps.customers.services import find_or_create_customer
from apps.notifications import services as email
from apps.notifications import whatsapp

from .models import Order, OrderItem

logger = logging.getLogger(__name__)

REVENUE_STATUSES = (Order.Status.SHIPPED, Order.Status.DELIVERED)


class ProductUnavailableError(DomainError):
    pass


@dataclass
class CheckoutResult:
    order: Order | None
    booking: Any = None
    total: Decimal = Decimal("0")
    whatsapp_url: str = ""


# ============================================================================
# STOCK
# ============================================================================

def _resolve_product(key: Any) -> Product:
    """Cart lines may reference a product by id or by slug."""
    queryset = Product.objects.filter(is_active=True, is_archived=False)
    product = queryset.filter(pk=int(key)).first() if str(key).isdigit() else None
    if product is None:
        product = queryset.filter(slug=str(key)).first()
    if product is None:
        raise ProductUnavailableError(f'Product "{key}" is not available')
    return product


def _reserve_stock(lines: Iterable[dict]) -> list[tuple[Product, int]]:
    """Lock inventory rows, check availability and decrement.

    Must run inside a transaction. Raises ``InsufficientStockError`` before
    touching any row when one line cannot be fulfilled.
    """
    resolved: list[tuple[Product, int]] = []
    for line in lines:
        product = _resolve_product(line["product"])
        resolved.append((product, line["quantity"]))

    inventories = {
        inv.product_id: inv
        for inv in Inventory.objects.select_for_update().filter(
            product_id__in=[product.pk for product, _qty in resolved]
        )
    }

    requested: dict[int, int] = {}
    for product, quantity in resolved:
        requested[product.pk] = requested.get(product.pk, 0) + quantity
    for product, _qty in resolved:
        inventory = inventories.get(product.pk)
        available = inventory.quantity if inventory is not None else 0
        if available < requested[product.pk]:
            raise InsufficientStockError(product.name, max(available, 0))

    for product, quantity in resolved:
        inventory = inventories[product.pk]
        inventory.quantity -= quantity
        inventory.save(update_fields=["quantity", "updated_at"])

    for product_id, inventory in inventories.items():
        if inventory.quantity <= 0:
            Product.objects.filter(pk=product_id).update(
                status=Product.Status.OUT_OF_STOCK,
                updated_at=timezone.now(),
            )
    return resolved


def _restore_stock(order: Order) -> None:
    for item in order.items.select_related("product"):
        inventory, _created = Inventory.objects.select_for_update().get_or_create(product=item.product)
        inventory.quantity += item.quantity
        inventory.save(update_fields=["quantity", "updated_at"])
        product = item.product
        if not product.is_archived:
            new_status = determine_status_from_stock(inventory.quantity, product.status)
            if new_status != product.status:
                product.status = new_status
                product.save(update_fields=["status", "updated_at"])


def _create_order(customer, data: dict, lines: list[tuple[Product, int, Decimal]]) -> Order:  # type: ignore
    subtotal = sum((price * quantity for _product, quantity, price in lines), Decimal("0"))
    order = Order.objects.create(
        customer=customer,
        customer_name=data["name"],
        customer_phone=data["phone"],
        customer_email=data.get("email") or "",
        address=data.get("address") or "",
        notes=data.get("notes") or "",
        subtotal=subtotal,
        total=subtotal,
    )
    OrderItem.objects.bulk_create(
        [
            OrderItem(order=order, product=product, name=product.name, price=price, quantity=quantity)
            for product, quantity, price in lines
        ]
    )
    return order


def _notify_new_order(order: Order) -> None:
    email.send_admin_new_order_email(order)
    email.send_order_confirmation_email(order)


# ============================================================================
# PUBLIC CHECKOUT
# ============================================================================

def place_order(data: dict[str, Any]) -> CheckoutResult:
    """Storefront checkout.

    ``data`` carries ``name``, ``phone``, ``address``, optional ``email`` and
    ``notes``, and ``items`` as ``[{"product": id_or_slug, "quantity": n}]``.
    Prices always come from the catalog, never from the client.
    """
    with transaction.atomic():
        customer = find_or_create_customer(
            data["phone"],
            name=data["name"],
            email=data.get("email"),
            address=data.get("address"),
        )
        reserved = _reserve_stock(data["items"])
        order = _create_order(
            customer,
            data,
            [(product, quantity, product.effective_price) for product, quantity in reserved],
        )

    logger.info(f"Order {order.order_number} placed by {order.customer_phone} ({order.total})")
    _notify_new_order(order)
    url = whatsapp.business_whatsapp_url(whatsapp.generate_new_order_message(order))
    return CheckoutResult(order=order, total=order.total, whatsapp_url=url)


def place_unified_order(data: dict[str, Any]) -> CheckoutResult:
    """Cart products and workshop services in one step.

    Creates the order when the cart has items and a PENDING booking linked to
    it when services were selected.
    """
    from apps.bookings.models import Booking
    from apps.bookings.slots import ensure_slot_available
    from apps.services.models import Service

    cart = data.get("cart_items") or []
    service_ids = data.get("services") or []
    if not cart and not service_ids:
        raise DomainError("Cart and services are empty.")

    services = list(Service.objects.filter(pk__in=service_ids, is_active=True))
    if service_ids and not services:
        raise DomainError("Selected services are not available.")
    services.sort(key=lambda s: service_ids.index(s.pk))

    booking_date = data.get("booking_date") or timezone.localdate()
    time_slot = data.get("time_slot") or ""

    with transaction.atomic():
        customer = find_or_create_customer(
            data["phone"],
            name=data["name"],
            email=data.get("email"),
            address=data.get("address"),
        )

        order = None
        if cart:
            reserved = _reserve_stock(cart)
            order = _create_order(
                customer,
                data,
                [(product, quantity, product.effective_price) for product, quantity in reserved],
            )

        booking = None
        if services:
            if time_slot:
                ensure_slot_available(booking_date, time_slot)
            booking = Booking.objects.create(
                customer=customer,
                customer_name=data["name"],
                customer_phone=data["phone"],
                customer_email=data.get("email") or "",
                service_type=", ".join(s.title for s in services),
                vehicle_info=data.get("vehicle_info") or "",
                date=booking_date,
                time_slot=time_slot,
                address=data.get("address") or "Workshop",
                notes=data.get("notes") or "",
                order=order,
            )

    services_total = sum((s.price for s in services), Decimal("0"))
    total = (order.total if order else Decimal("0")) + services_total

    if order is not None:
        _notify_new_order(order)
    if booking is not None:
        email.send_new_booking_email(booking)

    reference = order.order_number if order else booking.booking_number
    items = [(item.name, item.quantity, item.price) for item in order.items.all()] if order else []
    message = whatsapp.generate_unified_checkout_message(
        reference=reference,
        customer_name=data["name"],
        items=items,
        services_label=booking.service_type if booking else "",
        total=total,
    )
    logger.info(f"Unified checkout {reference} for {data['phone']} ({total})")
    return CheckoutResult(
        order=order,
        booking=booking,
        total=total,
        whatsapp_url=whatsapp.business_whatsapp_url(message),
    )


# ============================================================================
# DASHBOARD
# ============================================================================

@transaction.atomic
def create_order(data: dict[str, Any]) -> Order:
    """Order entered by staff (phone orders). Stock is left untouched."""
    customer = find_or_create_customer(
        data["phone"],
        name=data["name"],
        email=data.get("email"),
        address=data.get("address"),
    )
    lines = []
    for line in data["items"]:
        product = Product.objects.filter(pk=line["product_id"]).first()
        if product is None:
            raise ProductUnavailableError(f"Product {line['product_id']} not found")
        price = line.get("price")
        lines.append((product, line["quantity"], price if price is not None else product.effective_price))
    order = _create_order(customer, data, lines)
    logger.info(f"Order {order.order_number} created from dashboard")
    return order


def update_order_status(order: Order, status: str, notes: str | None = None) -> Order:
    """Change status; cancelling puts the items back in stock exactly once."""
    with transaction.atomic():
        order = Order.objects.select_for_update().get(pk=order.pk)
        previous = order.status
        order.status = status
        update_fields = ["status", "updated_at"]
        if notes is not None:
            order.notes = notes
            update_fields.append("notes")
        if status == Order.Status.CANCELLED and not order.stock_restored:
            _restore_stock(order)
            order.stock_restored = True
            update_fields.append("stock_restored")
        order.save(update_fields=update_fields)

    if previous != status:
        logger.info(f"Order {order.order_number}: {previous} -> {status}")
        email.send_order_status_email(order)
    return order


def update_order(order: Order, data: dict[str, Any]) -> Order:
    for field, value in data.items():
        setattr(order, field, value)
    order.save()
    return order


def order_stats() -> dict[str, Any]:
    by_status = {
        row["status"]: row["count"]
        for row in Order.objects.values("status").annotate(count=Count("id")).order_by()
    }
    revenue = Order.objects.filter(status__in=REVENUE_STATUSES).aggregate(amount=Sum("total"))["amount"]
    return {
        "total": sum(by_status.values()),
        "new": by_status.get(Order.Status.NEW, 0),
        "revenue": revenue or Decimal("0"),
        "by_status": {choice: by_status.get(choice, 0) for choice in Order.Status.values},
    }


def recent_orders(limit: int = 5):  # type: ignore
    return Order.objects.prefetch_related("items").order_by("-created_at")[:limit]


def orders_between(date_from: date | None, date_to: date | None):  # type: ignore
    queryset = Order.objects.all()
    if date_from:
        queryset = queryset.filter(created_at__date__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__date__lte=date_to)
    return queryset


# ============================================================================
# STALE ORDER SWEEP
# ============================================================================

def mark_stale_orders() -> list[Order]:
    """Flag NEW orders older than ``STALE_ORDER_HOURS`` as STALE.

    Only rows that are still NEW at update time are touched, so overlapping
    runs converge on the same result.
    """
    cutoff = timezone.now() - timedelta(hours=settings.STALE_ORDER_HOURS)
    stale = list(
        Order.objects.filter(status=Order.Status.NEW, created_at__lt=cutoff).order_by("created_at")
    )
    if not stale:
        return []

    Order.objects.filter(pk__in=[o.pk for o in stale], status=Order.Status.NEW).update(
        status=Order.Status.STALE,
        updated_at=timezone.now(),
    )
    for order in stale:
        order.status = Order.Status.STALE
    return stale


def check_stale_orders() -> dict[str, Any]:
    stale = mark_stale_orders()
    if not stale:
        return {"success": True, "message": "No stale orders found.", "stale_count": 0}

    email.send_stale_orders_email(stale)
    logger.info(f"Marked {len(stale)} orders as stale and notified admin")
    return {
        "success": True,
        "message": f"{len(stale)} orders marked as stale.",
        "stale_count": len(stale),
        "order_numbers": [o.order_number for o in stale],
    }


def search_orders(queryset, term: str):  # type: ignore
    return queryset.filter(
        Q(order_number__icontains=term)
        | Q(customer_name__icontains=term)
        | Q(customer_phone__icontains=term)
        | Q(customer_email__icontains=term)
    )
