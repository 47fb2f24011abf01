"""Read-only aggregates for the admin dashboard, digests and exports."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from django.db.models import Count, F, Q, Sum  # type: ignore
from django.db.models.functions import TruncDate  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from apps.catalog.models import Product
from apps.catalog.services import low_stock_products
from apps.customers.models import Customer
from apps.leads.models import Lead
from apps.orders.models import Order, OrderItem

REVENUE_STATUSES = (Order.Status.CONFIRMED, Order.Status.SHIPPED, Order.Status.DELIVERED)
PENDING_ORDER_STATUSES = (Order.Status.NEW, Order.Status.PROCESSING)
ACTIVE_BOOKING_STATUSES = (Booking.Status.PENDING, Booking.Status.CONFIRMED, Booking.Status.IN_PROGRESS)


def default_range(days: int = 30) -> tuple[date, date]:
    end = timezone.localdate()
    return end - timedelta(days=days - 1), end


def _orders_in(start: date, end: date):  # type: ignore
    return Order.objects.filter(created_at__date__gte=start, created_at__date__lte=end)


# ============================================================================
# DASHBOARD
# ============================================================================

def dashboard_stats() -> dict[str, Any]:
    today = timezone.localdate()
    products = Product.objects.filter(is_archived=False).aggregate(
        total=Count("id"),
        active=Count("id", filter=Q(is_active=True)),
        low_stock=Count(
            "id",
            filter=Q(inventory__quantity__gt=0, inventory__quantity__lte=F("inventory__low_stock_at")),
        ),
        out_of_stock=Count("id", filter=Q(inventory__quantity__lte=0)),
    )
    # "total" is an Order field, so the count needs another alias
    order_counts = Order.objects.aggregate(
        order_count=Count("id"),
        new=Count("id", filter=Q(status=Order.Status.NEW)),
        revenue=Sum("total", filter=Q(status__in=REVENUE_STATUSES)),
    )
    orders = {
        "total": order_counts["order_count"],
        "new": order_counts["new"],
        "revenue": order_counts["revenue"] or Decimal("0"),
    }
    bookings = Booking.objects.aggregate(
        total=Count("id"),
        pending=Count("id", filter=Q(status=Booking.Status.PENDING)),
        today=Count("id", filter=Q(date=today)),
    )
    leads = Lead.objects.aggregate(total=Count("id"), new=Count("id", filter=Q(status=Lead.Status.NEW)))
    customers = Customer.objects.aggregate(total=Count("id"), vip=Count("id", filter=Q(is_vip=True)))
    return {
        "products": products,
        "orders": orders,
        "bookings": bookings,
        "leads": leads,
        "customers": customers,
    }


def recent_activity(limit: int = 10) -> list[dict[str, Any]]:
    """Latest orders, bookings and leads merged newest first."""
    items: list[dict[str, Any]] = []
    for order in Order.objects.order_by("-created_at")[:limit]:
        items.append(
            {
                "type": "order",
                "id": order.pk,
                "title": f"New order {order.order_number}",
                "description": f"{order.customer_name} - {order.total}",
                "status": order.status,
                "created_at": order.created_at,
            }
        )
    for booking in Booking.objects.order_by("-created_at")[:limit]:
        items.append(
            {
                "type": "booking",
                "id": booking.pk,
                "title": f"Booking {booking.booking_number}",
                "description": f"{booking.customer_name} - {booking.service_type}",
                "status": booking.status,
                "created_at": booking.created_at,
            }
        )
    for lead in Lead.objects.order_by("-created_at")[:limit]:
        items.append(
            {
                "type": "lead",
                "id": lead.pk,
                "title": f"New lead from {lead.name}",
                "description": lead.subject or lead.message[:80],
                "status": lead.status,
                "created_at": lead.created_at,
            }
        )
    items.sort(key=lambda item: item["created_at"], reverse=True)
    return items[:limit]


def revenue_over_time(start: date, end: date) -> list[dict[str, Any]]:
    """Per-day revenue and order count, one row for every day in the range."""
    rows = (
        _orders_in(start, end)
        .filter(status__in=REVENUE_STATUSES)
        .annotate(day=TruncDate("created_at"))
        .values("day")
        .annotate(revenue=Sum("total"), orders=Count("id"))
        .order_by("day")
    )
    by_day = {row["day"]: row for row in rows}
    series = []
    day = start
    while day <= end:
        row = by_day.get(day)
        series.append(
            {
                "date": day.isoformat(),
                "revenue": row["revenue"] if row else Decimal("0"),
                "orders": row["orders"] if row else 0,
            }
        )
        day += timedelta(days=1)
    return series


def top_selling_products(start: date | None = None, end: date | None = None, limit: int = 5) -> list[dict]:
    items = OrderItem.objects.exclude(order__status=Order.Status.CANCELLED)
    if start:
        items = items.filter(order__created_at__date__gte=start)
    if end:
        items = items.filter(order__created_at__date__lte=end)
    rows = (
        items.values("product_id", "product__name")
        .annotate(units_sold=Sum("quantity"), revenue=Sum(F("price") * F("quantity")))
        .order_by("-units_sold", "product__name")[:limit]
    )
    return [
        {
            "product_id": row["product_id"],
            "name": row["product__name"],
            "quantity": row["units_sold"],
            "revenue": row["revenue"] or Decimal("0"),
        }
        for row in rows
    ]


def booking_distribution() -> list[dict[str, Any]]:
    counts = {
        row["status"]: row["count"]
        for row in Booking.objects.values("status").annotate(count=Count("id")).order_by()
    }
    return [{"status": status, "count": counts.get(status, 0)} for status in Booking.Status.values]


def summary() -> dict[str, Any]:
    revenue = Order.objects.filter(status__in=REVENUE_STATUSES).aggregate(amount=Sum("total"))["amount"]
    return {
        "revenue": revenue or Decimal("0"),
        "pending_orders": Order.objects.filter(status__in=PENDING_ORDER_STATUSES).count(),
        "active_bookings": Booking.objects.filter(status__in=ACTIVE_BOOKING_STATUSES).count(),
        "low_stock": low_stock_products(limit=None).count(),
    }


# ============================================================================
# DIGESTS
# ============================================================================

def low_stock_report() -> list[dict[str, Any]]:
    return [
        {"name": p.name, "sku": p.sku or "", "stock": p.inventory.quantity}
        for p in low_stock_products(limit=None)
    ]


def daily_summary_stats(day: date | None = None) -> dict[str, Any]:
    day = day or timezone.localdate()
    orders = Order.objects.filter(created_at__date=day).exclude(status=Order.Status.CANCELLED)
    return {
        "new_orders": orders.count(),
        "orders_total": orders.aggregate(amount=Sum("total"))["amount"] or Decimal("0"),
        "new_bookings": Booking.objects.filter(created_at__date=day).count(),
        "new_leads": Lead.objects.filter(created_at__date=day).count(),
    }


def report_orders(start: date, end: date, limit: int = 1000):  # type: ignore
    return _orders_in(start, end).select_related("customer").order_by("-created_at")[:limit]
