"""Customer services: upsert by phone, VIP flag, stats and history."""

from __future__ import annotations

import logging
from datetime import timedelta

from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore

from apps.core.validators import normalize_phone

from .models import Customer

logger = logging.getLogger(__name__)


def find_or_create_customer(
    phone: str,
    *,
    name: str,
    email: str | None = None,
    address: str | None = None,
    notes: str | None = None,
) -> Customer:
    """Upsert keyed on phone.

    Existing customers get their name refreshed; email and address are only
    overwritten with non-empty values.
    """
    phone = normalize_phone(phone)
    customer = Customer.objects.filter(phone=phone).first()
    if customer is None:
        customer = Customer.objects.create(
            phone=phone,
            name=name,
            email=email or "",
            address=address or "",
            notes=notes or "",
        )
        logger.info(f"Customer created for {phone}")
        return customer

    customer.name = name
    if email:
        customer.email = email
    if address:
        customer.address = address
    customer.save(update_fields=["name", "email", "address", "updated_at"])
    return customer


def lookup_customer(identifier: str) -> Customer | None:
    """Find a customer by id, email or phone."""
    identifier = (identifier or "").strip()
    if not identifier:
        return None
    condition = Q(email__iexact=identifier) | Q(phone=identifier)
    if identifier.isdigit():
        condition |= Q(pk=int(identifier))
    return Customer.objects.filter(condition).order_by("-created_at").first()


def toggle_vip(customer: Customer) -> Customer:
    customer.is_vip = not customer.is_vip
    customer.save(update_fields=["is_vip", "updated_at"])
    return customer


def customer_stats() -> dict[str, int]:
    since = timezone.now() - timedelta(days=30)
    return {
        "total": Customer.objects.count(),
        "vip": Customer.objects.filter(is_vip=True).count(),
        "recent": Customer.objects.filter(created_at__gte=since).count(),
    }


def customer_history(customer: Customer, limit: int = 10) -> dict:
    orders = list(customer.orders.order_by("-created_at")[:limit])
    bookings = list(customer.bookings.order_by("-created_at")[:limit])
    return {
        "orders": orders,
        "bookings": bookings,
        "total_orders": customer.orders.count(),
        "total_bookings": customer.bookings.count(),
    }
