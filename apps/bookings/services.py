"""Booking workflows shared by the public form and the dashboard."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Iterable

from django.db import transaction  # type: ignore
from django.db.models import Count  # type: ignore
from django.utils import timezone  # type: ignore

from apps.core.exceptions import DomainError
from apps.customers.services import find_or_create_customer
from apps.notifications.services import send_new_booking_email
from apps.services.services import service_titles

from .models import Booking, BookingActivityLog
from .slots import ensure_slot_available

logger = logging.getLogger(__name__)

UPCOMING_DAYS = 7
OPEN_STATUSES = (Booking.Status.PENDING, Booking.Status.CONFIRMED)


def log_activity(booking: Booking, activity: str) -> BookingActivityLog:
    return BookingActivityLog.objects.create(booking=booking, activity=activity)


def _customer_for(data: dict[str, Any]):  # type: ignore
    return find_or_create_customer(
        data["customer_phone"],
        name=data["customer_name"],
        email=data.get("customer_email"),
        address=data.get("address"),
    )


def create_public_booking(data: dict[str, Any], service_ids: Iterable[int]) -> Booking:
    """Booking from the public form; the chosen slot must still be free."""
    titles = service_titles(list(service_ids))
    if not titles:
        raise DomainError("Please select at least one available service.")

    with transaction.atomic():
        ensure_slot_available(data["date"], data["time_slot"])
        booking = Booking.objects.create(
            customer=_customer_for(data),
            service_type=", ".join(titles),
            **data,
        )
        log_activity(booking, "Booking requested from website")

    logger.info(f"Booking {booking.booking_number} requested for {booking.date} {booking.time_slot}")
    send_new_booking_email(booking)
    return booking


@transaction.atomic
def create_booking(data: dict[str, Any]) -> Booking:
    """Dashboard entry; slot rules are not enforced for staff."""
    booking = Booking.objects.create(customer=_customer_for(data), **data)
    log_activity(booking, "Booking created from dashboard")
    return booking


def update_booking(booking: Booking, data: dict[str, Any]) -> Booking:
    for field, value in data.items():
        setattr(booking, field, value)
    booking.save()
    return booking


def update_booking_status(booking: Booking, status: str, notes: str | None = None) -> Booking:
    booking.status = status
    update_fields = ["status", "updated_at"]
    if notes is not None:
        booking.notes = notes
        update_fields.append("notes")
    booking.save(update_fields=update_fields)
    log_activity(booking, f"Status changed to {status}")
    logger.info(f"Booking {booking.booking_number} status -> {status}")
    return booking


@transaction.atomic
def reschedule_booking(booking: Booking, new_date: date, time_slot: str) -> Booking:
    if booking.status == Booking.Status.CONFIRMED:
        ensure_slot_available(new_date, time_slot, exclude_booking_id=booking.pk)
    booking.date = new_date
    booking.time_slot = time_slot
    booking.save(update_fields=["date", "time_slot", "updated_at"])
    log_activity(booking, f"Rescheduled to {new_date:%d/%m/%Y} at {time_slot or 'TBD'}")
    return booking


def mark_reminder_sent(booking: Booking) -> Booking:
    booking.whatsapp_sent = True
    booking.save(update_fields=["whatsapp_sent", "updated_at"])
    log_activity(booking, "WhatsApp reminder sent")
    return booking


def booking_stats() -> dict[str, Any]:
    today = timezone.localdate()
    by_status = {
        row["status"]: row["count"]
        for row in Booking.objects.values("status").annotate(count=Count("id")).order_by()
    }
    return {
        "total": sum(by_status.values()),
        "by_status": {choice: by_status.get(choice, 0) for choice in Booking.Status.values},
        "today": Booking.objects.filter(date=today).count(),
        "upcoming": Booking.objects.filter(date__gt=today, status__in=OPEN_STATUSES).count(),
        "pending": by_status.get(Booking.Status.PENDING, 0),
    }


def upcoming_bookings(days: int = UPCOMING_DAYS):  # type: ignore
    today = timezone.localdate()
    return Booking.objects.filter(
        date__gte=today,
        date__lte=today + timedelta(days=days),
        status__in=OPEN_STATUSES,
    ).order_by("date", "time_slot")


def service_types() -> list[str]:
    """Distinct values of ``service_type`` as stored on bookings."""
    return list(
        Booking.objects.exclude(service_type="")
        .order_by("service_type")
        .values_list("service_type", flat=True)
        .distinct()
    )


def bookings_due_for_reminder():  # type: ignore
    tomorrow = timezone.localdate() + timedelta(days=1)
    return Booking.objects.filter(date=tomorrow, status=Booking.Status.CONFIRMED)
