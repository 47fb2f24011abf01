"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore

from apps.notifications.models import NotificationSettings
from apps.notifications.whatsapp import generate_booking_reminder, send_whatsapp_message

from .services import bookings_due_for_reminder, mark_reminder_sent

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="bookings.send_booking_reminders")
def send_booking_reminders() -> dict[str, int]:
    """
    Send WhatsApp reminders for tomorrow's confirmed bookings.

    Runs only when the ``booking_reminder_sms`` toggle is on and the Cloud
    API token is configured; staff can still send reminders by link from
    the dashboard otherwise.

    Returns:
        dict: {"due": bookings found, "sent": reminders delivered}
    """
    if not NotificationSettings.load().booking_reminder_sms:
        logger.info("Booking reminders disabled, skipping")
        return {"due": 0, "sent": 0}
    if not settings.WHATSAPP_TOKEN:
        logger.info("WhatsApp Cloud API not configured, skipping booking reminders")
        return {"due": 0, "sent": 0}

    due = list(bookings_due_for_reminder())
    sent = 0
    for booking in due:
        if send_whatsapp_message(booking.customer_phone, generate_booking_reminder(booking)) is None:
            logger.warning(f"Reminder for booking {booking.booking_number} was not delivered")
            continue
        mark_reminder_sent(booking)
        sent += 1

    logger.info(f"Booking reminders: {sent}/{len(due)} sent")
    return {"due": len(due), "sent": sent}
