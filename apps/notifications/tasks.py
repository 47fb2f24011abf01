"""Celery tasks for scheduled notifications."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore

from .models import NotificationSettings
from .services import send_daily_summary_email, send_low_stock_email
from .whatsapp import generate_daily_summary, generate_low_stock_alert, send_whatsapp_message

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="notifications.send_low_stock_alert")
def send_low_stock_alert() -> dict[str, int]:
    """
    Email (and, when the Cloud API is configured, WhatsApp) the owner a list
    of products at or below their low-stock threshold.

    Returns:
        dict: {"products": number of low-stock products, "sent": 0 or 1}
    """
    if not NotificationSettings.load().low_stock_email:
        logger.info("Low stock alert disabled, skipping")
        return {"products": 0, "sent": 0}

    from apps.analytics.services import low_stock_report

    products = low_stock_report()
    if not products:
        return {"products": 0, "sent": 0}

    sent = send_low_stock_email(products)
    send_whatsapp_message(settings.WHATSAPP_BUSINESS_PHONE, generate_low_stock_alert(products))
    logger.info(f"Low stock alert for {len(products)} products (email sent: {sent})")
    return {"products": len(products), "sent": int(sent)}


@shared_task(name="notifications.send_daily_summary")
def send_daily_summary() -> dict:
    """Send the end-of-day numbers to the owner."""
    from apps.analytics.services import daily_summary_stats

    stats = daily_summary_stats()
    sent = send_daily_summary_email(stats)
    send_whatsapp_message(settings.WHATSAPP_BUSINESS_PHONE, generate_daily_summary(stats))
    logger.info(f"Daily summary sent: {sent}")
    return {**stats, "orders_total": str(stats["orders_total"]), "sent": int(sent)}
