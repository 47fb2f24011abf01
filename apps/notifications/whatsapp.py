"""WhatsApp messaging.

Most messages are handed to staff or customers as ``wa.me`` click-to-chat
links with the text pre-filled. When WHATSAPP_TOKEN is configured the
Cloud API can also deliver a message directly (used for booking
reminders).
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable
from urllib.parse import quote

import requests
from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import Booking
    from apps.leads.models import Lead
    from apps.orders.models import Order

logger = logging.getLogger(__name__)


ORDER_STATUS_MESSAGES = {
    "NEW": "Your order has been received and is being processed.",
    "CONTACTED": "Our team has reached out about your order.",
    "CONFIRMED": "Your order has been confirmed!",
    "PROCESSING": "Your order is being prepared.",
    "SHIPPED": "Your order has been shipped!",
    "DELIVERED": "Your order has been delivered. Thank you!",
    "CANCELLED": "Your order has been cancelled.",
}

BOOKING_STATUS_MESSAGES = {
    "PENDING": "Your booking is pending confirmation.",
    "CONFIRMED": "Your booking has been confirmed!",
    "IN_PROGRESS": "Your service is now in progress.",
    "COMPLETED": "Your service has been completed. Thank you!",
    "CANCELLED": "Your booking has been cancelled.",
    "NO_SHOW": "We missed you at your appointment.",
}


def business_name() -> str:
    return settings.BUSINESS_NAME


def format_price(amount) -> str:  # type: ignore
    """``PKR 12,500`` (decimals only when the amount has paisa)."""
    value = Decimal(amount or 0)
    if value == value.to_integral_value():
        return f"{settings.CURRENCY} {int(value):,}"
    return f"{settings.CURRENCY} {value:,.2f}"


def _format_date(value) -> str:  # type: ignore
    if hasattr(value, "hour"):
        value = timezone.localtime(value)
    return value.strftime("%d/%m/%Y")


def build_whatsapp_url(phone: str, message: str) -> str:
    """Click-to-chat link; the phone keeps digits only."""
    digits = re.sub(r"\D", "", phone or "")
    return f"https://wa.me/{digits}?text={quote(message, safe='')}"


def business_whatsapp_url(message: str) -> str:
    return build_whatsapp_url(settings.WHATSAPP_BUSINESS_PHONE, message)


# ============================================================================
# ORDERS
# ============================================================================

def generate_order_confirmation(order: "Order") -> str:
    items = "\n".join(
        f"- {item.name} x{item.quantity}: {format_price(item.price)}" for item in order.items.all()
    )
    lines = [
        "🛒 *Order Confirmation*",
        "",
        f"Order #: {order.order_number}",
        f"Date: {_format_date(order.created_at)}",
        "",
        "*Customer Details:*",
        f"Name: {order.customer_name}",
        f"Phone: {order.customer_phone}",
    ]
    if order.customer_email:
        lines.append(f"Email: {order.customer_email}")
    if order.address:
        lines.append(f"Address: {order.address}")
    lines += [
        "",
        "*Order Items:*",
        items,
        "",
        f"*Total: {format_price(order.total)}*",
        "",
        f"Thank you for your order from {business_name()}!",
        "We will contact you shortly to confirm delivery.",
    ]
    return "\n".join(lines)


def generate_order_status_update(order: "Order") -> str:
    body = ORDER_STATUS_MESSAGES.get(order.status, "Your order status has been updated.")
    return (
        "📦 *Order Update*\n\n"
        f"Order #: {order.order_number}\n"
        f"Status: *{order.status}*\n\n"
        f"{body}\n\n"
        f"- {business_name()}"
    )


def generate_new_order_message(order: "Order") -> str:
    """Message the customer sends to the business right after checkout."""
    items = "\n".join(
        f"• {item.name} x{item.quantity} - {format_price(item.line_total)}" for item in order.items.all()
    )
    return (
        f"🛒 *New Order from {business_name()}*\n\n"
        f"*Order #: {order.order_number}*\n\n"
        "*Customer Details:*\n"
        f"Name: {order.customer_name}\n"
        f"Phone: {order.customer_phone}\n"
        f"Address: {order.address}\n\n"
        "*Order Items:*\n"
        f"{items}\n\n"
        f"*Total: {format_price(order.total)}*\n\n"
        "Please confirm availability and delivery."
    )


def generate_unified_checkout_message(
    *,
    reference: str,
    customer_name: str,
    items: Iterable[tuple],
    services_label: str,
    total,  # type: ignore
) -> str:
    """Hand-off message for a combined cart + service checkout.

    ``items`` are ``(name, quantity, unit_price)`` tuples.
    """
    item_text = ", ".join(f"{qty}x {name} ({format_price(price)})" for name, qty, price in items)
    return (
        f"Hello {business_name()}! I would like to place an order/booking.\n\n"
        f"*Reference:* #{reference}\n"
        f"*Name:* {customer_name}\n"
        f"*Items:* {item_text or 'None'}\n"
        f"*Services Required:* {services_label or 'None'}\n\n"
        f"*Total:* {format_price(total)}\n\n"
        "Please confirm my request."
    )


def order_notification_url(order: "Order", kind: str = "confirmation") -> str:
    message = generate_order_confirmation(order) if kind == "confirmation" else generate_order_status_update(order)
    return build_whatsapp_url(order.customer_phone, message)


# ============================================================================
# BOOKINGS
# ============================================================================

def generate_booking_confirmation(booking: "Booking") -> str:
    lines = [
        "📅 *Booking Confirmation*",
        "",
        f"Booking #: {booking.booking_number}",
        f"Date: {_format_date(booking.date)}",
        f"Time: {booking.time_slot or 'TBD'}",
        "",
        "*Customer Details:*",
        f"Name: {booking.customer_name}",
        f"Phone: {booking.customer_phone}",
        "",
        "*Service Details:*",
        f"Service: {booking.service_type}",
    ]
    if booking.vehicle_info:
        lines.append(f"Vehicle: {booking.vehicle_info}")
    if booking.notes:
        lines.append(f"Notes: {booking.notes}")
    lines += [
        "",
        "Please arrive 10 minutes before your scheduled time.",
        "",
        f"- {business_name()}",
    ]
    return "\n".join(lines)


def generate_booking_reminder(booking: "Booking") -> str:
    return (
        "⏰ *Booking Reminder*\n\n"
        f"Hi {booking.customer_name}!\n\n"
        "This is a reminder for your upcoming appointment:\n\n"
        f"Booking #: {booking.booking_number}\n"
        f"Date: {_format_date(booking.date)}\n"
        f"Time: {booking.time_slot or 'TBD'}\n"
        f"Service: {booking.service_type}\n\n"
        "Please arrive 10 minutes early.\n"
        "If you need to reschedule, please contact us.\n\n"
        "See you soon!\n"
        f"- {business_name()}"
    )


def generate_booking_status_update(booking: "Booking") -> str:
    body = BOOKING_STATUS_MESSAGES.get(booking.status, "Your booking status has been updated.")
    return (
        "📋 *Booking Update*\n\n"
        f"Booking #: {booking.booking_number}\n"
        f"Status: *{booking.status}*\n\n"
        f"{body}\n\n"
        f"- {business_name()}"
    )


def booking_notification_url(booking: "Booking", kind: str = "confirmation") -> str:
    builders = {
        "confirmation": generate_booking_confirmation,
        "reminder": generate_booking_reminder,
        "status_update": generate_booking_status_update,
    }
    message = builders[kind](booking)
    return build_whatsapp_url(booking.customer_phone, message)


# ============================================================================
# LEADS
# ============================================================================

def generate_lead_acknowledgment(lead: "Lead") -> str:
    excerpt = lead.message[:100] + ("..." if len(lead.message) > 100 else "")
    return (
        "👋 *Thank You for Contacting Us!*\n\n"
        f"Hi {lead.name}!\n\n"
        "We have received your inquiry regarding:\n"
        f'"{excerpt}"\n\n'
        "Our team will get back to you within 24 hours.\n\n"
        "Best regards,\n"
        f"{business_name()}"
    )


def generate_lead_internal_notification(lead: "Lead") -> str:
    return (
        "🔔 *New Lead Received*\n\n"
        f"Name: {lead.name}\n"
        f"Phone: {lead.phone}\n"
        f"Email: {lead.email or 'Not provided'}\n"
        f"Source: {lead.source}\n\n"
        "Message:\n"
        f"{lead.message}\n\n"
        "---\n"
        "Reply to this lead promptly!"
    )


def lead_notification_url(lead: "Lead", kind: str = "customer_ack") -> str:
    if kind == "customer_ack":
        return build_whatsapp_url(lead.phone, generate_lead_acknowledgment(lead))
    return business_whatsapp_url(generate_lead_internal_notification(lead))


# ============================================================================
# ADMIN DIGESTS
# ============================================================================

def generate_low_stock_alert(products: Iterable[dict]) -> str:
    """``products`` items carry ``name``, ``stock`` and optional ``sku``."""
    rows = []
    for p in products:
        sku = f" ({p['sku']})" if p.get("sku") else ""
        rows.append(f"- {p['name']}{sku}: {p['stock']} left")
    product_list = "\n".join(rows)
    return (
        "⚠️ *Low Stock Alert*\n\n"
        "The following products are running low:\n\n"
        f"{product_list}\n\n"
        "Please restock soon!\n\n"
        f"- {business_name()} Inventory System"
    )


def generate_daily_summary(stats: dict) -> str:
    return (
        f"📊 *Daily Summary - {_format_date(timezone.localdate())}*\n\n"
        f"📦 New Orders: {stats['new_orders']}\n"
        f"💰 Orders Total: {format_price(stats['orders_total'])}\n"
        f"📅 New Bookings: {stats['new_bookings']}\n"
        f"📞 New Leads: {stats['new_leads']}\n\n"
        "Have a productive day!\n"
        f"- {business_name()} Dashboard"
    )


# ============================================================================
# CLOUD API
# ============================================================================

def send_whatsapp_message(phone_number: str, text: str, preview_url: bool = False) -> dict | None:
    """Deliver a text message through the WhatsApp Business Cloud API.

    Returns the API response body, or None when the API is not configured
    or the request failed.
    """
    if not settings.WHATSAPP_TOKEN or not settings.WHATSAPP_API_URL:
        logger.info("WhatsApp Cloud API not configured, skipping direct send")
        return None

    url = f"{settings.WHATSAPP_API_URL.rstrip('/')}/messages"
    headers = {
        "Authorization": f"Bearer {settings.WHATSAPP_TOKEN}",
        "Content-Type": "application/json",
    }
    payload = {
        "messaging_product": "whatsapp",
        "recipient_type": "individual",
        "to": re.sub(r"\D", "", phone_number),
        "type": "text",
        "text": {"preview_url": preview_url, "body": text},
    }
    try:
        response = requests.post(url, headers=headers, json=payload, timeout=10)
        response.raise_for_status()
        return response.json()
    except requests.RequestException as e:
        logger.error(f"Error sending WhatsApp message to {phone_number}: {e}", exc_info=True)
        return None
