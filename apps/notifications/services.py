"""Email notifications for staff and customers."""

from __future__ import annotations

import base64
import logging
from typing import TYPE_CHECKING, Iterable

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.template.loader import render_to_string  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.html import escape, strip_tags  # type: ignore

from .models import NotificationSettings
from .whatsapp import format_price

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import Booking
    from apps.leads.models import Lead
    from apps.orders.models import Order
    from apps.users.models import CustomUser

    from .models import NewsletterSubscriber

logger = logging.getLogger(__name__)


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(
    recipient_email: str,
    subject: str,
    template_name: str | None,
    context: dict,
    *,
    html_message: str | None = None,
) -> bool:
    """
    Send one email, logging instead of raising on failure.

    Args:
        recipient_email: Recipient address
        subject: Subject line
        template_name: Django template path (optional)
        context: Template context; ``message`` is used as the plain body
            when neither a template nor HTML is given
        html_message: Pre-rendered HTML body (optional)

    Returns:
        bool: True when the message was handed to the mail backend
    """
    if not recipient_email:
        logger.warning(f"Email '{subject}' skipped: no recipient")
        return False

    try:
        if html_message:
            text_message = strip_tags(html_message)
        elif template_name:
            html_message = render_to_string(template_name, context)
            text_message = strip_tags(html_message)
        else:
            text_message = context.get("message", "")
            html_message = None

        send_mail(
            subject=subject,
            message=text_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )

        logger.info(f"Email sent successfully to {recipient_email}: {subject}")
        return True

    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False


def _wrap(body: str) -> str:
    return f"""
    <html>
    <body style="font-family: Arial, sans-serif; color: #111827;">
        {body}
        <p style="color: #6b7280; font-size: 12px;">{escape(settings.BUSINESS_NAME)}</p>
    </body>
    </html>
    """


def _admin_url(path: str) -> str:
    return f"{settings.APP_URL}{path}"


# ============================================================================
# ORDERS
# ============================================================================

def send_admin_new_order_email(order: "Order") -> bool:
    """Alert the owner about a new storefront order."""
    if not NotificationSettings.load().new_order_email:
        return False

    rows = "".join(
        f"<tr><td>{escape(item.name)}</td><td>{item.quantity}</td>"
        f"<td>{format_price(item.line_total)}</td></tr>"
        for item in order.items.all()
    )
    html_message = _wrap(
        f"""
        <h2>New order {escape(order.order_number)}</h2>
        <p><strong>{escape(order.customer_name)}</strong> ({escape(order.customer_phone)})</p>
        <p>{escape(order.address or '')}</p>
        <table cellpadding="6">
            <tr><th align="left">Item</th><th>Qty</th><th>Amount</th></tr>
            {rows}
        </table>
        <p><strong>Total: {format_price(order.total)}</strong></p>
        <p><a href="{_admin_url(f'/admin/dashboard/orders/{order.pk}')}">Open in dashboard</a></p>
        """
    )
    return send_email_notification(
        recipient_email=settings.ADMIN_EMAIL,
        subject=f"New order {order.order_number} - {format_price(order.total)}",
        template_name=None,
        context={},
        html_message=html_message,
    )


def send_order_confirmation_email(order: "Order") -> bool:
    """Receipt for the customer when they left an email address."""
    if not order.customer_email:
        return False

    rows = "".join(
        f"<li>{escape(item.name)} x{item.quantity}: {format_price(item.line_total)}</li>"
        for item in order.items.all()
    )
    html_message = _wrap(
        f"""
        <h2>Thank you, {escape(order.customer_name)}!</h2>
        <p>We received your order <strong>{escape(order.order_number)}</strong>.</p>
        <ul>{rows}</ul>
        <p><strong>Total: {format_price(order.total)}</strong></p>
        <p>Our team will contact you on WhatsApp to confirm delivery.</p>
        """
    )
    return send_email_notification(
        recipient_email=order.customer_email,
        subject=f"Your {settings.BUSINESS_NAME} order {order.order_number}",
        template_name=None,
        context={},
        html_message=html_message,
    )


def send_order_status_email(order: "Order") -> bool:
    if not order.customer_email or not NotificationSettings.load().order_status_email:
        return False

    html_message = _wrap(
        f"""
        <h2>Order {escape(order.order_number)} update</h2>
        <p>Your order status is now <strong>{escape(order.get_status_display())}</strong>.</p>
        """
    )
    return send_email_notification(
        recipient_email=order.customer_email,
        subject=f"Order {order.order_number}: {order.get_status_display()}",
        template_name=None,
        context={},
        html_message=html_message,
    )


def send_stale_orders_email(orders: Iterable["Order"]) -> bool:
    """One summary email listing every order the sweep marked STALE."""
    orders = list(orders)
    if not orders or not NotificationSettings.load().stale_order_email:
        return False

    count = len(orders)
    hours = settings.STALE_ORDER_HOURS
    rows = "".join(
        f"<tr><td>{escape(o.order_number)}</td><td>{escape(o.customer_name)}</td>"
        f"<td>{escape(o.customer_phone)}</td><td>{format_price(o.total)}</td>"
        f"<td>{timezone.localtime(o.created_at):%d/%m/%Y %H:%M}</td></tr>"
        for o in orders
    )
    admin_url = _admin_url("/admin/dashboard/orders?status=STALE")
    html_message = _wrap(
        f"""
        <h2>{count} order{'s' if count > 1 else ''} waiting for more than {hours} hour{'s' if hours != 1 else ''}</h2>
        <p>These orders were never contacted and have been marked as <strong>STALE</strong>.</p>
        <table cellpadding="6">
            <tr><th align="left">Order</th><th>Customer</th><th>Phone</th><th>Total</th><th>Placed</th></tr>
            {rows}
        </table>
        <p><a href="{admin_url}">Review stale orders</a></p>
        """
    )
    return send_email_notification(
        recipient_email=settings.ADMIN_EMAIL,
        subject=f"🚨 Action Required: {count} Stale Order{'s' if count > 1 else ''} Detected",
        template_name=None,
        context={},
        html_message=html_message,
    )


# ============================================================================
# BOOKINGS AND LEADS
# ============================================================================

def send_new_booking_email(booking: "Booking") -> bool:
    if not NotificationSettings.load().new_booking_email:
        return False

    html_message = _wrap(
        f"""
        <h2>New booking {escape(booking.booking_number)}</h2>
        <ul>
            <li><strong>Customer:</strong> {escape(booking.customer_name)} ({escape(booking.customer_phone)})</li>
            <li><strong>Service:</strong> {escape(booking.service_type)}</li>
            <li><strong>Date:</strong> {booking.date:%d/%m/%Y} {escape(booking.time_slot or '')}</li>
            <li><strong>Address:</strong> {escape(booking.address)}</li>
            <li><strong>Vehicle:</strong> {escape(booking.vehicle_info or '-')}</li>
        </ul>
        <p><a href="{_admin_url(f'/admin/dashboard/bookings/{booking.pk}')}">Open in dashboard</a></p>
        """
    )
    return send_email_notification(
        recipient_email=settings.ADMIN_EMAIL,
        subject=f"New booking {booking.booking_number} on {booking.date:%d/%m/%Y}",
        template_name=None,
        context={},
        html_message=html_message,
    )


def send_new_lead_email(lead: "Lead") -> bool:
    if not NotificationSettings.load().new_lead_email:
        return False

    html_message = _wrap(
        f"""
        <h2>New enquiry from {escape(lead.name)}</h2>
        <p>{escape(lead.phone)} &middot; {escape(lead.email or 'no email')}</p>
        <p><strong>{escape(lead.subject or 'No subject')}</strong></p>
        <p>{escape(lead.message)}</p>
        <p><a href="{_admin_url(f'/admin/dashboard/leads/{lead.pk}')}">Open in dashboard</a></p>
        """
    )
    return send_email_notification(
        recipient_email=settings.ADMIN_EMAIL,
        subject=f"New lead: {lead.name}",
        template_name=None,
        context={},
        html_message=html_message,
    )


# ============================================================================
# INVENTORY AND DIGESTS
# ============================================================================

def send_low_stock_email(products: list[dict]) -> bool:
    """``products`` items carry ``name``, ``sku`` and ``stock``."""
    if not products or not NotificationSettings.load().low_stock_email:
        return False

    rows = "".join(
        f"<li>{escape(p['name'])}{' (' + escape(p['sku']) + ')' if p.get('sku') else ''}: "
        f"<strong>{p['stock']}</strong> left</li>"
        for p in products
    )
    html_message = _wrap(
        f"""
        <h2>Low stock alert</h2>
        <ul>{rows}</ul>
        <p><a href="{_admin_url('/admin/dashboard/inventory')}">Manage inventory</a></p>
        """
    )
    return send_email_notification(
        recipient_email=settings.ADMIN_EMAIL,
        subject=f"Low stock: {len(products)} product{'s' if len(products) > 1 else ''}",
        template_name=None,
        context={},
        html_message=html_message,
    )


def send_daily_summary_email(stats: dict) -> bool:
    html_message = _wrap(
        f"""
        <h2>Daily summary for {timezone.localdate():%d/%m/%Y}</h2>
        <ul>
            <li>New orders: {stats['new_orders']}</li>
            <li>Orders total: {format_price(stats['orders_total'])}</li>
            <li>New bookings: {stats['new_bookings']}</li>
            <li>New leads: {stats['new_leads']}</li>
        </ul>
        """
    )
    return send_email_notification(
        recipient_email=settings.ADMIN_EMAIL,
        subject=f"{settings.BUSINESS_NAME} daily summary",
        template_name=None,
        context={},
        html_message=html_message,
    )


# ============================================================================
# ACCOUNTS AND NEWSLETTER
# ============================================================================

def send_password_code_email(user: "CustomUser", code: str) -> bool:
    return send_email_notification(
        recipient_email=user.email,
        subject="Your password reset code",
        template_name=None,
        context={"message": f"Your password reset code is {code}. It expires in 15 minutes."},
    )


def send_team_invite_email(user: "CustomUser", code: str, role: str, invited_by: str = "") -> bool:
    set_password_url = _admin_url(f"/admin/auth/update-password?email={user.email}&code={code}")
    html_message = _wrap(
        f"""
        <h2>You're invited to the {escape(settings.BUSINESS_NAME)} dashboard</h2>
        <p>{escape(invited_by or 'An administrator')} added you to the team as <strong>{escape(role)}</strong>.</p>
        <p>Your one-time code is <strong>{code}</strong>. It is valid for 48 hours.</p>
        <p><a href="{set_password_url}">Set your password</a></p>
        """
    )
    return send_email_notification(
        recipient_email=user.email,
        subject=f"Join the {settings.BUSINESS_NAME} team",
        template_name=None,
        context={},
        html_message=html_message,
    )


def unsubscribe_url(email: str) -> str:
    token = base64.urlsafe_b64encode(email.encode()).decode()
    return f"{settings.API_BASE_URL}/api/v1/newsletter/unsubscribe/?email={token}"


def send_newsletter_welcome_email(subscriber: "NewsletterSubscriber") -> bool:
    html_message = _wrap(
        f"""
        <h2>Welcome to the {escape(settings.BUSINESS_NAME)} newsletter!</h2>
        <p>You'll be the first to hear about new arrivals, workshop offers and detailing tips.</p>
        <p style="font-size: 12px;"><a href="{unsubscribe_url(subscriber.email)}">Unsubscribe</a></p>
        """
    )
    return send_email_notification(
        recipient_email=subscriber.email,
        subject=f"Welcome to {settings.BUSINESS_NAME}!",
        template_name=None,
        context={},
        html_message=html_message,
    )


def send_newsletter_fallback_email(subscriber: "NewsletterSubscriber") -> bool:
    """Tell the owner about a subscriber whose welcome email bounced."""
    return send_email_notification(
        recipient_email=settings.ADMIN_EMAIL,
        subject="New newsletter subscriber (welcome email failed)",
        template_name=None,
        context={"message": f"{subscriber.email} subscribed but the welcome email could not be sent."},
    )
