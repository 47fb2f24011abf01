"""Newsletter subscription workflow."""

from __future__ import annotations

import base64
import binascii
import logging

from django.utils import timezone  # type: ignore

from .models import NewsletterSubscriber
from .services import send_newsletter_fallback_email, send_newsletter_welcome_email

logger = logging.getLogger(__name__)


def subscribe(
    email: str,
    *,
    source: str = "website",
    ip_address: str | None = None,
    user_agent: str = "",
) -> NewsletterSubscriber:
    """Create or re-activate a subscriber and send the welcome email.

    If the welcome email cannot be delivered the owner is told about the
    new subscriber instead, so nobody slips through unnoticed.
    """
    subscriber, created = NewsletterSubscriber.objects.update_or_create(
        email=email.strip().lower(),
        defaults={
            "subscribed": True,
            "subscribed_at": timezone.now(),
            "unsubscribed_at": None,
            "source": source or "website",
            "ip_address": ip_address,
            "user_agent": (user_agent or "")[:500],
        },
    )
    logger.info(f"Newsletter {'subscribe' if created else 'resubscribe'}: {subscriber.email}")

    if not send_newsletter_welcome_email(subscriber):
        logger.warning(f"Welcome email failed for {subscriber.email}, notifying admin")
        send_newsletter_fallback_email(subscriber)

    return subscriber


def decode_email_token(token: str) -> str | None:
    """Decode the base64 ``email`` parameter of unsubscribe links."""
    if not token:
        return None
    padded = token + "=" * (-len(token) % 4)
    try:
        email = base64.urlsafe_b64decode(padded.encode()).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None
    return email if "@" in email else None


def unsubscribe(email: str) -> int:
    """Mark the address unsubscribed. Returns the number of rows touched."""
    return NewsletterSubscriber.objects.filter(email__iexact=email, subscribed=True).update(
        subscribed=False,
        unsubscribed_at=timezone.now(),
    )
