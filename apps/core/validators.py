"""Field validators shared by the public forms and the admin API."""

from __future__ import annotations

from django.core.validators import MinLengthValidator, RegexValidator  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

PHONE_VALIDATOR = RegexValidator(
    regex=r"^[\d+\-\s()]{11,15}$",
    message=_("Enter a valid phone number (11-15 digits, spaces, dashes or brackets)."),
)

NAME_MIN_LENGTH = MinLengthValidator(2, _("Name must be at least 2 characters."))
ADDRESS_MIN_LENGTH = MinLengthValidator(5, _("Address must be at least 5 characters."))
MESSAGE_MIN_LENGTH = MinLengthValidator(10, _("Message must be at least 10 characters."))


def normalize_phone(phone: str) -> str:
    """Strip whitespace at the edges so the unique phone lookup stays stable."""
    return (phone or "").strip()
