"""Human-readable reference numbers for orders and bookings."""

from __future__ import annotations

import secrets
import string

from django.utils import timezone  # type: ignore

_ALPHABET = string.ascii_uppercase + string.digits


def generate_reference(prefix: str) -> str:
    """Return ``PREFIX-YYMMDD-XXXX`` using the local date and a random suffix."""
    stamp = timezone.localdate().strftime("%y%m%d")
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(4))
    return f"{prefix}-{stamp}-{suffix}"


def generate_unique_reference(model, field_name: str, prefix: str, attempts: int = 10) -> str:  # type: ignore
    for _ in range(attempts):
        candidate = generate_reference(prefix)
        if not model.objects.filter(**{field_name: candidate}).exists():
            return candidate
    raise RuntimeError(f"Could not generate a unique {prefix} reference")
