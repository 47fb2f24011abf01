"""Lead capture and follow-up."""

from __future__ import annotations

import logging
from typing import Any

from django.db.models import Count  # type: ignore

from apps.notifications.services import send_new_lead_email

from .models import Lead

logger = logging.getLogger(__name__)


def create_lead(data: dict[str, Any]) -> Lead:
    lead = Lead.objects.create(**data)
    logger.info(f"Lead {lead.pk} received from {lead.source}")
    send_new_lead_email(lead)
    return lead


def update_lead_status(lead: Lead, status: str, notes: str | None = None) -> Lead:
    lead.status = status
    update_fields = ["status", "updated_at"]
    if notes is not None:
        lead.notes = notes
        update_fields.append("notes")
    lead.save(update_fields=update_fields)
    return lead


def _counts(field: str, choices: list[str]) -> dict[str, int]:
    rows = Lead.objects.values(field).annotate(count=Count("id")).order_by()
    found = {row[field]: row["count"] for row in rows}
    return {choice: found.get(choice, 0) for choice in choices}


def lead_stats() -> dict[str, Any]:
    by_status = _counts("status", Lead.Status.values)
    return {
        "total": sum(by_status.values()),
        "new": by_status[Lead.Status.NEW],
        "by_status": by_status,
        "by_source": _counts("source", Lead.Source.values),
    }


def recent_leads(limit: int = 5):  # type: ignore
    return Lead.objects.order_by("-created_at")[:limit]
