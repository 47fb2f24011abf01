"""Business rules for the workshop service catalogue."""

from __future__ import annotations

import logging
from typing import Any

from django.utils.text import slugify  # type: ignore

from apps.core.exceptions import DomainError

from .models import Service

logger = logging.getLogger(__name__)


class DuplicateSlugError(DomainError):
    def __init__(self) -> None:
        super().__init__("A service with this slug already exists")


def _ensure_slug_free(slug: str, exclude_pk: int | None = None) -> None:
    queryset = Service.objects.filter(slug=slug)
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)
    if queryset.exists():
        raise DuplicateSlugError()


def create_service(data: dict[str, Any]) -> Service:
    data = dict(data)
    slug = data.pop("slug", None) or slugify(data["title"])
    _ensure_slug_free(slug)
    service = Service.objects.create(slug=slug, **data)
    logger.info(f"Service created: {service.slug}")
    return service


def update_service(service: Service, data: dict[str, Any]) -> Service:
    data = dict(data)
    slug = data.pop("slug", None)
    if slug and slug != service.slug:
        _ensure_slug_free(slug, exclude_pk=service.pk)
        service.slug = slug
    for field, value in data.items():
        setattr(service, field, value)
    service.save()
    return service


def toggle_service_active(service: Service) -> Service:
    service.is_active = not service.is_active
    service.save(update_fields=["is_active", "updated_at"])
    return service


def service_stats() -> dict[str, int]:
    total = Service.objects.count()
    active = Service.objects.filter(is_active=True).count()
    return {"total": total, "active": active, "inactive": total - active}


def service_titles(ids: list[int]) -> list[str]:
    """Titles of the requested active services, in the order requested."""
    by_id = {s.pk: s.title for s in Service.objects.filter(pk__in=ids, is_active=True)}
    return [by_id[pk] for pk in ids if pk in by_id]
