"""Operational endpoints."""

import structlog
from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.views.decorators.http import require_GET

logger = structlog.get_logger(__name__)


@require_GET
def healthz(request):
    """Liveness probe: the database must answer, the cache is reported only."""
    checks = {"database": "connected", "cache": "connected"}
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as exc:
        logger.error("healthz.database_down", error=str(exc))
        return JsonResponse({"status": "unhealthy", "database": "down", "error": str(exc)}, status=503)

    try:
        cache.set("healthz", "ok", 5)
        if cache.get("healthz") != "ok":
            checks["cache"] = "degraded"
    except Exception as exc:  # noqa: BLE001
        logger.warning("healthz.cache_down", error=str(exc))
        checks["cache"] = "down"

    logger.info("healthz.ok", **checks)
    return JsonResponse({"status": "healthy", **checks})
