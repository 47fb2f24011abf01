"""Error types and the DRF exception handler used by every API view."""

from __future__ import annotations

import logging

from django.db import DatabaseError  # type: ignore
from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Business rule violation that should reach the client as a 400."""

    status_code = status.HTTP_400_BAD_REQUEST


def api_exception_handler(exc, context):  # type: ignore
    """Wrap DRF's default handler.

    DRF exceptions keep their usual payloads. Domain errors become
    ``{"success": false, "error": "<message>"}`` with their status code, and
    anything else is logged and reported as a generic 500.
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "unknown"

    if isinstance(exc, DomainError):
        logger.info(f"{view_name}: {exc}")
        return Response({"success": False, "error": str(exc)}, status=exc.status_code)

    if isinstance(exc, DatabaseError):
        logger.error(f"Database error in {view_name}: {exc}", exc_info=True)
    else:
        logger.error(f"Unhandled error in {view_name}: {exc}", exc_info=True)
    return Response(
        {"success": False, "error": "Internal server error"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
