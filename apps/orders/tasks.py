"""Celery tasks for orders."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .services import check_stale_orders as run_stale_order_check

logger = logging.getLogger(__name__)


@shared_task(name="orders.check_stale_orders")
def check_stale_orders() -> dict:
    """
    Mark NEW orders older than STALE_ORDER_HOURS as STALE and email the
    owner a single summary.

    Returns:
        dict: {"success", "message", "stale_count", "order_numbers"?}
    """
    result = run_stale_order_check()
    logger.info(f"Stale order sweep: {result['message']}")
    return result
