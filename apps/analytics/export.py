"""XLSX dashboard report."""

from __future__ import annotations

from datetime import date
from io import BytesIO

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore
from openpyxl import Workbook
from openpyxl.styles import Font

from . import services

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def report_filename(start: date, end: date) -> str:
    business = settings.BUSINESS_NAME.replace(" ", "_")
    return f"{business}_Report_{start:%Y-%m-%d}_to_{end:%Y-%m-%d}.xlsx"


def _header(worksheet, columns: list[str]) -> None:  # type: ignore
    worksheet.append(columns)
    for cell in worksheet[1]:
        cell.font = Font(bold=True)


def build_report(start: date, end: date) -> bytes:
    """Three sheets: Daily Sales, Top Products and Orders (at most 1000 rows)."""
    workbook = Workbook()

    daily = workbook.active
    daily.title = "Daily Sales"
    _header(daily, ["Date", "Revenue", "Orders"])
    for row in services.revenue_over_time(start, end):
        daily.append([row["date"], float(row["revenue"]), row["orders"]])

    top = workbook.create_sheet("Top Products")
    _header(top, ["Name", "Quantity", "Revenue", "Product ID"])
    for row in services.top_selling_products(start, end, limit=10):
        top.append([row["name"], int(row["quantity"] or 0), float(row["revenue"]), row["product_id"]])

    orders = workbook.create_sheet("Orders")
    _header(orders, ["Order #", "Customer", "Phone", "Total", "Status", "Date"])
    for order in services.report_orders(start, end):
        orders.append(
            [
                order.order_number,
                order.customer.name if order.customer else order.customer_name,
                order.customer_phone,
                float(order.total),
                order.status,
                timezone.localtime(order.created_at).strftime("%Y-%m-%d %H:%M"),
            ]
        )

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
