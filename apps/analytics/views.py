"""Dashboard analytics and report export."""

from __future__ import annotations

import logging
from datetime import timedelta

from django.http import HttpResponse  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import serializers, status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from . import services
from .export import XLSX_CONTENT_TYPE, build_report, report_filename

logger = logging.getLogger(__name__)


class DateRangeSerializer(serializers.Serializer):
    """``?from=YYYY-MM-DD&to=YYYY-MM-DD``; defaults to the last ``days`` days."""

    days = serializers.IntegerField(min_value=1, max_value=366, required=False, default=30)

    def to_internal_value(self, data):  # type: ignore
        attrs = super().to_internal_value(data)
        field = serializers.DateField()
        start = field.to_internal_value(data["from"]) if data.get("from") else None
        end = field.to_internal_value(data["to"]) if data.get("to") else None
        end = end or timezone.localdate()
        start = start or end - timedelta(days=attrs["days"] - 1)
        if start > end:
            raise serializers.ValidationError({"from": "Start date must be before end date."})
        attrs.update(start=start, end=end)
        return attrs


def _date_range(request):  # type: ignore
    serializer = DateRangeSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data["start"], serializer.validated_data["end"]


class DashboardStatsView(APIView):
    def get(self, request):  # type: ignore
        return Response(services.dashboard_stats())


class RecentActivityView(APIView):
    def get(self, request):  # type: ignore
        return Response(services.recent_activity())


class RevenueView(APIView):
    def get(self, request):  # type: ignore
        start, end = _date_range(request)
        return Response(services.revenue_over_time(start, end))


class TopProductsView(APIView):
    def get(self, request):  # type: ignore
        if request.query_params.get("from") or request.query_params.get("to"):
            start, end = _date_range(request)
            return Response(services.top_selling_products(start, end))
        return Response(services.top_selling_products())


class BookingDistributionView(APIView):
    def get(self, request):  # type: ignore
        return Response(services.booking_distribution())


class SummaryView(APIView):
    def get(self, request):  # type: ignore
        return Response(services.summary())


class ExportReportView(APIView):
    def get(self, request):  # type: ignore
        start, end = _date_range(request)
        try:
            content = build_report(start, end)
        except Exception as e:
            logger.error(f"Dashboard export failed: {e}", exc_info=True)
            return Response(
                {"success": False, "error": "Export failed"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        response = HttpResponse(content, content_type=XLSX_CONTENT_TYPE)
        response["Content-Disposition"] = f'attachment; filename="{report_filename(start, end)}"'
        return response
