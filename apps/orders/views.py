"""Order API views: dashboard, storefront checkout and the stale-order cron hook."""

from __future__ import annotations

import hmac
import logging

from django.conf import settings  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from django.utils.decorators import method_decorator  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from django_ratelimit.decorators import ratelimit  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.notifications import whatsapp

from . import services
from .filters import OrderFilterSet
from .models import Order
from .serializers import (
    AdminOrderCreateSerializer,
    CheckoutSerializer,
    OrderSerializer,
    OrderStatusSerializer,
    OrderUpdateSerializer,
    UnifiedCheckoutSerializer,
)

logger = logging.getLogger(__name__)


class OrderViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Dashboard orders; detail routes accept the id or the order number."""

    queryset = Order.objects.prefetch_related("items__product")
    serializer_class = OrderSerializer
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = OrderFilterSet
    ordering_fields = ["created_at", "total", "status"]
    ordering = ["-created_at"]

    def get_object(self):  # type: ignore
        lookup = self.kwargs[self.lookup_url_kwarg or self.lookup_field]
        queryset = self.get_queryset()
        obj = None
        if str(lookup).isdigit():
            obj = queryset.filter(pk=int(lookup)).first()
        if obj is None:
            obj = get_object_or_404(queryset, order_number=lookup)
        self.check_object_permissions(self.request, obj)
        return obj

    def get_serializer_class(self):  # type: ignore
        if self.action in {"update", "partial_update"}:
            return OrderUpdateSerializer
        return OrderSerializer

    def create(self, request):  # type: ignore
        serializer = AdminOrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = services.create_order(serializer.validated_data)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):  # type: ignore
        partial = kwargs.pop("partial", False)
        order = self.get_object()
        serializer = OrderUpdateSerializer(order, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        order = services.update_order(order, serializer.validated_data)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post", "patch"], url_path="status")
    def change_status(self, request, pk=None):  # type: ignore
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = services.update_order_status(
            self.get_object(),
            serializer.validated_data["status"],
            serializer.validated_data.get("notes"),
        )
        return Response(
            {
                "success": True,
                "order": OrderSerializer(order).data,
                "whatsapp_url": whatsapp.order_notification_url(order, "status_update"),
            }
        )

    @action(detail=True, methods=["get"])
    def whatsapp(self, request, pk=None):  # type: ignore
        kind = request.query_params.get("type", "confirmation")
        return Response({"whatsapp_url": whatsapp.order_notification_url(self.get_object(), kind)})

    @action(detail=False, methods=["get"])
    def stats(self, request):  # type: ignore
        return Response(services.order_stats())

    @action(detail=False, methods=["get"])
    def recent(self, request):  # type: ignore
        return Response(OrderSerializer(services.recent_orders(), many=True).data)


@method_decorator(
    ratelimit(key="ip", rate=settings.CHECKOUT_RATE, method="POST", block=False),
    name="post",
)
class CheckoutView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def post(self, request):  # type: ignore
        if getattr(request, "limited", False):
            return Response(
                {"success": False, "error": "Too many requests. Please try again later."},
                status=status.HTTP_429_TOO_MANY_REQUESTS,
            )
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.place_order(serializer.validated_data)
        return Response(
            {
                "success": True,
                "order_id": result.order.pk,
                "order_number": result.order.order_number,
                "total": str(result.total),
                "whatsapp_url": result.whatsapp_url,
            },
            status=status.HTTP_201_CREATED,
        )


@method_decorator(
    ratelimit(key="ip", rate=settings.CHECKOUT_RATE, method="POST", block=False),
    name="post",
)
class UnifiedCheckoutView(APIView):
    """Products and workshop services in a single checkout."""

    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def post(self, request):  # type: ignore
        if getattr(request, "limited", False):
            return Response(
                {"success": False, "error": "Too many requests. Please try again later."},
                status=status.HTTP_429_TOO_MANY_REQUESTS,
            )
        serializer = UnifiedCheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.place_unified_order(serializer.validated_data)
        return Response(
            {
                "success": True,
                "order_id": result.order.pk if result.order else None,
                "order_number": result.order.order_number if result.order else None,
                "booking_id": result.booking.pk if result.booking else None,
                "booking_number": result.booking.booking_number if result.booking else None,
                "total": str(result.total),
                "whatsapp_url": result.whatsapp_url,
            },
            status=status.HTTP_201_CREATED,
        )


class CheckStaleOrdersView(APIView):
    """Hook for an external scheduler; same work as the beat task."""

    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def get(self, request):  # type: ignore
        secret = settings.CRON_SECRET
        if secret:
            header = request.headers.get("Authorization", "")
            if not hmac.compare_digest(header, f"Bearer {secret}"):
                return Response({"success": False, "error": "Unauthorized"}, status=status.HTTP_401_UNAUTHORIZED)

        try:
            result = services.check_stale_orders()
        except Exception as e:
            logger.error(f"Stale order check failed: {e}", exc_info=True)
            return Response(
                {"success": False, "error": "Failed to check stale orders", "details": str(e)},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response(result)
