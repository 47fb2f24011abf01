"""Booking API views."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from django.utils.decorators import method_decorator  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from django_ratelimit.decorators import ratelimit  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.notifications import whatsapp

from . import services
from .filters import BookingFilterSet
from .models import Booking, BookingSettings
from .serializers import (
    AvailableSlotsQuerySerializer,
    BookingDetailSerializer,
    BookingSerializer,
    BookingSettingsSerializer,
    BookingStatusSerializer,
    PublicBookingSerializer,
    RescheduleSerializer,
)
from .slots import get_available_slots


class BookingViewSet(viewsets.ModelViewSet):
    """Dashboard bookings; detail routes accept the id or the booking number."""

    queryset = Booking.objects.select_related("order")
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = BookingFilterSet
    ordering_fields = ["date", "created_at", "status"]
    ordering = ["-date", "-created_at"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "retrieve":
            return BookingDetailSerializer
        return BookingSerializer

    def get_object(self):  # type: ignore
        lookup = self.kwargs[self.lookup_url_kwarg or self.lookup_field]
        queryset = self.get_queryset()
        obj = None
        if str(lookup).isdigit():
            obj = queryset.filter(pk=int(lookup)).first()
        if obj is None:
            obj = get_object_or_404(queryset, booking_number=lookup)
        self.check_object_permissions(self.request, obj)
        return obj

    def perform_create(self, serializer):  # type: ignore
        serializer.instance = services.create_booking(serializer.validated_data)

    def perform_update(self, serializer):  # type: ignore
        serializer.instance = services.update_booking(serializer.instance, serializer.validated_data)

    @action(detail=True, methods=["post", "patch"], url_path="status")
    def change_status(self, request, pk=None):  # type: ignore
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.update_booking_status(
            self.get_object(),
            serializer.validated_data["status"],
            serializer.validated_data.get("notes"),
        )
        return Response(
            {
                "success": True,
                "booking": BookingSerializer(booking).data,
                "whatsapp_url": whatsapp.booking_notification_url(booking, "status_update"),
            }
        )

    @action(detail=True, methods=["post"])
    def reschedule(self, request, pk=None):  # type: ignore
        serializer = RescheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.reschedule_booking(
            self.get_object(),
            serializer.validated_data["date"],
            serializer.validated_data["time_slot"],
        )
        return Response({"success": True, "booking": BookingSerializer(booking).data})

    @action(detail=True, methods=["post"])
    def reminder(self, request, pk=None):  # type: ignore
        booking = services.mark_reminder_sent(self.get_object())
        return Response({"success": True, "whatsapp_url": whatsapp.booking_notification_url(booking, "reminder")})

    @action(detail=True, methods=["get"])
    def whatsapp(self, request, pk=None):  # type: ignore
        kind = request.query_params.get("type", "confirmation")
        if kind not in {"confirmation", "reminder", "status_update"}:
            return Response({"success": False, "error": "Unknown message type"}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"whatsapp_url": whatsapp.booking_notification_url(self.get_object(), kind)})

    @action(detail=False, methods=["get"])
    def stats(self, request):  # type: ignore
        return Response(services.booking_stats())

    @action(detail=False, methods=["get"])
    def upcoming(self, request):  # type: ignore
        return Response(BookingSerializer(services.upcoming_bookings(), many=True).data)

    @action(detail=False, methods=["get"], url_path="service-types")
    def service_types(self, request):  # type: ignore
        return Response(services.service_types())


@method_decorator(
    ratelimit(key="ip", rate=settings.BOOKING_RATE, method="POST", block=False),
    name="post",
)
class PublicBookingView(APIView):
    """Booking form on the website."""

    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def post(self, request):  # type: ignore
        if getattr(request, "limited", False):
            return Response(
                {"success": False, "error": "Too many requests. Please try again later."},
                status=status.HTTP_429_TOO_MANY_REQUESTS,
            )
        serializer = PublicBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        service_ids = data.pop("services")
        booking = services.create_public_booking(data, service_ids)
        return Response(
            {
                "success": True,
                "booking_number": booking.booking_number,
                "whatsapp_url": whatsapp.booking_notification_url(booking, "confirmation"),
            },
            status=status.HTTP_201_CREATED,
        )


class AvailableSlotsView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def get(self, request):  # type: ignore
        serializer = AvailableSlotsQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        day = serializer.validated_data["date"]
        return Response({"date": day, "slots": get_available_slots(day)})


class BookingSettingsView(APIView):
    """Slot rules. Anyone may read them (the booking form needs them); only admins change them."""

    def get_permissions(self):  # type: ignore
        if self.request.method == "GET":
            return [permissions.AllowAny()]
        return super().get_permissions()

    def get(self, request):  # type: ignore
        return Response(BookingSettingsSerializer(BookingSettings.load()).data)

    def put(self, request):  # type: ignore
        return self._update(request, partial=False)

    def patch(self, request):  # type: ignore
        return self._update(request, partial=True)

    def _update(self, request, partial: bool):  # type: ignore
        serializer = BookingSettingsSerializer(BookingSettings.load(), data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)
