"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Booking, BookingActivityLog, BookingSettings


class BookingActivityLogInline(admin.TabularInline):
    model = BookingActivityLog
    extra = 0
    readonly_fields = ("activity", "created_at")
    can_delete = False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_number",
        "customer_name",
        "customer_phone",
        "service_type",
        "date",
        "time_slot",
        "status",
        "created_at",
    )
    list_filter = ("status", "date", "whatsapp_sent")
    search_fields = ("booking_number", "customer_name", "customer_phone", "vehicle_info")
    raw_id_fields = ("customer", "order")
    readonly_fields = ("booking_number", "created_at", "updated_at")
    inlines = [BookingActivityLogInline]


@admin.register(BookingSettings)
class BookingSettingsAdmin(admin.ModelAdmin):
    list_display = ("slot_duration", "buffer_time", "advance_booking_days", "allow_same_day_booking")

    def has_add_permission(self, request):  # type: ignore
        return not BookingSettings.objects.exists()
