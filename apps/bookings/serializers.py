"""Serializers for bookings and booking settings."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.core.validators import ADDRESS_MIN_LENGTH, NAME_MIN_LENGTH, PHONE_VALIDATOR, normalize_phone

from .models import Booking, BookingActivityLog, BookingSettings

TIME_SLOT_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class BookingActivityLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = BookingActivityLog
        fields = ["id", "activity", "created_at"]


class BookingSerializer(serializers.ModelSerializer):
    """Dashboard representation; also used for create and update."""

    order_number = serializers.CharField(source="order.order_number", read_only=True, default=None)
    time_slot = serializers.RegexField(TIME_SLOT_PATTERN, required=False, allow_blank=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "booking_number",
            "customer",
            "customer_name",
            "customer_phone",
            "customer_email",
            "service_type",
            "vehicle_info",
            "date",
            "time_slot",
            "address",
            "notes",
            "status",
            "whatsapp_sent",
            "order",
            "order_number",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "booking_number", "customer", "order", "created_at", "updated_at"]
        extra_kwargs = {
            "customer_name": {"validators": [NAME_MIN_LENGTH]},
            "customer_phone": {"validators": [PHONE_VALIDATOR]},
            "address": {"validators": [ADDRESS_MIN_LENGTH]},
        }

    def validate_customer_phone(self, value: str) -> str:
        return normalize_phone(value)


class BookingDetailSerializer(BookingSerializer):
    activity_logs = BookingActivityLogSerializer(many=True, read_only=True)

    class Meta(BookingSerializer.Meta):
        fields = [*BookingSerializer.Meta.fields, "activity_logs"]


class PublicBookingSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=150, validators=[NAME_MIN_LENGTH])
    customer_phone = serializers.CharField(max_length=20, validators=[PHONE_VALIDATOR])
    customer_email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(validators=[ADDRESS_MIN_LENGTH])
    date = serializers.DateField()
    time_slot = serializers.RegexField(TIME_SLOT_PATTERN)
    vehicle_info = serializers.CharField(max_length=200, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)
    services = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)

    def validate_customer_phone(self, value: str) -> str:
        return normalize_phone(value)


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.Status.choices)
    notes = serializers.CharField(required=False, allow_blank=True)


class RescheduleSerializer(serializers.Serializer):
    date = serializers.DateField()
    time_slot = serializers.RegexField(TIME_SLOT_PATTERN, required=False, allow_blank=True, default="")


class OperatingHoursSerializer(serializers.Serializer):
    day_of_week = serializers.IntegerField(min_value=0, max_value=6)
    is_open = serializers.BooleanField()
    open_time = serializers.RegexField(TIME_SLOT_PATTERN)
    close_time = serializers.RegexField(TIME_SLOT_PATTERN)

    def validate(self, attrs):  # type: ignore
        if attrs["is_open"] and attrs["open_time"] >= attrs["close_time"]:
            raise serializers.ValidationError("Closing time must be after opening time.")
        return attrs


class BookingSettingsSerializer(serializers.ModelSerializer):
    operating_hours = OperatingHoursSerializer(many=True, required=False)

    class Meta:
        model = BookingSettings
        fields = [
            "slot_duration",
            "buffer_time",
            "advance_booking_days",
            "allow_same_day_booking",
            "operating_hours",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]
        extra_kwargs = {
            "slot_duration": {"min_value": 15, "max_value": 480},
            "buffer_time": {"max_value": 120},
            "advance_booking_days": {"min_value": 1, "max_value": 365},
        }

    def update(self, instance, validated_data):  # type: ignore
        hours = validated_data.pop("operating_hours", None)
        if hours is not None:
            instance.operating_hours = sorted(hours, key=lambda entry: entry["day_of_week"])
        return super().update(instance, validated_data)


class AvailableSlotsQuerySerializer(serializers.Serializer):
    date = serializers.DateField()
