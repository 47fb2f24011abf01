"""Serializers for customers."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.core.validators import NAME_MIN_LENGTH, normalize_phone

from .models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    order_count = serializers.IntegerField(read_only=True)
    booking_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Customer
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "address",
            "notes",
            "is_vip",
            "order_count",
            "booking_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "order_count", "booking_count", "created_at", "updated_at"]
        extra_kwargs = {"name": {"validators": [NAME_MIN_LENGTH]}}

    def validate_phone(self, value: str) -> str:
        return normalize_phone(value)


class OrderSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    order_number = serializers.CharField()
    status = serializers.CharField()
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    created_at = serializers.DateTimeField()


class BookingSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    booking_number = serializers.CharField()
    service_type = serializers.CharField()
    date = serializers.DateField()
    time_slot = serializers.CharField()
    status = serializers.CharField()
    created_at = serializers.DateTimeField()


class CustomerHistorySerializer(serializers.Serializer):
    orders = OrderSummarySerializer(many=True)
    bookings = BookingSummarySerializer(many=True)
    total_orders = serializers.IntegerField()
    total_bookings = serializers.IntegerField()
