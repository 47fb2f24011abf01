"""Serializers for notification settings and the newsletter."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import NewsletterSubscriber, NotificationSettings


class NotificationSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = NotificationSettings
        fields = [
            "new_order_email",
            "new_booking_email",
            "new_lead_email",
            "order_status_email",
            "low_stock_email",
            "stale_order_email",
            "booking_reminder_sms",
            "order_confirm_sms",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]


class NewsletterSubscribeSerializer(serializers.Serializer):
    email = serializers.EmailField()
    source = serializers.CharField(max_length=50, required=False, default="website")


class NewsletterSubscriberSerializer(serializers.ModelSerializer):
    class Meta:
        model = NewsletterSubscriber
        fields = ["id", "email", "subscribed", "subscribed_at", "unsubscribed_at", "source"]
        read_only_fields = fields
