"""Serializers for leads."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.core.validators import MESSAGE_MIN_LENGTH, NAME_MIN_LENGTH, PHONE_VALIDATOR, normalize_phone

from .models import Lead


class LeadSerializer(serializers.ModelSerializer):
    class Meta:
        model = Lead
        fields = [
            "id",
            "name",
            "email",
            "phone",
            "subject",
            "message",
            "source",
            "status",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {
            "name": {"validators": [NAME_MIN_LENGTH]},
            "phone": {"validators": [PHONE_VALIDATOR]},
            "message": {"validators": [MESSAGE_MIN_LENGTH]},
        }

    def validate_phone(self, value: str) -> str:
        return normalize_phone(value)


class ContactFormSerializer(LeadSerializer):
    """Public contact form; visitors cannot set status, source or notes."""

    class Meta(LeadSerializer.Meta):
        fields = ["name", "email", "phone", "subject", "message"]
        read_only_fields: list[str] = []


class LeadStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Lead.Status.choices)
    notes = serializers.CharField(required=False, allow_blank=True)
