"""Serializers for workshop services."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from . import services
from .models import Service


class ServiceSerializer(serializers.ModelSerializer):
    slug = serializers.SlugField(max_length=220, required=False, allow_blank=True)
    features = serializers.ListField(child=serializers.CharField(max_length=200), required=False)
    images = serializers.ListField(child=serializers.URLField(max_length=1000), required=False)
    primary_image = serializers.CharField(read_only=True)

    class Meta:
        model = Service
        fields = [
            "id",
            "title",
            "slug",
            "description",
            "price",
            "duration",
            "location",
            "features",
            "images",
            "primary_image",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "primary_image", "created_at", "updated_at"]
        extra_kwargs = {
            "title": {"min_length": 2},
            "duration": {"min_value": 1},
        }

    def create(self, validated_data: dict[str, Any]) -> Service:
        return services.create_service(validated_data)

    def update(self, instance: Service, validated_data: dict[str, Any]) -> Service:
        return services.update_service(instance, validated_data)
