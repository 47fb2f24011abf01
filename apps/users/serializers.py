"""Serializers for the signed-in user's profile."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.core.validators import PHONE_VALIDATOR

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Profile of the signed-in team member."""

    is_admin = serializers.SerializerMethodField()
    role = serializers.SerializerMethodField()
    phone = serializers.CharField(required=False, allow_blank=True, validators=[PHONE_VALIDATOR])

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "full_name",
            "phone",
            "avatar_url",
            "is_admin",
            "role",
            "last_login",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "email",
            "is_admin",
            "role",
            "last_login",
            "created_at",
            "updated_at",
        ]

    def get_is_admin(self, obj) -> bool:  # type: ignore
        return obj.is_dashboard_admin()

    def get_role(self, obj) -> str:  # type: ignore
        access = getattr(obj, "admin_access", None)
        if access is not None:
            return access.role
        return "Superuser" if obj.is_superuser else ""

    def update(self, instance, validated_data):  # type: ignore
        instance = super().update(instance, validated_data)
        # Keep the team card in sync with the account profile
        access = getattr(instance, "admin_access", None)
        if access is not None:
            for field in ("full_name", "phone", "avatar_url"):
                if field in validated_data:
                    setattr(access, field, validated_data[field])
            access.save()
        return instance
