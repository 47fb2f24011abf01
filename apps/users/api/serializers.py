"""Serializers for the team management API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.core.validators import PHONE_VALIDATOR
from apps.users.models import Admin


class TeamMemberSerializer(serializers.ModelSerializer):
    """Team card: profile fields plus account data from the linked user."""

    user_id = serializers.ReadOnlyField(source="user.id")
    email = serializers.ReadOnlyField(source="user.email")
    last_sign_in = serializers.ReadOnlyField(source="user.last_login")
    full_name = serializers.SerializerMethodField()

    class Meta:
        model = Admin
        fields = [
            "id",
            "user_id",
            "email",
            "full_name",
            "avatar_url",
            "phone",
            "role",
            "status",
            "created_at",
            "last_sign_in",
        ]
        read_only_fields = fields

    def get_full_name(self, obj: Admin) -> str:
        return obj.full_name or obj.user.full_name


class TeamMemberCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    full_name = serializers.CharField(min_length=2, max_length=150)
    role = serializers.CharField(max_length=50, default="Admin")


class TeamMemberUpdateSerializer(serializers.Serializer):
    full_name = serializers.CharField(min_length=2, max_length=150, required=False)
    role = serializers.CharField(max_length=50, required=False)
    status = serializers.ChoiceField(choices=Admin.Status.choices, required=False)
    phone = serializers.CharField(required=False, allow_blank=True, validators=[PHONE_VALIDATOR])
