"""Serializers for authentication flows (login, password reset, password change)."""

from __future__ import annotations

from typing import Any

from django.contrib.auth import get_user_model  # type: ignore
from django.contrib.auth.password_validation import validate_password  # type: ignore
from django.db import transaction  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import PasswordResetToken
from .services import request_password_reset

User = get_user_model()


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        email = attrs.get("email", "")
        password = attrs.get("password", "")

        try:
            user = User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            raise serializers.ValidationError({"email": "Invalid email or password."})

        if user.is_locked:
            raise serializers.ValidationError(
                {"non_field_errors": ["Account temporarily locked. Try again later."]}
            )

        if not user.check_password(password):
            user.register_failed_attempt(threshold=5)
            raise serializers.ValidationError({"email": "Invalid email or password."})

        if not user.is_active:
            raise serializers.ValidationError({"non_field_errors": ["This account is disabled."]})

        user.unlock()
        attrs["user"] = user
        return attrs


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()

    def send_code(self) -> None:
        """Email a reset code when the account exists; unknown emails are a no-op."""
        user = User.objects.filter(email__iexact=self.validated_data["email"]).first()
        if user is not None:
            request_password_reset(user)


class PasswordResetConfirmSerializer(serializers.Serializer):
    """Also used by invited team members to set their first password."""

    email = serializers.EmailField()
    code = serializers.CharField(max_length=6)
    new_password = serializers.CharField(min_length=8, write_only=True)
    new_password_confirm = serializers.CharField(min_length=8, write_only=True)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs.get("new_password") != attrs.get("new_password_confirm"):
            raise serializers.ValidationError({"new_password_confirm": "Passwords do not match."})
        try:
            attrs["user"] = User.objects.get(email__iexact=attrs["email"])
        except User.DoesNotExist:
            raise serializers.ValidationError({"code": "Invalid or expired code."})
        return attrs

    def create(self, validated_data: dict[str, Any]):  # type: ignore
        user = validated_data["user"]
        code = validated_data["code"]

        try:
            token = PasswordResetToken.objects.filter(user=user, is_used=False).latest("created_at")
        except PasswordResetToken.DoesNotExist:
            raise serializers.ValidationError({"code": "Code not found. Request a new one."})

        if token.is_expired:
            token.mark_used()
            raise serializers.ValidationError({"code": "This code has expired."})

        if token.attempts_left == 0:
            token.mark_used()
            raise serializers.ValidationError({"code": "Too many attempts. Request a new code."})

        if token.code != code:
            token.decrement_attempt()
            raise serializers.ValidationError({"code": "Invalid code."})

        with transaction.atomic():
            user.set_password(validated_data["new_password"])
            user.save(update_fields=["password"])
            token.mark_used()
        return user


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(min_length=8, write_only=True)

    def validate_current_password(self, value: str) -> str:
        user = self.context["request"].user
        if not user.check_password(value):
            raise serializers.ValidationError("Current password is incorrect.")
        return value

    def validate_new_password(self, value: str) -> str:
        validate_password(value, self.context["request"].user)
        return value

    def save(self, **kwargs):  # type: ignore
        user = self.context["request"].user
        user.set_password(self.validated_data["new_password"])
        user.save(update_fields=["password"])
        return user
