"""Admin registrations for the users domain."""

from __future__ import annotations

from django.contrib import admin  # type: ignore
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .models import Admin, CustomUser, PasswordResetToken


class AdminAccessInline(admin.StackedInline):
    model = Admin
    can_delete = True
    extra = 0


@admin.register(CustomUser)
class CustomUserAdmin(BaseUserAdmin):
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (_("Profile"), {"fields": ("full_name", "phone", "avatar_url")}),
        (_("Security"), {"fields": ("failed_login_attempts", "locked_until")}),
        (
            _("Permissions"),
            {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined", "created_at", "updated_at")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "password1", "password2", "full_name", "is_staff", "is_superuser"),
            },
        ),
    )
    inlines = [AdminAccessInline]
    list_display = ("email", "full_name", "phone", "is_active", "is_superuser", "is_locked")
    list_filter = ("is_active", "is_staff", "is_superuser")
    search_fields = ("email", "full_name", "phone")
    ordering = ("email",)
    readonly_fields = ("created_at", "updated_at", "date_joined", "last_login")


@admin.register(Admin)
class AdminProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "full_name", "role", "status", "created_at")
    list_filter = ("status", "role")
    search_fields = ("user__email", "full_name", "phone")
    raw_id_fields = ("user",)


@admin.register(PasswordResetToken)
class PasswordResetTokenAdmin(admin.ModelAdmin):
    list_display = ("user", "purpose", "expires_at", "attempts_left", "is_used", "created_at")
    list_filter = ("purpose", "is_used")
    search_fields = ("user__email",)
