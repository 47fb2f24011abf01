"""Admin registrations for customers."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "email", "is_vip", "created_at")
    list_filter = ("is_vip",)
    search_fields = ("name", "phone", "email")
    readonly_fields = ("created_at", "updated_at")
