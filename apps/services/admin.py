"""Admin registrations for workshop services."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Service


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("title", "slug", "price", "duration", "location", "is_active")
    list_filter = ("is_active", "location")
    search_fields = ("title", "slug")
    prepopulated_fields = {"slug": ("title",)}
