from django.contrib import admin  # type: ignore

from .models import Lead


@admin.register(Lead)
class LeadAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "email", "source", "status", "created_at")
    list_filter = ("status", "source")
    search_fields = ("name", "phone", "email", "subject")
    readonly_fields = ("created_at", "updated_at")
