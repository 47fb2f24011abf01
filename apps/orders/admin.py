"""Admin registrations for orders."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    raw_id_fields = ("product",)
    fields = ("product", "name", "price", "quantity")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "customer_name", "customer_phone", "total", "status", "created_at")
    list_filter = ("status", "whatsapp_sent")
    search_fields = ("order_number", "customer_name", "customer_phone", "customer_email")
    date_hierarchy = "created_at"
    raw_id_fields = ("customer",)
    readonly_fields = ("order_number", "stock_restored", "created_at", "updated_at")
    inlines = [OrderItemInline]
