"""Admin registrations for the catalog."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Badge, Inventory, Product, ProductImage


class InventoryInline(admin.StackedInline):
    model = Inventory
    can_delete = False
    extra = 0


class ProductImageInline(admin.TabularInline):
    model = ProductImage
    extra = 0
    fields = ("url", "public_id", "alt", "sort_order", "is_primary")


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "sku", "category", "price", "sale_price", "status", "is_active", "is_archived")
    list_filter = ("status", "is_active", "is_archived", "category", "badge")
    search_fields = ("name", "sku", "slug", "barcode")
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ("created_at", "updated_at")
    inlines = [InventoryInline, ProductImageInline]


@admin.register(Badge)
class BadgeAdmin(admin.ModelAdmin):
    list_display = ("name", "color", "is_active", "sort_order")
    list_filter = ("is_active",)
    search_fields = ("name",)
