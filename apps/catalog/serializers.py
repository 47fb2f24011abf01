"""Serializers for products, badges and the storefront."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from rest_framework import serializers  # type: ignore

from . import services
from .models import Badge, Inventory, Product, ProductImage


class BadgeSerializer(serializers.ModelSerializer):
    usage_count = serializers.SerializerMethodField()

    class Meta:
        model = Badge
        fields = ["id", "name", "color", "is_active", "sort_order", "usage_count", "created_at", "updated_at"]
        read_only_fields = ["id", "usage_count", "created_at", "updated_at"]

    def get_usage_count(self, obj: Badge) -> int | None:
        return getattr(obj, "usage_count", None)


class BadgeBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Badge
        fields = ["id", "name", "color"]


class ProductImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductImage
        fields = ["id", "url", "public_id", "alt", "sort_order", "is_primary"]


class ImageInputSerializer(serializers.Serializer):
    url = serializers.URLField(max_length=1000)
    public_id = serializers.CharField(max_length=500, required=False, allow_blank=True, default="")
    alt = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")


class InventorySerializer(serializers.ModelSerializer):
    is_low = serializers.BooleanField(read_only=True)

    class Meta:
        model = Inventory
        fields = ["quantity", "low_stock_at", "is_low", "updated_at"]


class ProductSerializer(serializers.ModelSerializer):
    """Full product card for the dashboard."""

    badge = BadgeBriefSerializer(read_only=True)
    inventory = InventorySerializer(read_only=True)
    images = ProductImageSerializer(many=True, read_only=True)
    effective_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "sku",
            "description",
            "price",
            "sale_price",
            "cost_price",
            "effective_price",
            "barcode",
            "category",
            "status",
            "badge",
            "is_active",
            "is_archived",
            "inventory",
            "images",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductWriteSerializer(serializers.ModelSerializer):
    slug = serializers.SlugField(max_length=220, required=False, allow_blank=True)
    sku = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    badge = serializers.PrimaryKeyRelatedField(queryset=Badge.objects.all(), required=False, allow_null=True)
    stock = serializers.IntegerField(min_value=0, required=False)
    low_stock_at = serializers.IntegerField(min_value=0, required=False)
    images = ImageInputSerializer(many=True, required=False)
    keep_image_public_ids = serializers.ListField(
        child=serializers.CharField(allow_blank=True),
        required=False,
        allow_null=True,
    )

    class Meta:
        model = Product
        fields = [
            "name",
            "slug",
            "sku",
            "description",
            "price",
            "sale_price",
            "cost_price",
            "barcode",
            "category",
            "status",
            "badge",
            "is_active",
            "stock",
            "low_stock_at",
            "images",
            "keep_image_public_ids",
        ]
        extra_kwargs = {"name": {"min_length": 2}}

    def validate_slug(self, value: str) -> str:
        if not value:
            return value
        queryset = Product.objects.filter(slug=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("A product with this slug already exists.")
        return value

    def validate_sku(self, value: str | None) -> str | None:
        value = (value or "").strip() or None
        if value is None:
            return None
        queryset = Product.objects.filter(sku=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError("A product with this SKU already exists.")
        return value

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        price = attrs.get("price", getattr(self.instance, "price", None))
        sale_price = attrs.get("sale_price")
        if sale_price is not None and price is not None and Decimal(sale_price) > Decimal(price):
            raise serializers.ValidationError({"sale_price": "Sale price cannot exceed the regular price."})
        return attrs

    def create(self, validated_data: dict[str, Any]) -> Product:
        images = validated_data.pop("images", [])
        validated_data.pop("keep_image_public_ids", None)
        return services.create_product(validated_data, images)

    def update(self, instance: Product, validated_data: dict[str, Any]) -> Product:
        images = validated_data.pop("images", [])
        keep = validated_data.pop("keep_image_public_ids", None)
        return services.update_product(
            instance,
            validated_data,
            keep_image_public_ids=keep,
            new_images=images,
        )

    def to_representation(self, instance: Product) -> dict[str, Any]:
        return ProductSerializer(instance, context=self.context).data


class StockUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=0)
    operation = serializers.ChoiceField(choices=["set", "increment", "decrement"], default="set")


class RebalanceItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=0)


class RebalanceSerializer(serializers.Serializer):
    items = RebalanceItemSerializer(many=True, allow_empty=False)


class BulkIdsSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)


class ImageDeleteSerializer(serializers.Serializer):
    public_id = serializers.CharField(max_length=500)


class StorefrontProductSerializer(serializers.ModelSerializer):
    badge = BadgeBriefSerializer(read_only=True)
    images = ProductImageSerializer(many=True, read_only=True)
    effective_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    image = serializers.CharField(source="primary_image_url", read_only=True)
    stock = serializers.IntegerField(source="stock_quantity", read_only=True)
    in_stock = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "slug",
            "description",
            "price",
            "sale_price",
            "effective_price",
            "category",
            "badge",
            "image",
            "images",
            "stock",
            "in_stock",
            "created_at",
        ]

    def get_in_stock(self, obj: Product) -> bool:
        return obj.stock_quantity > 0


class TopSellerSerializer(StorefrontProductSerializer):
    sold = serializers.IntegerField(read_only=True)

    class Meta(StorefrontProductSerializer.Meta):
        fields = StorefrontProductSerializer.Meta.fields + ["sold"]
