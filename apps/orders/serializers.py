"""Serializers for orders and both checkout flows."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.core.validators import ADDRESS_MIN_LENGTH, NAME_MIN_LENGTH, PHONE_VALIDATOR, normalize_phone

from .models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    product_slug = serializers.CharField(source="product.slug", read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = ["id", "product", "product_slug", "name", "price", "quantity", "line_total"]


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer",
            "customer_name",
            "customer_phone",
            "customer_email",
            "address",
            "subtotal",
            "total",
            "status",
            "notes",
            "whatsapp_sent",
            "items",
            "item_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_item_count(self, obj) -> int:  # type: ignore
        return sum(item.quantity for item in obj.items.all())


class OrderUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = ["customer_name", "customer_phone", "customer_email", "address", "notes", "whatsapp_sent"]
        extra_kwargs = {
            "customer_name": {"validators": [NAME_MIN_LENGTH]},
            "customer_phone": {"validators": [PHONE_VALIDATOR]},
        }


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)
    notes = serializers.CharField(required=False, allow_blank=True)


class _CustomerFieldsSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, validators=[NAME_MIN_LENGTH])
    phone = serializers.CharField(max_length=20, validators=[PHONE_VALIDATOR])
    email = serializers.EmailField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate_phone(self, value: str) -> str:
        return normalize_phone(value)


class AdminOrderItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)


class AdminOrderCreateSerializer(_CustomerFieldsSerializer):
    address = serializers.CharField(required=False, allow_blank=True)
    items = AdminOrderItemSerializer(many=True, allow_empty=False)


class CartItemSerializer(serializers.Serializer):
    """A cart line; ``product`` is the product id or slug."""

    product = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1, max_value=999)


class CheckoutSerializer(_CustomerFieldsSerializer):
    address = serializers.CharField(validators=[ADDRESS_MIN_LENGTH])
    items = CartItemSerializer(many=True, allow_empty=False)


class UnifiedCheckoutSerializer(_CustomerFieldsSerializer):
    address = serializers.CharField(required=False, allow_blank=True)
    vehicle_info = serializers.CharField(required=False, allow_blank=True)
    cart_items = CartItemSerializer(many=True, required=False, default=list)
    services = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)
    booking_date = serializers.DateField(required=False)
    time_slot = serializers.RegexField(r"^\d{2}:\d{2}$", required=False, allow_blank=True)

    def validate(self, attrs):  # type: ignore
        if not attrs.get("cart_items") and not attrs.get("services"):
            raise serializers.ValidationError("Add at least one product or service.")
        return attrs
