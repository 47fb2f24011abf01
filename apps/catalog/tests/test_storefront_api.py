"""Public storefront catalogue endpoints."""

from __future__ import annotations

from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.catalog.models import Badge, Inventory, Product
from apps.orders.models import Order, OrderItem


def make_product(name: str, price: str, *, category: str = "", sale_price: str | None = None, stock: int = 5, **extra):  # type: ignore
    product = Product.objects.create(
        name=name,
        slug=name.lower().replace(" ", "-"),
        price=Decimal(price),
        sale_price=Decimal(sale_price) if sale_price else None,
        category=category,
        **extra,
    )
    Inventory.objects.create(product=product, quantity=stock)
    return product


class StorefrontProductTests(APITestCase):
    def setUp(self) -> None:
        self.badge = Badge.objects.create(name="Hot")
        self.filter = make_product("Oil Filter", "1200", category="Engine", badge=self.badge)
        self.mats = make_product("Floor Mats", "4500", category="Interior", sale_price="3000")
        self.bulb = make_product("Xenon Bulb", "6000", category="Lighting", stock=0)
        make_product("Hidden Wiper", "900", category="Exterior", is_active=False)
        make_product("Old Stereo", "9000", category="Interior", is_archived=True)
        self.list_url = reverse("storefront-product-list")

    def _names(self, params=None) -> list[str]:  # type: ignore
        response = self.client.get(self.list_url, params or {})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        return [p["name"] for p in response.data["results"]]

    def test_lists_only_live_products(self) -> None:
        self.assertCountEqual(self._names(), ["Oil Filter", "Floor Mats", "Xenon Bulb"])

    def test_sort_by_effective_price(self) -> None:
        self.assertEqual(self._names({"sort": "price-low"}), ["Oil Filter", "Floor Mats", "Xenon Bulb"])
        self.assertEqual(self._names({"sort": "price-high"}), ["Xenon Bulb", "Floor Mats", "Oil Filter"])

    def test_price_filter_uses_sale_price(self) -> None:
        self.assertEqual(self._names({"max_price": "3500", "sort": "price-low"}), ["Oil Filter", "Floor Mats"])

    def test_category_and_tag_filters(self) -> None:
        self.assertCountEqual(self._names({"categories": "engine,lighting"}), ["Oil Filter", "Xenon Bulb"])
        self.assertEqual(self._names({"tags": str(self.badge.pk)}), ["Oil Filter"])
        self.assertEqual(self._names({"q": "mats"}), ["Floor Mats"])

    def test_detail_by_slug(self) -> None:
        response = self.client.get(reverse("storefront-product-detail", args=["xenon-bulb"]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["in_stock"])

        hidden = self.client.get(reverse("storefront-product-detail", args=["hidden-wiper"]))
        self.assertEqual(hidden.status_code, status.HTTP_404_NOT_FOUND)

    def test_price_range(self) -> None:
        response = self.client.get(reverse("storefront-product-price-range"))
        self.assertEqual(Decimal(str(response.data["min"])), Decimal("1200"))
        self.assertEqual(Decimal(str(response.data["max"])), Decimal("6000"))

    def test_price_range_defaults_when_empty(self) -> None:
        Product.objects.update(is_active=False)
        response = self.client.get(reverse("storefront-product-price-range"))
        self.assertEqual(Decimal(str(response.data["min"])), Decimal("0"))
        self.assertEqual(Decimal(str(response.data["max"])), Decimal("100000"))

    def test_top_sellers_skip_cancelled_orders(self) -> None:
        sold = Order.objects.create(customer_name="Ali", customer_phone="03001234567")
        OrderItem.objects.create(order=sold, product=self.mats, name="Floor Mats", price=Decimal("3000"), quantity=3)
        OrderItem.objects.create(order=sold, product=self.filter, name="Oil Filter", price=Decimal("1200"), quantity=1)
        cancelled = Order.objects.create(customer_name="Ali", customer_phone="03001234567", status="CANCELLED")
        OrderItem.objects.create(order=cancelled, product=self.bulb, name="Xenon Bulb", price=Decimal("6000"), quantity=9)

        response = self.client.get(reverse("storefront-product-top-sellers"))

        self.assertEqual([p["name"] for p in response.data["data"]], ["Floor Mats", "Oil Filter"])
        self.assertEqual(response.data["data"][0]["sold"], 3)

    def test_related_and_categories(self) -> None:
        make_product("Dash Cover", "2500", category="Interior")
        related = self.client.get(reverse("storefront-product-related", args=["floor-mats"]))
        self.assertEqual([p["name"] for p in related.data], ["Dash Cover"])

        categories = self.client.get(reverse("storefront-product-categories"))
        self.assertEqual(categories.data, ["Engine", "Interior", "Lighting"])

    def test_top_tags(self) -> None:
        response = self.client.get(reverse("storefront-product-top-tags"))
        self.assertEqual(response.data, [{"id": self.badge.pk, "name": "Hot", "color": "#3b82f6", "usage_count": 1}])
