"""API tests for dashboard inventory management."""

from __future__ import annotations

from decimal import Decimal
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.catalog.models import Badge, Inventory, Product, ProductImage
from apps.catalog.services import generate_slug
from apps.orders.models import Order, OrderItem
from apps.users.models import Admin, User


class ProductAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(email="owner@example.com", password="Password123!")
        Admin.objects.create(user=self.admin)
        self.client.force_authenticate(self.admin)
        self.list_url = reverse("product-list")

    def _create(self, **overrides):  # type: ignore
        payload = {"name": "LED Headlight", "price": "8500.00", "category": "Lighting", "stock": 20}
        payload.update(overrides)
        return self.client.post(self.list_url, payload, format="json")

    def test_requires_admin(self) -> None:
        self.client.force_authenticate(None)
        self.assertEqual(self.client.get(self.list_url).status_code, status.HTTP_401_UNAUTHORIZED)
        outsider = User.objects.create_user(email="outsider@example.com", password="Password123!")
        self.client.force_authenticate(outsider)
        self.assertEqual(self.client.get(self.list_url).status_code, status.HTTP_403_FORBIDDEN)

    def test_create_generates_unique_slug_and_inventory(self) -> None:
        first = self._create(images=[{"url": "https://cdn.example.com/a.jpg", "public_id": "products/a.jpg"}])
        second = self._create()

        self.assertEqual(first.status_code, status.HTTP_201_CREATED, first.data)
        self.assertEqual(first.data["slug"], "led-headlight")
        self.assertEqual(second.data["slug"], "led-headlight-1")
        self.assertEqual(first.data["inventory"]["quantity"], 20)
        self.assertEqual(first.data["status"], Product.Status.ACTIVE)
        self.assertTrue(first.data["images"][0]["is_primary"])

    def test_create_without_stock_is_out_of_stock(self) -> None:
        response = self._create(stock=0)
        self.assertEqual(response.data["status"], Product.Status.OUT_OF_STOCK)

    def test_sale_price_cannot_exceed_price(self) -> None:
        response = self._create(sale_price="9000.00")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("sale_price", response.data)

    def test_duplicate_sku_rejected(self) -> None:
        self._create(sku="HL-01")
        response = self._create(name="Fog Light", sku="HL-01")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("sku", response.data)

    def test_update_syncs_images_with_storage(self) -> None:
        created = self._create(
            images=[
                {"url": "https://cdn.example.com/a.jpg", "public_id": "products/a.jpg"},
                {"url": "https://cdn.example.com/b.jpg", "public_id": "products/b.jpg"},
            ]
        )
        url = reverse("product-detail", args=[created.data["id"]])

        with mock.patch("apps.catalog.services.get_image_storage") as storage:
            response = self.client.patch(
                url,
                {
                    "keep_image_public_ids": ["products/a.jpg"],
                    "images": [{"url": "https://cdn.example.com/c.jpg", "public_id": "products/c.jpg"}],
                },
                format="json",
            )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        deleted = list(storage.return_value.delete_many.call_args.args[0])
        self.assertEqual(deleted, ["products/b.jpg"])
        self.assertEqual(
            sorted(ProductImage.objects.values_list("public_id", flat=True)),
            ["products/a.jpg", "products/c.jpg"],
        )

    def test_stock_update_rederives_status(self) -> None:
        product_id = self._create(stock=2).data["id"]
        url = reverse("product-stock", args=[product_id])

        response = self.client.post(url, {"quantity": 5, "operation": "decrement"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["inventory"]["quantity"], 0)
        self.assertEqual(response.data["status"], Product.Status.OUT_OF_STOCK)

        response = self.client.post(url, {"quantity": 4, "operation": "increment"}, format="json")
        self.assertEqual(response.data["inventory"]["quantity"], 4)
        self.assertEqual(response.data["status"], Product.Status.ACTIVE)

    def test_lookup_by_slug(self) -> None:
        self._create()
        response = self.client.get(reverse("product-detail", args=["led-headlight"]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["name"], "LED Headlight")

    def test_all_digit_slug_falls_back_to_slug_lookup(self) -> None:
        first = self._create(name="Wiper Blade").data
        numeric = self._create(name="2024").data
        self.assertEqual(numeric["slug"], "2024")

        by_slug = self.client.get(reverse("product-detail", args=["2024"]))
        self.assertEqual(by_slug.status_code, status.HTTP_200_OK)
        self.assertEqual(by_slug.data["id"], numeric["id"])

        by_id = self.client.get(reverse("product-detail", args=[first["id"]]))
        self.assertEqual(by_id.data["name"], "Wiper Blade")

    def test_archive_hides_from_default_list(self) -> None:
        product_id = self._create().data["id"]
        response = self.client.post(reverse("product-archive", args=[product_id]))
        self.assertEqual(response.data["status"], Product.Status.ARCHIVED)
        self.assertFalse(response.data["is_active"])

        self.assertEqual(self.client.get(self.list_url).data["count"], 0)
        self.assertEqual(self.client.get(self.list_url, {"archived": "true"}).data["count"], 1)

        response = self.client.post(reverse("product-unarchive", args=[product_id]))
        self.assertEqual(response.data["status"], Product.Status.ACTIVE)
        self.assertTrue(response.data["is_active"])

    def test_delete_blocked_by_orders(self) -> None:
        product = Product.objects.get(pk=self._create().data["id"])
        order = Order.objects.create(customer_name="Ali Raza", customer_phone="03001234567")
        OrderItem.objects.create(order=order, product=product, name=product.name, price=product.price, quantity=1)

        response = self.client.delete(reverse("product-detail", args=[product.pk]))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Cannot delete product with 1 order(s). Archive it instead.")
        self.assertTrue(Product.objects.filter(pk=product.pk).exists())

    def test_bulk_delete_reports_failures(self) -> None:
        free = Product.objects.get(pk=self._create().data["id"])
        sold = Product.objects.get(pk=self._create(name="Fog Light").data["id"])
        order = Order.objects.create(customer_name="Ali Raza", customer_phone="03001234567")
        OrderItem.objects.create(order=order, product=sold, name=sold.name, price=sold.price, quantity=2)

        response = self.client.post(reverse("product-bulk-delete"), {"ids": [free.pk, sold.pk, 999]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["deleted"], [free.pk])
        self.assertEqual([f["id"] for f in response.data["failed"]], [sold.pk, 999])

    def test_rebalance_and_stock_details(self) -> None:
        product = Product.objects.get(pk=self._create().data["id"])
        response = self.client.post(
            reverse("product-rebalance"),
            {"items": [{"product_id": product.pk, "quantity": 7}, {"product_id": 999, "quantity": 1}]},
            format="json",
        )
        self.assertEqual(response.data["updated_count"], 1)
        self.assertEqual(response.data["errors"], ["Product 999: not found"])

        for status_value, qty in (("NEW", 2), ("DELIVERED", 3), ("CANCELLED", 4)):
            order = Order.objects.create(customer_name="Ali Raza", customer_phone="03001234567", status=status_value)
            OrderItem.objects.create(order=order, product=product, name=product.name, price=product.price, quantity=qty)

        response = self.client.get(reverse("product-stock-details", args=[product.pk]))
        self.assertEqual(response.data, {"available": 7, "reserved": 2, "sold": 3})

    def test_low_stock_and_categories(self) -> None:
        self._create(stock=3)
        self._create(name="Seat Cover", category="Interior", stock=50)
        low = self.client.get(reverse("product-low-stock")).data
        self.assertEqual([p["name"] for p in low], ["LED Headlight"])
        self.assertEqual(self.client.get(reverse("product-categories")).data, ["Interior", "Lighting"])

    def test_upload_image(self) -> None:
        upload = SimpleUploadedFile("photo.jpg", b"fake", content_type="image/jpeg")
        with mock.patch("apps.catalog.views.get_image_storage") as storage:
            storage.return_value.upload.return_value = {"url": "https://cdn.example.com/x.jpg", "public_id": "products/x.jpg"}
            response = self.client.post(reverse("product-upload-image"), {"file": upload}, format="multipart")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["public_id"], "products/x.jpg")

    def test_generate_slug_suffixes(self) -> None:
        Product.objects.create(name="Wiper", slug="wiper", price=Decimal("500"))
        Product.objects.create(name="Wiper", slug="wiper-1", price=Decimal("500"))
        self.assertEqual(generate_slug("Wiper"), "wiper-2")


class BadgeAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(email="owner@example.com", password="Password123!")
        Admin.objects.create(user=self.admin)
        self.client.force_authenticate(self.admin)
        self.badge = Badge.objects.create(name="Hot Deal", color="#ef4444")
        self.product = Product.objects.create(name="Wiper", slug="wiper", price=Decimal("500"), badge=self.badge)
        Inventory.objects.create(product=self.product, quantity=5)

    def test_list_has_usage_counts(self) -> None:
        response = self.client.get(reverse("badge-list"))
        self.assertEqual(response.data[0]["usage_count"], 1)

    def test_delete_badge_clears_products(self) -> None:
        response = self.client.delete(reverse("badge-detail", args=[self.badge.pk]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.product.refresh_from_db()
        self.assertIsNone(self.product.badge)

    def test_active_list_is_public(self) -> None:
        Badge.objects.create(name="Retired", is_active=False)
        self.client.force_authenticate(None)
        response = self.client.get(reverse("badge-active"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([b["name"] for b in response.data], ["Hot Deal"])
