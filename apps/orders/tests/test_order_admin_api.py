"""API tests for dashboard order management and the stale-order sweep."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.core import mail
from django.test import override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.catalog.models import Inventory, Product
from apps.notifications.models import NotificationSettings
from apps.orders.models import Order, OrderItem
from apps.orders.tasks import check_stale_orders
from apps.users.models import Admin, User


def create_order(product: Product, quantity: int = 1, **fields) -> Order:  # type: ignore
    defaults = {"customer_name": "Ali Raza", "customer_phone": "03001234567", "total": product.price * quantity}
    defaults.update(fields)
    order = Order.objects.create(**defaults)
    OrderItem.objects.create(order=order, product=product, name=product.name, price=product.price, quantity=quantity)
    return order


class OrderAdminAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(email="owner@example.com", password="Password123!")
        Admin.objects.create(user=self.admin)
        self.client.force_authenticate(self.admin)
        self.product = Product.objects.create(name="Brake Pads", slug="brake-pads", price=Decimal("2500"))
        Inventory.objects.create(product=self.product, quantity=0)
        self.product.status = Product.Status.OUT_OF_STOCK
        self.product.save()

    def test_requires_admin(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.get(reverse("order-list"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_search_and_status_filter(self) -> None:
        create_order(self.product, customer_name="Bilal Khan")
        create_order(self.product, customer_name="Sana Iqbal", status=Order.Status.SHIPPED)

        response = self.client.get(reverse("order-list"), {"search": "bilal"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["customer_name"], "Bilal Khan")

        response = self.client.get(reverse("order-list"), {"status": "SHIPPED"})
        self.assertEqual(response.data["count"], 1)

    def test_retrieve_by_order_number(self) -> None:
        order = create_order(self.product)
        response = self.client.get(reverse("order-detail", args=[order.order_number]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["id"], order.pk)
        self.assertEqual(len(response.data["items"]), 1)

    def test_admin_create_leaves_stock_untouched(self) -> None:
        response = self.client.post(
            reverse("order-list"),
            {
                "name": "Walk-in Customer",
                "phone": "03111234567",
                "items": [{"product_id": self.product.pk, "quantity": 2, "price": "2000"}],
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["total"], "4000.00")
        self.assertEqual(Inventory.objects.get(product=self.product).quantity, 0)

    def test_cancel_restores_stock_once(self) -> None:
        order = create_order(self.product, quantity=3)
        url = reverse("order-change-status", args=[order.pk])

        response = self.client.post(url, {"status": "CANCELLED"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["whatsapp_url"].startswith("https://wa.me/03001234567?text="))
        self.assertEqual(Inventory.objects.get(product=self.product).quantity, 3)
        self.product.refresh_from_db()
        self.assertEqual(self.product.status, Product.Status.ACTIVE)

        self.client.post(url, {"status": "CONFIRMED"}, format="json")
        self.client.post(url, {"status": "CANCELLED"}, format="json")
        self.assertEqual(Inventory.objects.get(product=self.product).quantity, 3)

    def test_status_email_respects_toggle(self) -> None:
        order = create_order(self.product, customer_email="ali@example.com")
        url = reverse("order-change-status", args=[order.pk])

        self.client.post(url, {"status": "CONFIRMED"}, format="json")
        self.assertEqual(len(mail.outbox), 0)

        NotificationSettings.objects.filter(pk=1).update(order_status_email=True)
        self.client.post(url, {"status": "SHIPPED"}, format="json")
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["ali@example.com"])

    def test_invalid_status_rejected(self) -> None:
        order = create_order(self.product)
        response = self.client.post(reverse("order-change-status", args=[order.pk]), {"status": "LOST"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_stats(self) -> None:
        create_order(self.product)
        create_order(self.product, status=Order.Status.SHIPPED, total=Decimal("1000"))
        create_order(self.product, status=Order.Status.DELIVERED, total=Decimal("1500"))
        create_order(self.product, status=Order.Status.CANCELLED, total=Decimal("9000"))

        response = self.client.get(reverse("order-stats"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], 4)
        self.assertEqual(response.data["new"], 1)
        self.assertEqual(response.data["revenue"], Decimal("2500"))
        self.assertEqual(response.data["by_status"]["CANCELLED"], 1)
        self.assertEqual(response.data["by_status"]["STALE"], 0)

    def test_recent_returns_five(self) -> None:
        for _ in range(7):
            create_order(self.product)
        response = self.client.get(reverse("order-recent"))
        self.assertEqual(len(response.data), 5)

    def test_delete_order(self) -> None:
        order = create_order(self.product)
        response = self.client.delete(reverse("order-detail", args=[order.pk]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Order.objects.exists())


class StaleOrderSweepTests(APITestCase):
    def setUp(self) -> None:
        self.product = Product.objects.create(name="Brake Pads", slug="brake-pads", price=Decimal("2500"))
        self.url = reverse("cron-check-stale-orders")

    def _backdate(self, order: Order, hours: int) -> None:
        Order.objects.filter(pk=order.pk).update(created_at=timezone.now() - timedelta(hours=hours))

    def test_marks_only_old_new_orders(self) -> None:
        old = create_order(self.product)
        self._backdate(old, 30)
        fresh = create_order(self.product)
        old_confirmed = create_order(self.product, status=Order.Status.CONFIRMED)
        self._backdate(old_confirmed, 30)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["stale_count"], 1)
        self.assertEqual(response.data["order_numbers"], [old.order_number])
        old.refresh_from_db()
        fresh.refresh_from_db()
        old_confirmed.refresh_from_db()
        self.assertEqual(old.status, Order.Status.STALE)
        self.assertEqual(fresh.status, Order.Status.NEW)
        self.assertEqual(old_confirmed.status, Order.Status.CONFIRMED)

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["owner@shahzaibautos.pk"])
        self.assertIn("1 Stale Order Detected", mail.outbox[0].subject)
        self.assertIn("/admin/dashboard/orders?status=STALE", mail.outbox[0].alternatives[0][0])

    def test_second_run_is_a_no_op(self) -> None:
        self._backdate(create_order(self.product), 30)
        self.client.get(self.url)
        response = self.client.get(self.url)
        self.assertEqual(response.data, {"success": True, "message": "No stale orders found.", "stale_count": 0})
        self.assertEqual(len(mail.outbox), 1)

    def test_email_toggle_off_still_marks(self) -> None:
        NotificationSettings.objects.create(pk=1, stale_order_email=False)
        order = create_order(self.product)
        self._backdate(order, 48)
        response = self.client.get(self.url)
        self.assertEqual(response.data["stale_count"], 1)
        self.assertEqual(len(mail.outbox), 0)

    @override_settings(STALE_ORDER_HOURS=6)
    def test_cutoff_and_email_follow_configured_hours(self) -> None:
        order = create_order(self.product)
        self._backdate(order, 8)

        response = self.client.get(self.url)

        self.assertEqual(response.data["stale_count"], 1)
        body = mail.outbox[0].alternatives[0][0]
        self.assertIn("waiting for more than 6 hours", body)
        self.assertNotIn("24 hours", body)

    @override_settings(CRON_SECRET="s3cret")
    def test_secret_is_enforced(self) -> None:
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data, {"success": False, "error": "Unauthorized"})

        response = self.client.get(self.url, HTTP_AUTHORIZATION="Bearer s3cret")
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_failure_returns_500(self) -> None:
        with mock.patch("apps.orders.views.services.check_stale_orders", side_effect=RuntimeError("db down")):
            response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data["error"], "Failed to check stale orders")
        self.assertEqual(response.data["details"], "db down")

    def test_celery_task_runs_the_same_sweep(self) -> None:
        self._backdate(create_order(self.product), 25)
        result = check_stale_orders.delay().get()
        self.assertEqual(result["stale_count"], 1)
        self.assertEqual(Order.objects.get().status, Order.Status.STALE)
