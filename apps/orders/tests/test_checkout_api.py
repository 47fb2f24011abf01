"""API tests for storefront checkout and the unified cart + services checkout."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from urllib.parse import unquote

from django.core import mail
from django.core.cache import cache
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.catalog.models import Inventory, Product
from apps.customers.models import Customer
from apps.orders.models import Order
from apps.services.models import Service


def make_product(name: str, price: str, stock: int, sale_price: str | None = None) -> Product:
    product = Product.objects.create(
        name=name,
        slug=name.lower().replace(" ", "-"),
        price=Decimal(price),
        sale_price=Decimal(sale_price) if sale_price else None,
    )
    Inventory.objects.create(product=product, quantity=stock)
    return product


class CheckoutAPITests(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        self.oil = make_product("Engine Oil 4L", "5000", 10, sale_price="4500")
        self.filter = make_product("Air Filter", "1200", 1)
        self.url = reverse("checkout")

    def _payload(self, **overrides):  # type: ignore
        payload = {
            "name": "Ali Raza",
            "phone": "03001234567",
            "email": "ali@example.com",
            "address": "House 12, Street 4, Lahore",
            "items": [
                {"product": self.oil.pk, "quantity": 2},
                {"product": "air-filter", "quantity": 1},
            ],
        }
        payload.update(overrides)
        return payload

    def test_checkout_creates_order_and_decrements_stock(self) -> None:
        response = self.client.post(self.url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        order = Order.objects.get(pk=response.data["order_id"])
        self.assertEqual(order.status, Order.Status.NEW)
        self.assertTrue(order.order_number.startswith("ORD-"))
        self.assertEqual(response.data["order_number"], order.order_number)
        # Sale price wins over the list price
        self.assertEqual(order.total, Decimal("10200.00"))
        self.assertEqual(order.items.count(), 2)

        self.assertEqual(Inventory.objects.get(product=self.oil).quantity, 8)
        self.assertEqual(Inventory.objects.get(product=self.filter).quantity, 0)
        self.filter.refresh_from_db()
        self.assertEqual(self.filter.status, Product.Status.OUT_OF_STOCK)

    def test_cart_item_with_numeric_slug(self) -> None:
        model_year = make_product("2024", "3000", 5)
        self.assertNotEqual(model_year.pk, 2024)

        response = self.client.post(
            self.url,
            self._payload(items=[{"product": "2024", "quantity": 1}]),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Inventory.objects.get(product=model_year).quantity, 4)

    def test_checkout_upserts_customer_by_phone(self) -> None:
        Customer.objects.create(name="Old Name", phone="03001234567")
        response = self.client.post(self.url, self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Customer.objects.count(), 1)
        customer = Customer.objects.get()
        self.assertEqual(customer.name, "Ali Raza")
        self.assertEqual(Order.objects.get().customer, customer)

    def test_whatsapp_url_targets_business_phone(self) -> None:
        response = self.client.post(self.url, self._payload(), format="json")
        url = response.data["whatsapp_url"]
        self.assertTrue(url.startswith("https://wa.me/923001234567?text="))
        self.assertIn(response.data["order_number"], unquote(url))

    def test_sends_admin_and_customer_emails(self) -> None:
        self.client.post(self.url, self._payload(), format="json")
        recipients = sorted(message.to[0] for message in mail.outbox)
        self.assertEqual(recipients, ["ali@example.com", "owner@shahzaibautos.pk"])

    def test_insufficient_stock_rolls_back(self) -> None:
        payload = self._payload(items=[{"product": self.oil.pk, "quantity": 1}, {"product": self.filter.pk, "quantity": 2}])
        response = self.client.post(self.url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["error"], 'Insufficient stock for "Air Filter". Only 1 available.')
        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(Inventory.objects.get(product=self.oil).quantity, 10)

    def test_archived_product_cannot_be_ordered(self) -> None:
        self.oil.is_archived = True
        self.oil.save()
        response = self.client.post(self.url, self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Order.objects.count(), 0)

    def test_validation_errors(self) -> None:
        response = self.client.post(self.url, self._payload(address="Shop", items=[]), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("address", response.data)
        self.assertIn("items", response.data)

    def test_invalid_phone_rejected(self) -> None:
        response = self.client.post(self.url, self._payload(phone="12ab"), format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("phone", response.data)


class UnifiedCheckoutAPITests(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        self.oil = make_product("Engine Oil 4L", "5000", 5)
        self.tuning = Service.objects.create(title="Engine Tuning", slug="engine-tuning", price=Decimal("3000"))
        self.wash = Service.objects.create(title="Car Wash", slug="car-wash", price=Decimal("800"))
        self.url = reverse("checkout-unified")

    def test_cart_and_services_create_linked_booking(self) -> None:
        response = self.client.post(
            self.url,
            {
                "name": "Ali Raza",
                "phone": "03001234567",
                "cart_items": [{"product": "engine-oil-4l", "quantity": 1}],
                "services": [self.tuning.pk, self.wash.pk],
                "vehicle_info": "Honda Civic 2019",
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        order = Order.objects.get()
        booking = Booking.objects.get()
        self.assertEqual(booking.order, order)
        self.assertEqual(booking.status, Booking.Status.PENDING)
        self.assertEqual(booking.service_type, "Engine Tuning, Car Wash")
        self.assertEqual(booking.address, "Workshop")
        self.assertEqual(booking.date, timezone.localdate())
        self.assertEqual(Decimal(response.data["total"]), Decimal("8800"))

        message = unquote(response.data["whatsapp_url"])
        self.assertIn("Hello Shahzaib Autos! I would like to place an order/booking.", message)
        self.assertIn(f"#{order.order_number}", message)
        self.assertIn("1x Engine Oil 4L (PKR 5,000)", message)
        self.assertIn("*Services Required:* Engine Tuning, Car Wash", message)

    def test_services_only_uses_booking_reference(self) -> None:
        tomorrow = timezone.localdate() + timedelta(days=1)
        response = self.client.post(
            self.url,
            {
                "name": "Ali Raza",
                "phone": "03001234567",
                "services": [self.wash.pk],
                "booking_date": str(tomorrow),
                "address": "House 12, Street 4, Lahore",
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIsNone(response.data["order_number"])
        booking = Booking.objects.get()
        self.assertIsNone(booking.order)
        self.assertEqual(booking.date, tomorrow)
        self.assertIn(f"#{booking.booking_number}", unquote(response.data["whatsapp_url"]))
        self.assertIn("*Items:* None", unquote(response.data["whatsapp_url"]))

    def test_empty_checkout_rejected(self) -> None:
        response = self.client.post(self.url, {"name": "Ali Raza", "phone": "03001234567"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Order.objects.count() + Booking.objects.count(), 0)

    def test_stock_is_enforced(self) -> None:
        response = self.client.post(
            self.url,
            {
                "name": "Ali Raza",
                "phone": "03001234567",
                "cart_items": [{"product": self.oil.pk, "quantity": 6}],
                "services": [self.wash.pk],
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Booking.objects.count(), 0)
