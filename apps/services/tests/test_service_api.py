"""Workshop service catalogue API."""

from __future__ import annotations

from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.services.models import Service
from apps.services.services import service_titles
from apps.users.models import Admin, User


class ServiceAdminAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(email="owner@example.com", password="Password123!")
        Admin.objects.create(user=self.admin)
        self.client.force_authenticate(self.admin)

    def _create(self, **overrides):  # type: ignore
        payload = {"title": "Full Detailing", "price": "15000.00", "duration": 180}
        payload.update(overrides)
        return self.client.post(reverse("service-list"), payload, format="json")

    def test_create_derives_slug(self) -> None:
        response = self._create(
            features=["Interior vacuum", "Wax polish"],
            images=["https://cdn.example.com/detailing.jpg"],
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["slug"], "full-detailing")
        self.assertEqual(response.data["primary_image"], "https://cdn.example.com/detailing.jpg")
        self.assertEqual(response.data["location"], Service.Location.BOTH)

    def test_duplicate_slug_rejected(self) -> None:
        self._create()
        response = self._create()
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {"success": False, "error": "A service with this slug already exists"})

    def test_update_to_taken_slug_rejected(self) -> None:
        self._create()
        other = self._create(title="Engine Tuning").data
        response = self.client.patch(
            reverse("service-detail", args=[other["id"]]),
            {"slug": "full-detailing"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_toggle_active_and_stats(self) -> None:
        service_id = self._create().data["id"]
        self._create(title="Engine Tuning")

        response = self.client.post(reverse("service-toggle-active", args=[service_id]))
        self.assertFalse(response.data["is_active"])
        stats = self.client.get(reverse("service-stats")).data
        self.assertEqual(stats, {"total": 2, "active": 1, "inactive": 1})

    def test_requires_admin(self) -> None:
        self.client.force_authenticate(None)
        self.assertEqual(self.client.get(reverse("service-list")).status_code, status.HTTP_401_UNAUTHORIZED)


class PublicServiceAPITests(APITestCase):
    def setUp(self) -> None:
        self.wash = Service.objects.create(title="Car Wash", slug="car-wash", price=Decimal("1500"))
        self.hidden = Service.objects.create(title="Retired", slug="retired", price=Decimal("100"), is_active=False)

    def test_lists_active_services(self) -> None:
        response = self.client.get(reverse("public-service-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s["slug"] for s in response.data], ["car-wash"])

    def test_detail_by_slug(self) -> None:
        self.assertEqual(self.client.get(reverse("public-service-detail", args=["car-wash"])).data["title"], "Car Wash")
        hidden = self.client.get(reverse("public-service-detail", args=["retired"]))
        self.assertEqual(hidden.status_code, status.HTTP_404_NOT_FOUND)

    def test_titles_keep_requested_order_and_skip_inactive(self) -> None:
        tuning = Service.objects.create(title="Tuning", slug="tuning", price=Decimal("5000"))
        self.assertEqual(service_titles([tuning.pk, self.hidden.pk, self.wash.pk]), ["Tuning", "Car Wash"])
