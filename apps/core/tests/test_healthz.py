from django.urls import reverse
from rest_framework.test import APITestCase


class HealthzTests(APITestCase):
    def test_reports_database_and_cache(self) -> None:
        response = self.client.get(reverse("healthz"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy", "database": "connected", "cache": "connected"})

    def test_rejects_post(self) -> None:
        self.assertEqual(self.client.post(reverse("healthz")).status_code, 405)
