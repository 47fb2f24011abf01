"""API tests for the contact form and the lead inbox."""

from __future__ import annotations

from urllib.parse import unquote

from django.core import mail
from django.core.cache import cache
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.leads.models import Lead
from apps.notifications.models import NotificationSettings
from apps.users.models import Admin, User


class ContactFormAPITests(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        self.url = reverse("lead-contact")
        self.payload = {
            "name": "Usman Tariq",
            "email": "usman@example.com",
            "phone": "03331234567",
            "subject": "Body kit",
            "message": "Do you have a body kit for the 2020 Civic?",
        }

    def test_creates_lead_and_notifies_admin(self) -> None:
        response = self.client.post(self.url, self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["success"])
        lead = Lead.objects.get()
        self.assertEqual(lead.source, Lead.Source.CONTACT_FORM)
        self.assertEqual(lead.status, Lead.Status.NEW)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["owner@shahzaibautos.pk"])

    def test_visitor_cannot_set_status(self) -> None:
        self.client.post(self.url, {**self.payload, "status": "CONVERTED", "notes": "vip"}, format="json")
        lead = Lead.objects.get()
        self.assertEqual(lead.status, Lead.Status.NEW)
        self.assertEqual(lead.notes, "")

    def test_email_toggle_off(self) -> None:
        NotificationSettings.objects.create(pk=1, new_lead_email=False)
        self.client.post(self.url, self.payload, format="json")
        self.assertEqual(len(mail.outbox), 0)

    def test_short_message_rejected(self) -> None:
        response = self.client.post(self.url, {**self.payload, "message": "hi"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("message", response.data)


class LeadAdminAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(email="owner@example.com", password="Password123!")
        Admin.objects.create(user=self.admin)
        self.client.force_authenticate(self.admin)
        self.lead = Lead.objects.create(
            name="Usman Tariq",
            phone="03331234567",
            message="Do you have a body kit for the 2020 Civic?",
        )
        Lead.objects.create(
            name="Hina Malik",
            phone="03451234567",
            message="Call me back about alloy rims please.",
            source=Lead.Source.WHATSAPP,
            status=Lead.Status.CONTACTED,
        )

    def test_requires_admin(self) -> None:
        self.client.force_authenticate(None)
        self.assertEqual(self.client.get(reverse("lead-list")).status_code, status.HTTP_401_UNAUTHORIZED)

    def test_filter_and_search(self) -> None:
        response = self.client.get(reverse("lead-list"), {"source": "WHATSAPP"})
        self.assertEqual(response.data["count"], 1)
        response = self.client.get(reverse("lead-list"), {"search": "civic"})
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["id"], self.lead.pk)

    def test_update_status(self) -> None:
        response = self.client.post(
            reverse("lead-change-status", args=[self.lead.pk]),
            {"status": "QUALIFIED", "notes": "Wants a quote"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.lead.refresh_from_db()
        self.assertEqual(self.lead.status, Lead.Status.QUALIFIED)
        self.assertEqual(self.lead.notes, "Wants a quote")

    def test_stats(self) -> None:
        response = self.client.get(reverse("lead-stats"))
        self.assertEqual(response.data["total"], 2)
        self.assertEqual(response.data["new"], 1)
        self.assertEqual(response.data["by_source"]["WHATSAPP"], 1)
        self.assertEqual(response.data["by_source"]["REFERRAL"], 0)
        self.assertEqual(response.data["by_status"]["CONTACTED"], 1)

    def test_whatsapp_links(self) -> None:
        response = self.client.get(reverse("lead-whatsapp", args=[self.lead.pk]))
        ack = unquote(response.data["acknowledgment_url"])
        self.assertTrue(ack.startswith("https://wa.me/03331234567?text="))
        self.assertIn("Hi Usman Tariq!", ack)
        self.assertTrue(response.data["internal_url"].startswith("https://wa.me/923001234567?text="))

    def test_recent(self) -> None:
        response = self.client.get(reverse("lead-recent"))
        self.assertEqual(len(response.data), 2)
