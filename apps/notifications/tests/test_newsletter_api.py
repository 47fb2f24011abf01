"""API tests for notification settings and the newsletter."""

from __future__ import annotations

import base64
from unittest import mock

from django.core import mail
from django.core.cache import cache
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.notifications.models import NewsletterSubscriber, NotificationSettings
from apps.notifications.services import unsubscribe_url
from apps.users.models import Admin, User


class NotificationSettingsAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(email="owner@example.com", password="Password123!")
        Admin.objects.create(user=self.admin)
        self.client.force_authenticate(self.admin)

    def test_get_creates_defaults(self) -> None:
        response = self.client.get(reverse("notification-settings"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["new_order_email"])
        self.assertFalse(response.data["order_status_email"])
        self.assertFalse(response.data["order_confirm_sms"])
        self.assertEqual(NotificationSettings.objects.count(), 1)

    def test_patch_updates_single_row(self) -> None:
        response = self.client.patch(
            reverse("notification-settings"),
            {"stale_order_email": False},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertFalse(NotificationSettings.load().stale_order_email)
        self.assertEqual(NotificationSettings.objects.count(), 1)

    def test_requires_admin(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.get(reverse("notification-settings"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class NewsletterAPITests(APITestCase):
    def setUp(self) -> None:
        cache.clear()

    def test_subscribe_sends_welcome(self) -> None:
        response = self.client.post(
            reverse("newsletter-subscribe"),
            {"email": "Fan@Example.com"},
            format="json",
            HTTP_USER_AGENT="pytest",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

        subscriber = NewsletterSubscriber.objects.get(email="fan@example.com")
        self.assertTrue(subscriber.subscribed)
        self.assertEqual(subscriber.user_agent, "pytest")
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["fan@example.com"])
        self.assertIn("unsubscribe", mail.outbox[0].alternatives[0][0])

    def test_resubscribe_updates_existing_row(self) -> None:
        NewsletterSubscriber.objects.create(email="fan@example.com", subscribed=False)
        response = self.client.post(reverse("newsletter-subscribe"), {"email": "fan@example.com"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(NewsletterSubscriber.objects.count(), 1)
        subscriber = NewsletterSubscriber.objects.get()
        self.assertTrue(subscriber.subscribed)
        self.assertIsNone(subscriber.unsubscribed_at)

    def test_welcome_failure_notifies_admin(self) -> None:
        with mock.patch("apps.notifications.newsletter.send_newsletter_welcome_email", return_value=False):
            response = self.client.post(
                reverse("newsletter-subscribe"), {"email": "fan@example.com"}, format="json"
            )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["owner@shahzaibautos.pk"])
        self.assertIn("fan@example.com", mail.outbox[0].body)

    def test_invalid_email_rejected(self) -> None:
        response = self.client.post(reverse("newsletter-subscribe"), {"email": "nope"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_rate_limited_after_ten_per_hour(self) -> None:
        url = reverse("newsletter-subscribe")
        for i in range(10):
            response = self.client.post(url, {"email": f"fan{i}@example.com"}, format="json")
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.post(url, {"email": "late@example.com"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertFalse(NewsletterSubscriber.objects.filter(email="late@example.com").exists())

    def test_unsubscribe_link(self) -> None:
        NewsletterSubscriber.objects.create(email="fan@example.com")
        link = unsubscribe_url("fan@example.com")
        token = link.split("email=")[1]

        response = self.client.get(reverse("newsletter-unsubscribe"), {"email": token})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("text/html", response["Content-Type"])
        self.assertIn(b"fan@example.com", response.content)

        subscriber = NewsletterSubscriber.objects.get()
        self.assertFalse(subscriber.subscribed)
        self.assertIsNotNone(subscriber.unsubscribed_at)

    def test_unsubscribe_accepts_standard_base64(self) -> None:
        NewsletterSubscriber.objects.create(email="fan@example.com")
        token = base64.b64encode(b"fan@example.com").decode()
        response = self.client.get(reverse("newsletter-unsubscribe"), {"e": token})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(NewsletterSubscriber.objects.get().subscribed)

    def test_unsubscribe_missing_param(self) -> None:
        response = self.client.get(reverse("newsletter-unsubscribe"))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unsubscribe_garbage_param(self) -> None:
        response = self.client.get(reverse("newsletter-unsubscribe"), {"email": "%%%"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
