"""API tests for team management."""

from __future__ import annotations

from django.core import mail
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import Admin, PasswordResetToken, User


class TeamAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(email="owner@example.com", password="Password123!")
        self.owner_access = Admin.objects.create(user=self.owner, full_name="Owner", role="Owner")
        self.client.force_authenticate(self.owner)

    def test_anonymous_gets_401(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.get(reverse("team-member-list"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_non_admin_gets_403(self) -> None:
        outsider = User.objects.create_user(email="outsider@example.com", password="Password123!")
        self.client.force_authenticate(outsider)
        response = self.client.get(reverse("team-member-list"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_inactive_admin_gets_403(self) -> None:
        self.owner_access.status = Admin.Status.INACTIVE
        self.owner_access.save()
        response = self.client.get(reverse("team-member-list"))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_members(self) -> None:
        response = self.client.get(reverse("team-member-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["email"], "owner@example.com")
        self.assertEqual(response.data[0]["role"], "Owner")

    def test_add_member_sends_invite(self) -> None:
        response = self.client.post(
            reverse("team-member-list"),
            {"email": "Mechanic@Example.com", "full_name": "Bilal", "role": "Manager"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["email"], "mechanic@example.com")

        user = User.objects.get(email="mechanic@example.com")
        self.assertFalse(user.has_usable_password())
        self.assertTrue(user.is_dashboard_admin())

        token = PasswordResetToken.objects.get(user=user)
        self.assertEqual(token.purpose, PasswordResetToken.Purpose.INVITE)
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn(token.code, mail.outbox[0].alternatives[0][0])

    def test_add_existing_member_is_rejected(self) -> None:
        response = self.client.post(
            reverse("team-member-list"),
            {"email": "owner@example.com", "full_name": "Owner again"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["success"])

    def test_update_member_role_and_status(self) -> None:
        other = User.objects.create_user(email="staff@example.com")
        member = Admin.objects.create(user=other, full_name="Staff")

        response = self.client.patch(
            reverse("team-member-detail", args=[member.pk]),
            {"role": "Manager", "status": "inactive"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        member.refresh_from_db()
        self.assertEqual(member.role, "Manager")
        self.assertEqual(member.status, Admin.Status.INACTIVE)
        self.assertFalse(other.is_dashboard_admin())

    def test_remove_member_keeps_account(self) -> None:
        other = User.objects.create_user(email="staff@example.com")
        member = Admin.objects.create(user=other, full_name="Staff")

        response = self.client.delete(reverse("team-member-detail", args=[member.pk]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Admin.objects.filter(pk=member.pk).exists())
        self.assertTrue(User.objects.filter(pk=other.pk).exists())

    def test_cannot_remove_self(self) -> None:
        response = self.client.delete(reverse("team-member-detail", args=[self.owner_access.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Admin.objects.filter(pk=self.owner_access.pk).exists())
