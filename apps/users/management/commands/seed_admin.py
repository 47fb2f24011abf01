from __future__ import annotations

import os

from django.core.management.base import BaseCommand, CommandError  # type: ignore
from django.db import transaction  # type: ignore

from apps.users.models import Admin, CustomUser


class Command(BaseCommand):
    help = "Create the first dashboard admin from ADMIN_EMAIL, ADMIN_PASSWORD and ADMIN_NAME"

    def add_arguments(self, parser):  # type: ignore
        parser.add_argument("--email", default=os.environ.get("ADMIN_EMAIL", ""))
        parser.add_argument("--password", default=os.environ.get("ADMIN_PASSWORD", ""))
        parser.add_argument("--name", default=os.environ.get("ADMIN_NAME", "Admin"))

    @transaction.atomic
    def handle(self, *args, **options):  # type: ignore
        email = (options["email"] or "").strip().lower()
        password = options["password"]
        name = options["name"]
        if not email or not password:
            raise CommandError("ADMIN_EMAIL and ADMIN_PASSWORD are required.")

        user, created = CustomUser.objects.get_or_create(
            email=email,
            defaults={"full_name": name, "is_staff": True, "is_superuser": True},
        )
        if created:
            user.set_password(password)
            user.save(update_fields=["password"])

        _access, granted = Admin.objects.get_or_create(
            user=user,
            defaults={"full_name": name, "role": "Owner"},
        )

        if created:
            self.stdout.write(self.style.SUCCESS(f"Created admin {email}"))
        elif granted:
            self.stdout.write(self.style.SUCCESS(f"Granted dashboard access to {email}"))
        else:
            self.stdout.write(f"Admin {email} already exists")
