# users/management/commands/seed_users.py

from __future__ import annotations

from dataclasses import dataclass

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from users.permissions import ROLE_CASHIER, ROLE_MANAGER, ROLE_OWNER


@dataclass(frozen=True)
class SeedUser:
    label: str
    role: str
    email: str
    name: str = ""


SEED_USERS = [
    SeedUser("Owner", ROLE_OWNER, "owner@example.com", "Shop Owner"),
    SeedUser("Manager", ROLE_MANAGER, "manager@example.com", "Floor Manager"),
    SeedUser("Cashier", ROLE_CASHIER, "cashier@example.com", "Front Till"),
]


class Command(BaseCommand):
    help = "Seed one staff account per role (owner, manager, cashier)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            type=str,
            default="Pass1234!",
            help="Password for seeded users (default: Pass1234!)",
        )
        parser.add_argument(
            "--force-password",
            action="store_true",
            help="Reset password for existing seeded users too.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options.get("password") or ""
        force_password = bool(options.get("force_password"))

        if len(password) < 6:
            raise CommandError("--password must be at least 6 characters.")

        User = get_user_model()

        created_count = 0
        updated_count = 0

        for seed in SEED_USERS:
            is_owner = seed.role == ROLE_OWNER

            user, created = User.objects.get_or_create(
                email=seed.email,
                defaults={
                    "name": seed.name,
                    "role": seed.role,
                    "is_staff": True,
                    "is_superuser": is_owner,
                    "is_active": True,
                },
            )

            dirty = created

            if user.role != seed.role:
                user.role = seed.role
                dirty = True

            if not user.is_active:
                user.is_active = True
                dirty = True

            if created or force_password:
                user.set_password(password)
                dirty = True

            if dirty:
                user.save()

            if created:
                created_count += 1
                self.stdout.write(f"created: {seed.label} ({seed.role}) -> {seed.email}")
            else:
                if dirty:
                    updated_count += 1
                self.stdout.write(f"exists:  {seed.label} ({seed.role}) -> {seed.email}")

        self.stdout.write(
            self.style.SUCCESS(f"Users seeded. created={created_count} updated={updated_count}")
        )
