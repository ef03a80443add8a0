# core/management/commands/ensure_test_users.py
from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password
from core.models import User

TEST_SET = [
    ("admin@bloodbank.test", "admin", {"name": "Admin"}),
    ("org@bloodbank.test", "organisation", {"organisation_name": "City Blood Bank"}),
    ("donar@bloodbank.test", "donar", {"name": "Test Donor"}),
    ("hospital@bloodbank.test", "hospital", {"hospital_name": "General Hospital"}),
]

DEFAULT_PASSWORD = "Bl00d-bank!"


class Command(BaseCommand):
    help = "Ensure one user per role exists with a known password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default=DEFAULT_PASSWORD)

    def handle(self, *args, **opts):
        password = make_password(opts["password"])
        for email, role, names in TEST_SET:
            u, created = User.objects.get_or_create(
                email=email,
                defaults={
                    "username": email,
                    "role": role,
                    "password": password,
                    "address": "1 Test Street",
                    "phone": "0000000000",
                    "is_active": True,
                    **names,
                },
            )
            if not created:
                # reset password, role and active flag
                u.password = password
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {email} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
