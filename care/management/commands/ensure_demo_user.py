from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password

from care.models import User

DEMO_EMAIL = "demo@patientportal.test"
DEMO_PASSWORD = "Demo@12345"


class Command(BaseCommand):
    help = "Ensure the demo account exists with its known password (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--email", default=DEMO_EMAIL)
        parser.add_argument("--password", default=DEMO_PASSWORD)

    def handle(self, *args, **opts):
        email = opts["email"].strip().lower()
        u, created = User.objects.get_or_create(
            username=email,
            defaults={
                "email": email,
                "first_name": "Demo",
                "last_name": "Patient",
                "password": make_password(opts["password"]),
                "is_active": True,
            },
        )
        if not created:
            # reset the password and reactivate
            u.password = make_password(opts["password"])
            u.is_active = True
            u.save(update_fields=["password", "is_active"])
        self.stdout.write(self.style.SUCCESS(f"ok: {email} ({'created' if created else 'updated'})"))
