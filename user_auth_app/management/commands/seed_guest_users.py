from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model
from rest_framework.authtoken.models import Token

from profiles.models import Profile

GUESTS = {
    "customer": {
        "username": "asha", "password": "asdasd", "email": "asha@example.com",
        "profile": {"mobile": "9800000001", "village": "Rampur"},
    },
    "driver": {
        "username": "ravi", "password": "asdasd24", "email": "ravi@example.com",
        "profile": {"mobile": "9800000002", "vehicle_type": "motorbike"},
    },
    "shop": {
        "username": "generalstore", "password": "asdasd42", "email": "store@example.com",
        "profile": {"mobile": "9800000003", "shop_id": "shop1"},
    },
}

class Command(BaseCommand):
    help = "Create or update demo guest users for every role (customer, driver, shop)."

    def handle(self, *args, **options):
        User = get_user_model()

        for role, cfg in GUESTS.items():
            u, created = User.objects.get_or_create(
                username=cfg["username"],
                defaults={"email": cfg["email"]},
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f"Created user '{u.username}'"))
            else:
                self.stdout.write(f"User '{u.username}' already exists")

            # set (or reset) password to the documented demo value
            u.set_password(cfg["password"])
            u.save(update_fields=["password"])

            # ensure profile with correct role and contact data
            prof, _ = Profile.objects.get_or_create(user=u, defaults={"type": role})
            prof.type = role
            for field, value in cfg["profile"].items():
                setattr(prof, field, value)
            prof.save()

            token, _ = Token.objects.get_or_create(user=u)
            self.stdout.write(f"  → type={role}, token={token.key}")

        self.stdout.write(self.style.SUCCESS("Guest users ready."))
