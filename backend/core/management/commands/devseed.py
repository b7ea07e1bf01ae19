from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from accounts.models import User
from catalog.models import TravelPackage


SEED_PASSWORD = "TravelMint123!"
SUPERUSER_EMAIL = "admin@travelmint.test"
SUPERUSER_PASSWORD = "AdminTravelMint123!"

SAMPLE_PACKAGES = [
    {
        "name": "Kerala Backwaters Escape",
        "destination": "Alleppey, Kerala",
        "description": "Houseboat stay on the backwaters with village walks and a spice plantation visit.",
        "days": 4,
        "nights": 3,
        "accommodation": "Deluxe houseboat and beach resort",
        "transportation": "AC sedan transfers",
        "meals": "Breakfast and dinner",
        "activities": "Houseboat cruise, canoe ride, Kathakali show",
        "price_paise": 2499900,
        "discount_price_paise": 1999900,
        "offer": True,
    },
    {
        "name": "Himalayan Trails",
        "destination": "Manali, Himachal Pradesh",
        "description": "Mountain drives, a guided day hike and a night in a riverside camp.",
        "days": 6,
        "nights": 5,
        "accommodation": "Boutique hotel and riverside camp",
        "transportation": "Tempo traveller",
        "meals": "All meals",
        "activities": "Solang valley, Rohtang pass, river rafting",
        "price_paise": 3450000,
        "discount_price_paise": 0,
        "offer": False,
    },
    {
        "name": "Golden Triangle",
        "destination": "Delhi - Agra - Jaipur",
        "description": "Classic heritage circuit covering three cities in a week.",
        "days": 7,
        "nights": 6,
        "accommodation": "4-star hotels",
        "transportation": "AC coach",
        "meals": "Breakfast",
        "activities": "Taj Mahal sunrise, Amber fort, old Delhi food walk",
        "price_paise": 4200000,
        "discount_price_paise": 3800000,
        "offer": True,
    },
]


class Command(BaseCommand):
    help = "Populate the local development database with sample data."

    def handle(self, *args, **options):
        if not settings.DEBUG:
            raise CommandError("Refusing to seed data while DEBUG is False.")

        with transaction.atomic():
            self.stdout.write(self.style.MIGRATE_HEADING("Creating travellers"))
            traveller = self._ensure_user(
                email="traveller@travelmint.test",
                first_name="Tara",
                last_name="Traveller",
                display_name="Tara",
            )

            self.stdout.write(self.style.MIGRATE_HEADING("Ensuring admin superuser"))
            self._ensure_superuser()

            self.stdout.write(self.style.MIGRATE_HEADING("Creating travel packages"))
            for data in SAMPLE_PACKAGES:
                self._ensure_package(data)

        self.stdout.write(self.style.SUCCESS("Seed data ready."))
        self.stdout.write(self.style.NOTICE(f"Traveller {traveller.email} password: {SEED_PASSWORD}"))
        self.stdout.write(self.style.NOTICE(f"Admin superuser {SUPERUSER_EMAIL} password: {SUPERUSER_PASSWORD}"))

    def _ensure_user(
        self,
        email: str,
        first_name: str,
        last_name: str,
        display_name: str,
    ) -> User:
        user, created = User.objects.get_or_create(
            email=email,
            defaults={
                "username": email,
                "first_name": first_name,
                "last_name": last_name,
                "display_name": display_name,
                "phone": "9000000000",
            },
        )
        if created:
            user.set_password(SEED_PASSWORD)
            user.save()
        if not user.is_verified:
            user.mark_verified()
        return user

    def _ensure_package(self, data: dict) -> TravelPackage:
        package = TravelPackage.objects.filter(name=data["name"]).first()
        if package is None:
            package = TravelPackage(**data)
        else:
            for attr, value in data.items():
                setattr(package, attr, value)
        package.save()
        return package

    def _ensure_superuser(self) -> User:
        user, created = User.objects.get_or_create(
            email=SUPERUSER_EMAIL,
            defaults={
                "username": SUPERUSER_EMAIL,
                "first_name": "Admin",
                "last_name": "User",
                "display_name": "Admin User",
                "is_staff": True,
                "is_superuser": True,
                "is_verified": True,
                "verified_at": timezone.now(),
            },
        )
        flag_updates = {}
        if not user.is_staff:
            flag_updates["is_staff"] = True
        if not user.is_superuser:
            flag_updates["is_superuser"] = True
        if flag_updates:
            for attr, value in flag_updates.items():
                setattr(user, attr, value)
            user.save(update_fields=list(flag_updates.keys()))
        if created or not user.has_usable_password():
            user.set_password(SUPERUSER_PASSWORD)
            user.save(update_fields=["password"])
        return user
