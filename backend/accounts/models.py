from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone


class User(AbstractUser):
    """Traveller or admin account; the email doubles as the username."""

    email = models.EmailField(unique=True)
    display_name = models.CharField(max_length=120, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    address = models.CharField(max_length=255, blank=True)
    avatar = models.URLField(max_length=500, blank=True)
    is_verified = models.BooleanField(default=False)
    verified_at = models.DateTimeField(null=True, blank=True)
    last_password_reset_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return self.display_name or self.email

    @property
    def greeting_name(self) -> str:
        return self.display_name or self.first_name or "there"

    def mark_verified(self):
        if not self.is_verified:
            self.is_verified = True
            self.verified_at = timezone.now()
            self.save(update_fields=["is_verified", "verified_at"])
