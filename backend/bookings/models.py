from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from catalog.pricing import format_paise


class BookingIntent(models.Model):
    """Trip details a traveller asked for; becomes a Booking once payment is captured."""

    PENDING = "pending"
    BOOKED = "booked"
    STATUSES = [
        (PENDING, "Pending payment"),
        (BOOKED, "Booked"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="booking_intents",
    )
    package = models.ForeignKey(
        "catalog.TravelPackage",
        on_delete=models.PROTECT,
        related_name="booking_intents",
    )
    travel_date = models.DateField()
    persons = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    total_amount_paise = models.PositiveIntegerField()
    status = models.CharField(max_length=12, choices=STATUSES, default=PENDING)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "id"]

    def __str__(self):
        return f"{self.package.name} on {self.travel_date} x{self.persons} ({self.status})"


class Booking(models.Model):
    """Confirmed reservation; only ever created from a captured payment."""

    ACTIVE = "active"
    CANCELLED = "cancelled"
    STATUSES = [
        (ACTIVE, "Active"),
        (CANCELLED, "Cancelled"),
    ]

    package = models.ForeignKey(
        "catalog.TravelPackage",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    order = models.OneToOneField(
        "payments.OrderIntent",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="booking",
    )
    gateway_payment_id = models.CharField(max_length=100, unique=True, null=True, blank=True)
    travel_date = models.DateField()
    persons = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    total_amount_paise = models.PositiveIntegerField()
    status = models.CharField(max_length=12, choices=STATUSES, default=ACTIVE)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    history_hidden_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "id"]

    def __str__(self):
        return f"{self.package.name} booking for {self.buyer} on {self.travel_date}"

    @property
    def total_amount(self) -> str:
        return format_paise(self.total_amount_paise)

    @property
    def is_past(self) -> bool:
        return self.travel_date < timezone.localdate()

    @property
    def can_hide_from_history(self) -> bool:
        return self.status == self.CANCELLED or self.is_past

    def cancel(self):
        if self.status != self.CANCELLED:
            self.status = self.CANCELLED
            self.cancelled_at = timezone.now()
            self.save(update_fields=["status", "cancelled_at"])

    def hide_from_history(self):
        if not self.history_hidden_at:
            self.history_hidden_at = timezone.now()
            self.save(update_fields=["history_hidden_at"])
