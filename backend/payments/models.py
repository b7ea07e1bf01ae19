from django.conf import settings
from django.db import models


class OrderIntent(models.Model):
    """
    Ledger entry mapping a gateway order id to the paying user and the booking they
    asked for. Status only moves forward (created -> paid, created -> failed) and rows
    are never deleted.
    """

    CREATED = "created"
    PAID = "paid"
    FAILED = "failed"
    STATUSES = [
        (CREATED, "Created"),
        (PAID, "Paid"),
        (FAILED, "Failed"),
    ]

    gateway_order_id = models.CharField(max_length=100, unique=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="order_intents",
    )
    booking_intent = models.ForeignKey(
        "bookings.BookingIntent",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_intents",
    )
    amount = models.PositiveIntegerField(help_text="Amount in minor currency units (paise)")
    currency = models.CharField(max_length=10, default="INR")
    receipt = models.CharField(max_length=40, blank=True)
    status = models.CharField(max_length=10, choices=STATUSES, default=CREATED)
    gateway_payment_id = models.CharField(max_length=100, blank=True)
    notified_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "id"]

    def __str__(self):
        return f"{self.gateway_order_id} ({self.status})"
