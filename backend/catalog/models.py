from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from .pricing import format_paise, price_per_person_paise


class TravelPackage(models.Model):
    """A sellable tour package; prices are stored in paise."""

    name = models.CharField(max_length=200)
    description = models.TextField()
    destination = models.CharField(max_length=200)
    days = models.PositiveIntegerField(default=0)
    nights = models.PositiveIntegerField(default=0)
    accommodation = models.CharField(max_length=255)
    transportation = models.CharField(max_length=255)
    meals = models.CharField(max_length=255)
    activities = models.TextField()
    price_paise = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    discount_price_paise = models.PositiveIntegerField(default=0)
    offer = models.BooleanField(default=False)
    images = models.JSONField(default=list, blank=True)
    rating = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    total_ratings = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "id"]

    def __str__(self):
        return f"{self.name} ({self.destination})"

    @property
    def price_per_person_paise(self) -> int:
        return price_per_person_paise(self)

    @property
    def price(self) -> str:
        return format_paise(self.price_paise)

    def clean(self):
        super().clean()
        errors = {}
        if self.price_paise is not None and self.price_paise <= 0:
            errors["price_paise"] = "Price should be greater than 0."
        if (
            self.price_paise is not None
            and self.discount_price_paise is not None
            and self.discount_price_paise > self.price_paise
        ):
            errors["discount_price_paise"] = "Regular price should be greater than discount price."
        if self.offer and not self.discount_price_paise:
            errors["discount_price_paise"] = "Offer packages need a discount price."
        if not self.days and not self.nights:
            errors["days"] = "Provide days and nights."
        if not isinstance(self.images, list):
            errors["images"] = "Images must be a list of URLs."
        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
