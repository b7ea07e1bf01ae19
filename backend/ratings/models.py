from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class RatingReview(models.Model):
    package = models.ForeignKey(
        "catalog.TravelPackage",
        on_delete=models.CASCADE,
        related_name="ratings",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="ratings",
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    review = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "id"]
        unique_together = ("package", "user")

    def __str__(self):
        return f"{self.rating}/5 for {self.package.name} by {self.user}"
