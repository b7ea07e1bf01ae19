from decimal import Decimal

from django.db.models import Avg, Count
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from catalog.models import TravelPackage

from .models import RatingReview


def refresh_package_rating(package_id):
    summary = RatingReview.objects.filter(package_id=package_id).aggregate(
        average=Avg("rating"), total=Count("id")
    )
    average = summary["average"] or 0
    TravelPackage.objects.filter(pk=package_id).update(
        rating=Decimal(str(round(average, 2))),
        total_ratings=summary["total"],
    )


@receiver(post_save, sender=RatingReview)
def handle_rating_saved(sender, instance, **kwargs):
    refresh_package_rating(instance.package_id)


@receiver(post_delete, sender=RatingReview)
def handle_rating_deleted(sender, instance, **kwargs):
    refresh_package_rating(instance.package_id)
