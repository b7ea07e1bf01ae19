from django.contrib import admin

from .models import RatingReview


@admin.register(RatingReview)
class RatingReviewAdmin(admin.ModelAdmin):
    list_display = ("package", "user", "rating", "created_at")
    list_filter = ("rating",)
    search_fields = ("package__name", "user__email", "review")
