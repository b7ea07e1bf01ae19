from django.contrib import admin

from .models import TravelPackage


@admin.register(TravelPackage)
class TravelPackageAdmin(admin.ModelAdmin):
    list_display = ("name", "destination", "days", "nights", "price_paise", "offer", "rating", "total_ratings")
    list_filter = ("offer",)
    search_fields = ("name", "destination")
    readonly_fields = ("rating", "total_ratings")
