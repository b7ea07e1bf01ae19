from django.contrib import admin

from .models import Booking, BookingIntent


@admin.register(BookingIntent)
class BookingIntentAdmin(admin.ModelAdmin):
    list_display = ("package", "user", "travel_date", "persons", "total_amount_paise", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("package__name", "user__email")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("package", "buyer", "travel_date", "persons", "total_amount_paise", "status", "gateway_payment_id")
    list_filter = ("status",)
    search_fields = ("package__name", "buyer__email", "gateway_payment_id", "order__gateway_order_id")
    readonly_fields = ("order", "gateway_payment_id", "created_at")
