from django.contrib import admin

from .models import OrderIntent


@admin.register(OrderIntent)
class OrderIntentAdmin(admin.ModelAdmin):
    list_display = ("gateway_order_id", "user", "amount", "currency", "status", "gateway_payment_id", "created_at")
    list_filter = ("status", "currency")
    search_fields = ("gateway_order_id", "gateway_payment_id", "user__email", "receipt")
    readonly_fields = ("gateway_order_id", "gateway_payment_id", "notified_at", "created_at", "updated_at")
