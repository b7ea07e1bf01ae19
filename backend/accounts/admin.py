from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("email", "display_name", "phone", "is_verified", "is_staff", "date_joined")
    list_filter = ("is_verified", "is_staff", "is_active")
    search_fields = ("email", "display_name", "phone")
    ordering = ("-date_joined",)
    fieldsets = BaseUserAdmin.fieldsets + (
        (
            "TravelMint",
            {"fields": ("display_name", "phone", "address", "avatar", "is_verified", "verified_at", "last_password_reset_at")},
        ),
    )
