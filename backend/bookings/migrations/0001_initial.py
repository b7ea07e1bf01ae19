import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="BookingIntent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("travel_date", models.DateField()),
                ("persons", models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ("total_amount_paise", models.PositiveIntegerField()),
                ("status", models.CharField(choices=[("pending", "Pending payment"), ("booked", "Booked")], default="pending", max_length=12)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("package", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="booking_intents", to="catalog.travelpackage")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="booking_intents", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("gateway_payment_id", models.CharField(blank=True, max_length=100, null=True, unique=True)),
                ("travel_date", models.DateField()),
                ("persons", models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ("total_amount_paise", models.PositiveIntegerField()),
                ("status", models.CharField(choices=[("active", "Active"), ("cancelled", "Cancelled")], default="active", max_length=12)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("history_hidden_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("buyer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="bookings", to=settings.AUTH_USER_MODEL)),
                ("package", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="bookings", to="catalog.travelpackage")),
            ],
            options={
                "ordering": ["-created_at", "id"],
            },
        ),
    ]
