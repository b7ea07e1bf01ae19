import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="OrderIntent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("gateway_order_id", models.CharField(max_length=100, unique=True)),
                ("amount", models.PositiveIntegerField(help_text="Amount in minor currency units (paise)")),
                ("currency", models.CharField(default="INR", max_length=10)),
                ("receipt", models.CharField(blank=True, max_length=40)),
                ("status", models.CharField(choices=[("created", "Created"), ("paid", "Paid"), ("failed", "Failed")], default="created", max_length=10)),
                ("gateway_payment_id", models.CharField(blank=True, max_length=100)),
                ("notified_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("booking_intent", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="order_intents", to="bookings.bookingintent")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="order_intents", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at", "id"],
            },
        ),
    ]
