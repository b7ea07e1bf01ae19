import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="TravelPackage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField()),
                ("destination", models.CharField(max_length=200)),
                ("days", models.PositiveIntegerField(default=0)),
                ("nights", models.PositiveIntegerField(default=0)),
                ("accommodation", models.CharField(max_length=255)),
                ("transportation", models.CharField(max_length=255)),
                ("meals", models.CharField(max_length=255)),
                ("activities", models.TextField()),
                ("price_paise", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("discount_price_paise", models.PositiveIntegerField(default=0)),
                ("offer", models.BooleanField(default=False)),
                ("images", models.JSONField(blank=True, default=list)),
                ("rating", models.DecimalField(decimal_places=2, default=0, max_digits=3)),
                ("total_ratings", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at", "id"],
            },
        ),
    ]
