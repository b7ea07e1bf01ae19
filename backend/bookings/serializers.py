from django.utils import timezone
from rest_framework import serializers

from catalog.models import TravelPackage
from catalog.pricing import calculate_total_paise, format_paise

from .models import Booking, BookingIntent

MAX_PERSONS = 20


class BookingIntentCreateSerializer(serializers.Serializer):
    package_id = serializers.PrimaryKeyRelatedField(
        queryset=TravelPackage.objects.all(),
        source="package",
    )
    travel_date = serializers.DateField()
    persons = serializers.IntegerField(min_value=1, max_value=MAX_PERSONS, default=1)

    def validate_travel_date(self, value):
        if value < timezone.localdate():
            raise serializers.ValidationError("Travel date cannot be in the past.")
        return value

    def create(self, validated_data):
        package = validated_data["package"]
        persons = validated_data["persons"]
        return BookingIntent.objects.create(
            user=self.context["request"].user,
            package=package,
            travel_date=validated_data["travel_date"],
            persons=persons,
            total_amount_paise=calculate_total_paise(package, persons),
        )


class BookingIntentSerializer(serializers.ModelSerializer):
    package_name = serializers.CharField(source="package.name", read_only=True)
    total_amount = serializers.SerializerMethodField()

    class Meta:
        model = BookingIntent
        fields = [
            "id",
            "package",
            "package_name",
            "travel_date",
            "persons",
            "total_amount_paise",
            "total_amount",
            "status",
            "created_at",
        ]
        read_only_fields = fields

    def get_total_amount(self, obj: BookingIntent) -> str:
        return format_paise(obj.total_amount_paise)


class BookingSerializer(serializers.ModelSerializer):
    package_name = serializers.CharField(source="package.name", read_only=True)
    package_destination = serializers.CharField(source="package.destination", read_only=True)
    package_images = serializers.JSONField(source="package.images", read_only=True)
    buyer_email = serializers.EmailField(source="buyer.email", read_only=True)
    buyer_name = serializers.CharField(source="buyer.display_name", read_only=True)
    gateway_order_id = serializers.CharField(source="order.gateway_order_id", read_only=True, default=None)
    total_amount = serializers.CharField(read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "package",
            "package_name",
            "package_destination",
            "package_images",
            "buyer",
            "buyer_email",
            "buyer_name",
            "travel_date",
            "persons",
            "total_amount_paise",
            "total_amount",
            "status",
            "gateway_order_id",
            "gateway_payment_id",
            "cancelled_at",
            "created_at",
        ]
        read_only_fields = fields
