from rest_framework import serializers

from bookings.models import BookingIntent
from catalog.pricing import format_paise

from .models import OrderIntent


class CreateOrderSerializer(serializers.Serializer):
    amount = serializers.IntegerField(
        min_value=1,
        error_messages={
            "invalid": "Invalid amount",
            "min_value": "Invalid amount",
            "required": "Invalid amount",
            "null": "Invalid amount",
        },
    )
    booking_intent_id = serializers.IntegerField(required=False, allow_null=True)

    def validate(self, attrs):
        user = self.context["request"].user
        intent_id = attrs.pop("booking_intent_id", None)
        attrs["booking_intent"] = None
        if intent_id is None:
            return attrs

        intent = (
            BookingIntent.objects.select_related("package")
            .filter(pk=intent_id, user=user)
            .first()
        )
        if intent is None:
            raise serializers.ValidationError({"booking_intent_id": "Booking request not found."})
        if intent.status != BookingIntent.PENDING:
            raise serializers.ValidationError(
                {"booking_intent_id": "This booking request has already been paid for."}
            )
        if intent.total_amount_paise != attrs["amount"]:
            raise serializers.ValidationError(
                {"amount": "Amount does not match the booking total."}
            )
        attrs["booking_intent"] = intent
        return attrs


class OrderIntentSerializer(serializers.ModelSerializer):
    user_email = serializers.EmailField(source="user.email", read_only=True)
    booking_id = serializers.SerializerMethodField()
    amount_display = serializers.SerializerMethodField()

    class Meta:
        model = OrderIntent
        fields = [
            "id",
            "gateway_order_id",
            "user",
            "user_email",
            "booking_intent",
            "booking_id",
            "amount",
            "amount_display",
            "currency",
            "receipt",
            "status",
            "gateway_payment_id",
            "notified_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_booking_id(self, obj):
        booking = getattr(obj, "booking", None)
        return booking.pk if booking else None

    def get_amount_display(self, obj):
        return format_paise(obj.amount)
