from rest_framework import serializers

from .models import TravelPackage
from .pricing import format_paise


class TravelPackageSerializer(serializers.ModelSerializer):
    price = serializers.SerializerMethodField()
    discount_price = serializers.SerializerMethodField()
    price_per_person_paise = serializers.IntegerField(read_only=True)
    images = serializers.ListField(child=serializers.URLField(), required=False)

    class Meta:
        model = TravelPackage
        fields = [
            "id",
            "name",
            "description",
            "destination",
            "days",
            "nights",
            "accommodation",
            "transportation",
            "meals",
            "activities",
            "price_paise",
            "discount_price_paise",
            "price",
            "discount_price",
            "price_per_person_paise",
            "offer",
            "images",
            "rating",
            "total_ratings",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["rating", "total_ratings", "created_at", "updated_at"]

    def get_price(self, obj: TravelPackage) -> str:
        return format_paise(obj.price_paise)

    def get_discount_price(self, obj: TravelPackage) -> str:
        return format_paise(obj.discount_price_paise)

    def _current(self, attrs, field):
        if field in attrs:
            return attrs[field]
        if self.instance is not None:
            return getattr(self.instance, field)
        return TravelPackage._meta.get_field(field).get_default()

    def validate(self, attrs):
        price = self._current(attrs, "price_paise")
        discount = self._current(attrs, "discount_price_paise") or 0
        offer = self._current(attrs, "offer")
        days = self._current(attrs, "days") or 0
        nights = self._current(attrs, "nights") or 0

        if price is None or price <= 0:
            raise serializers.ValidationError({"price_paise": "Price should be greater than 0."})
        if discount > price:
            raise serializers.ValidationError(
                {"discount_price_paise": "Regular price should be greater than discount price."}
            )
        if offer and not discount:
            raise serializers.ValidationError(
                {"discount_price_paise": "Offer packages need a discount price."}
            )
        if days <= 0 and nights <= 0:
            raise serializers.ValidationError({"days": "Provide days and nights."})
        return attrs
