from rest_framework import serializers

from catalog.models import TravelPackage

from .models import RatingReview


class RatingReviewSerializer(serializers.ModelSerializer):
    package = serializers.PrimaryKeyRelatedField(queryset=TravelPackage.objects.all())
    username = serializers.CharField(source="user.display_name", read_only=True)
    user_avatar = serializers.CharField(source="user.avatar", read_only=True)
    rating = serializers.IntegerField(min_value=1, max_value=5)

    class Meta:
        model = RatingReview
        fields = ["id", "package", "rating", "review", "username", "user_avatar", "created_at"]
        read_only_fields = ["id", "username", "user_avatar", "created_at"]

    def validate(self, attrs):
        user = self.context["request"].user
        if RatingReview.objects.filter(package=attrs["package"], user=user).exists():
            raise serializers.ValidationError(
                {"package": "You have already rated this package."}
            )
        return attrs
