from rest_framework import mixins, permissions, viewsets

from accounts.permissions import IsVerified

from .models import RatingReview
from .serializers import RatingReviewSerializer


class RatingReviewViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = RatingReviewSerializer
    filterset_fields = ["package", "rating"]
    ordering_fields = ["created_at", "rating"]

    def get_queryset(self):
        return RatingReview.objects.select_related("user", "package")

    def get_permissions(self):
        if self.action == "list":
            return [permissions.AllowAny()]
        if self.action == "create":
            return [permissions.IsAuthenticated(), IsVerified()]
        return [permissions.IsAuthenticated(), permissions.IsAdminUser()]

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)
