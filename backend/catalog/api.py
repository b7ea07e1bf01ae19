from rest_framework import permissions, viewsets
from rest_framework.pagination import LimitOffsetPagination

from .models import TravelPackage
from .serializers import TravelPackageSerializer


class PackagePagination(LimitOffsetPagination):
    default_limit = 9
    max_limit = 50


class TravelPackageViewSet(viewsets.ModelViewSet):
    """Public package browsing; only admins can create, edit or delete packages."""

    serializer_class = TravelPackageSerializer
    pagination_class = PackagePagination
    filterset_fields = ["offer", "destination"]
    search_fields = ["name", "destination"]
    ordering_fields = ["created_at", "price_paise", "rating", "total_ratings"]
    ordering = ["-created_at"]

    def get_queryset(self):
        return TravelPackage.objects.all()

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated(), permissions.IsAdminUser()]
