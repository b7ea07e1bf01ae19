import logging

from django.utils import timezone
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsVerified

from .models import Booking
from .serializers import (
    BookingIntentCreateSerializer,
    BookingIntentSerializer,
    BookingSerializer,
)

logger = logging.getLogger(__name__)


class BookingIntentCreateView(APIView):
    """Record what the traveller wants to book and price it before payment."""

    permission_classes = [permissions.IsAuthenticated, IsVerified]

    def post(self, request, *args, **kwargs):
        serializer = BookingIntentCreateSerializer(
            data=request.data, context={"request": request}
        )
        serializer.is_valid(raise_exception=True)
        intent = serializer.save()
        return Response(BookingIntentSerializer(intent).data, status=status.HTTP_201_CREATED)


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Bookings are created by the payment webhook only. Travellers list their own,
    cancel upcoming ones and clear finished ones from their history; admins see all.
    """

    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated, IsVerified]
    filterset_fields = ["status", "package"]
    search_fields = ["package__name", "buyer__email", "buyer__display_name"]
    ordering_fields = ["created_at", "travel_date"]

    def get_queryset(self):
        user = self.request.user
        queryset = Booking.objects.select_related("package", "buyer", "order")
        if not user.is_staff:
            queryset = queryset.filter(buyer=user, history_hidden_at__isnull=True)

        current = self.request.query_params.get("current", "").lower()
        if current in {"1", "true", "yes"}:
            queryset = queryset.filter(
                status=Booking.ACTIVE,
                travel_date__gte=timezone.localdate(),
            )
        return queryset

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        booking = self.get_object()
        if booking.status == Booking.CANCELLED:
            return Response(
                {"success": False, "message": "Booking is already cancelled."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if booking.is_past and not request.user.is_staff:
            return Response(
                {"success": False, "message": "Past bookings cannot be cancelled."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        booking.cancel()
        logger.info("Booking %s cancelled by user %s", booking.pk, request.user.pk)
        return Response(
            {
                "success": True,
                "message": "Booking cancelled.",
                "booking": BookingSerializer(booking).data,
            }
        )

    def destroy(self, request, *args, **kwargs):
        booking = self.get_object()
        if booking.buyer_id != request.user.pk:
            return Response(
                {"success": False, "message": "Only the traveller can clear their history."},
                status=status.HTTP_403_FORBIDDEN,
            )
        if not booking.can_hide_from_history:
            return Response(
                {
                    "success": False,
                    "message": "Only cancelled or completed bookings can be removed from history.",
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        booking.hide_from_history()
        return Response(status=status.HTTP_204_NO_CONTENT)
