import logging

from django.conf import settings
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsVerified
from core.services.notifier import get_notifier

from .models import OrderIntent
from .serializers import CreateOrderSerializer, OrderIntentSerializer
from .services import ledger
from .services.gateway import OrderCreationError, build_receipt, get_payment_gateway
from .services.materializer import handle_event
from .services.webhooks import (
    WebhookSignatureError,
    parse_event,
    signature_from_meta,
    verify_signature,
)

logger = logging.getLogger(__name__)


class GatewayKeyView(APIView):
    """Publishable key the checkout widget needs; never the secret."""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    def get(self, request, *args, **kwargs):
        return Response({"success": True, "key": settings.RAZORPAY_KEY_ID})


class CreateOrderView(APIView):
    """Create a gateway order and record it in the ledger before the client pays."""

    permission_classes = [IsAuthenticated, IsVerified]
    gateway = None

    def get_gateway(self):
        return self.gateway or get_payment_gateway()

    def post(self, request, *args, **kwargs):
        serializer = CreateOrderSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        amount = serializer.validated_data["amount"]
        booking_intent = serializer.validated_data["booking_intent"]
        currency = getattr(settings, "PAYMENT_CURRENCY", "INR")

        try:
            order = self.get_gateway().create_order(
                amount=amount, currency=currency, receipt=build_receipt()
            )
        except OrderCreationError as exc:
            logger.error("Order creation failed for user %s: %s", request.user.pk, exc)
            return Response(
                {"success": False, "message": "Failed to create order"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        try:
            ledger.record_intent(
                order_id=order.id,
                user=request.user,
                booking_intent=booking_intent,
                amount=order.amount,
                currency=order.currency,
                receipt=order.receipt,
            )
        except ledger.DuplicateOrderError:
            logger.error("Gateway returned an order id we already recorded: %s", order.id)
            return Response(
                {"success": False, "message": "Failed to create order"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response({"success": True, "order": order.as_dict()})


class OrderIntentListView(generics.ListAPIView):
    serializer_class = OrderIntentSerializer
    permission_classes = [IsAuthenticated, IsAdminUser]
    filterset_fields = ["status", "user"]
    search_fields = ["gateway_order_id", "gateway_payment_id", "user__email"]
    ordering_fields = ["created_at", "amount"]

    def get_queryset(self):
        return OrderIntent.objects.select_related("user", "booking")


class RazorpayWebhookView(APIView):
    """
    Receive payment events from Razorpay.

    No parsers run on this route: the signature is checked against ``request.body``
    exactly as it arrived, and the JSON is decoded only after it verifies.
    """

    permission_classes: list = []
    authentication_classes: list = []
    parser_classes: list = []
    notifier = None

    def get_notifier(self):
        return self.notifier or get_notifier()

    def post(self, request, *args, **kwargs):
        secret = settings.RAZORPAY_WEBHOOK_SECRET
        if not secret:
            logger.error("Razorpay webhook secret not configured.")
            return Response(status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        raw_body = request.body
        try:
            verify_signature(raw_body, signature_from_meta(request.META), secret)
        except WebhookSignatureError as exc:
            logger.warning("Rejected Razorpay webhook: %s", exc)
            return Response(
                {"success": False, "message": "Invalid signature"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            event = parse_event(raw_body)
        except ValueError:
            logger.warning("Invalid payload received on Razorpay webhook.")
            return Response(
                {"success": False, "message": "Invalid payload"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            handle_event(event, notifier=self.get_notifier())
        except Exception:
            logger.exception("Error handling Razorpay webhook event %r", event.get("event"))
            return Response(
                {"success": False, "message": "Webhook processing failed"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response({"received": True})
