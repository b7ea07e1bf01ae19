from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Optional
from uuid import uuid4

from django.conf import settings

logger = logging.getLogger(__name__)


class OrderCreationError(Exception):
    """The gateway could not create an order; nothing should be recorded locally."""


@dataclass
class GatewayOrder:
    id: str
    amount: int
    currency: str
    receipt: str
    status: str = "created"

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


class PaymentGatewayClient:
    """
    Thin wrapper around the Razorpay orders API.

    In stub mode (no key configured, or PAYMENT_GATEWAY_USE_STUB) orders get
    predictable ``order_test_`` identifiers so local development and tests run the
    whole order -> webhook -> booking flow without reaching Razorpay.
    """

    def __init__(
        self,
        *,
        key_id: str = "",
        key_secret: str = "",
        use_stub: bool = False,
        client: Optional[Any] = None,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.use_stub = use_stub or not (key_id and key_secret)
        self._client = client

    @classmethod
    def from_settings(cls) -> "PaymentGatewayClient":
        return cls(
            key_id=getattr(settings, "RAZORPAY_KEY_ID", ""),
            key_secret=getattr(settings, "RAZORPAY_KEY_SECRET", ""),
            use_stub=getattr(settings, "PAYMENT_GATEWAY_USE_STUB", False),
        )

    @property
    def client(self):
        if self._client is None:
            import razorpay

            self._client = razorpay.Client(auth=(self.key_id, self.key_secret))
        return self._client

    def create_order(self, *, amount: int, currency: str = "INR", receipt: str) -> GatewayOrder:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise OrderCreationError(f"Invalid order amount: {amount!r}")

        if self.use_stub:
            return GatewayOrder(
                id=f"order_test_{uuid4().hex[:14]}",
                amount=amount,
                currency=currency,
                receipt=receipt,
            )

        client = self.client
        try:
            payload = client.order.create(
                data={"amount": amount, "currency": currency, "receipt": receipt}
            )
        except Exception as exc:
            logger.warning("Razorpay order creation failed: %s", exc)
            raise OrderCreationError("Could not create order") from exc

        try:
            return GatewayOrder(
                id=payload["id"],
                amount=int(payload.get("amount", amount)),
                currency=payload.get("currency", currency),
                receipt=payload.get("receipt", receipt),
                status=payload.get("status", "created"),
            )
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Unexpected Razorpay order payload: %r", payload)
            raise OrderCreationError("Could not create order") from exc


def build_receipt() -> str:
    return f"rcpt_{uuid4().hex[:20]}"


def get_payment_gateway() -> PaymentGatewayClient:
    from django.apps import apps

    gateway = apps.get_app_config("payments").gateway
    if gateway is None:
        gateway = PaymentGatewayClient.from_settings()
    return gateway
