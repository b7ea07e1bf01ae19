from __future__ import annotations

import logging
from typing import Optional

from django.db import IntegrityError, transaction

from payments.models import OrderIntent

logger = logging.getLogger(__name__)


class DuplicateOrderError(Exception):
    """A ledger entry already exists for this gateway order id."""


def record_intent(
    *,
    order_id: str,
    user,
    amount: int,
    receipt: str = "",
    currency: str = "INR",
    booking_intent=None,
) -> OrderIntent:
    """Insert a ``created`` entry; the unique constraint on the order id rejects repeats."""

    try:
        with transaction.atomic():
            intent = OrderIntent.objects.create(
                gateway_order_id=order_id,
                user=user,
                booking_intent=booking_intent,
                amount=amount,
                currency=currency,
                receipt=receipt,
            )
    except IntegrityError as exc:
        raise DuplicateOrderError(f"Order {order_id} is already recorded.") from exc

    logger.info("Recorded order intent %s for user %s (%s %s)", order_id, user.pk, amount, currency)
    return intent


def _transition(order_id: str, target: str, payment_id: str) -> bool:
    updated = OrderIntent.objects.filter(
        gateway_order_id=order_id,
        status=OrderIntent.CREATED,
    ).update(status=target, gateway_payment_id=payment_id or "")
    return updated == 1


def mark_paid(order_id: str, payment_id: str = "") -> bool:
    """Move ``created -> paid``. Returns False when the entry was already terminal."""
    return _transition(order_id, OrderIntent.PAID, payment_id)


def mark_failed(order_id: str, payment_id: str = "") -> bool:
    return _transition(order_id, OrderIntent.FAILED, payment_id)


def lookup(order_id: str) -> Optional[OrderIntent]:
    if not order_id:
        return None
    return (
        OrderIntent.objects.select_related("user", "booking_intent", "booking_intent__package")
        .filter(gateway_order_id=order_id)
        .first()
    )
