from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from bookings.models import Booking, BookingIntent
from bookings.services.emails import (
    send_booking_confirmation_email,
    send_payment_receipt_email,
)
from payments.models import OrderIntent

from . import ledger
from .webhooks import payment_entity

logger = logging.getLogger(__name__)

CAPTURED_EVENTS = {"payment.captured", "order.paid"}
FAILED_EVENTS = {"payment.failed"}


def handle_event(event: Mapping[str, Any], *, notifier) -> None:
    """Dispatch a verified gateway event. Unhandled event types are ignored."""

    event_type = event.get("event", "")
    entity = payment_entity(event)

    if event_type in CAPTURED_EVENTS:
        materialize_captured_payment(entity, notifier=notifier)
    elif event_type in FAILED_EVENTS:
        record_failed_payment(entity)
    else:
        logger.info("Ignoring webhook event %r", event_type)


def record_failed_payment(entity: Mapping[str, Any]) -> None:
    order_id = entity.get("order_id", "")
    intent = ledger.lookup(order_id)
    if intent is None:
        logger.warning("Failed payment for unknown order %r", order_id)
        return
    if ledger.mark_failed(order_id, entity.get("id", "")):
        logger.info("Order %s marked failed", order_id)
    else:
        logger.info("Order %s already %s; ignoring failure event", order_id, intent.status)


def materialize_captured_payment(entity: Mapping[str, Any], *, notifier) -> Optional[Booking]:
    """
    Turn a captured payment into at most one Booking and one notification.

    Safe to call any number of times for the same payment: the ledger transition is
    conditional, the Booking is keyed on the payment id and on the order, and the
    email is sent only while ``notified_at`` is unclaimed.
    """

    order_id = entity.get("order_id", "")
    payment_id = entity.get("id", "")

    intent = ledger.lookup(order_id)
    if intent is None:
        logger.warning("Captured payment %r references unknown order %r", payment_id, order_id)
        return None

    captured_amount = entity.get("amount")
    if captured_amount is not None and captured_amount != intent.amount:
        logger.warning(
            "Payment %r for order %s captured %r paise but the order was for %s",
            payment_id,
            order_id,
            captured_amount,
            intent.amount,
        )

    if ledger.mark_paid(order_id, payment_id):
        logger.info("Order %s marked paid by payment %s", order_id, payment_id)
    intent.refresh_from_db()

    if intent.status == OrderIntent.FAILED:
        logger.warning(
            "Captured payment %r for order %s which is already failed; ignoring",
            payment_id,
            order_id,
        )
        return None

    booking = None
    if intent.booking_intent_id:
        booking = _ensure_booking(intent, payment_id)
    else:
        logger.info("Order %s has no booking intent; sending a receipt only", order_id)

    _notify_once(intent, booking, entity, notifier=notifier)
    return booking


def _existing_booking(intent: OrderIntent, payment_id: str) -> Optional[Booking]:
    match = Q(order=intent)
    if payment_id:
        match |= Q(gateway_payment_id=payment_id)
    return Booking.objects.select_related("package", "buyer").filter(match).first()


def _ensure_booking(intent: OrderIntent, payment_id: str) -> Booking:
    booking = _existing_booking(intent, payment_id)
    if booking is not None:
        logger.info("Booking %s already exists for order %s", booking.pk, intent.gateway_order_id)
        return booking

    request = intent.booking_intent
    try:
        with transaction.atomic():
            booking = Booking.objects.create(
                package=request.package,
                buyer=intent.user,
                order=intent,
                gateway_payment_id=payment_id or None,
                travel_date=request.travel_date,
                persons=request.persons,
                total_amount_paise=request.total_amount_paise,
            )
            BookingIntent.objects.filter(pk=request.pk).update(status=BookingIntent.BOOKED)
    except IntegrityError:
        # A concurrent delivery of the same payment inserted first.
        booking = _existing_booking(intent, payment_id)
        if booking is None:
            raise
        return booking

    logger.info(
        "Created booking %s for order %s (user %s, package %s)",
        booking.pk,
        intent.gateway_order_id,
        intent.user_id,
        request.package_id,
    )
    return booking


def _notify_once(intent: OrderIntent, booking, entity: Mapping[str, Any], *, notifier) -> None:
    claimed = OrderIntent.objects.filter(pk=intent.pk, notified_at__isnull=True).update(
        notified_at=timezone.now()
    )
    if not claimed:
        return

    payment = dict(entity)
    payment.setdefault("order_id", intent.gateway_order_id)
    payment.setdefault("amount", intent.amount)
    try:
        if booking is not None:
            send_booking_confirmation_email(notifier=notifier, booking=booking, payment=payment)
        else:
            send_payment_receipt_email(notifier=notifier, user=intent.user, payment=payment)
    except Exception:
        logger.exception("Could not send payment notification for order %s", intent.gateway_order_id)
        OrderIntent.objects.filter(pk=intent.pk).update(notified_at=None)
