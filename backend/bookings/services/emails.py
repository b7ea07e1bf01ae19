from __future__ import annotations

from typing import Any, Mapping

from catalog.pricing import format_paise
from core.services.notifier import Notifier


def send_booking_confirmation_email(
    *,
    notifier: Notifier,
    booking,
    payment: Mapping[str, Any],
):
    user = booking.buyer
    package = booking.package
    subject = f"{package.name} booking confirmed"

    body_lines = [
        f"Hi {user.greeting_name},",
        "",
        f"Your payment was received and you're booked on {package.name} ({package.destination}).",
        "",
        f"Travel date: {booking.travel_date:%B %d, %Y}",
        f"Travellers: {booking.persons}",
        f"Total paid: INR {format_paise(booking.total_amount_paise)}",
        f"Booking ID: {booking.id}",
        f"Payment ID: {payment.get('id', '-')}",
        f"Order ID: {payment.get('order_id', '-')}",
        "",
        "You can view or cancel this booking from My Bookings.",
        "",
        "- The TravelMint Team",
    ]
    notifier.send(recipient=user.email, subject=subject, body="\n".join(body_lines))


def send_payment_receipt_email(
    *,
    notifier: Notifier,
    user,
    payment: Mapping[str, Any],
):
    body_lines = [
        f"Hi {user.greeting_name},",
        "",
        "Your payment was captured successfully.",
        "",
        f"Order ID: {payment.get('order_id', '-')}",
        f"Payment ID: {payment.get('id', '-')}",
        f"Amount: INR {format_paise(payment.get('amount'))}",
        f"Method: {payment.get('method') or '-'}",
        f"Status: {payment.get('status', '-')}",
        "",
        "- The TravelMint Team",
    ]
    notifier.send(recipient=user.email, subject="Payment received", body="\n".join(body_lines))
