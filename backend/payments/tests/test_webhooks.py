import json
import logging
from datetime import timedelta

import pytest
from django.apps import apps
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from bookings.models import Booking, BookingIntent
from catalog.models import TravelPackage
from payments.models import OrderIntent
from payments.services import ledger, materializer
from payments.services.gateway import GatewayOrder
from payments.services.webhooks import (
    WebhookSignatureError,
    compute_signature,
    verify_signature,
)

SECRET = "whsec_test"


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def ensure_configured(self):
        return None

    def send(self, *, recipient, subject, body):
        self.sent.append({"recipient": recipient, "subject": subject, "body": body})


class BrokenNotifier(RecordingNotifier):
    def send(self, *, recipient, subject, body):
        raise RuntimeError("mail provider down")


class FixedGateway:
    def __init__(self, order_id):
        self.order_id = order_id

    def create_order(self, *, amount, currency="INR", receipt):
        return GatewayOrder(id=self.order_id, amount=amount, currency=currency, receipt=receipt)


@pytest.fixture(autouse=True)
def webhook_secret(settings):
    settings.RAZORPAY_WEBHOOK_SECRET = SECRET


@pytest.fixture
def notifier(monkeypatch):
    fake = RecordingNotifier()
    monkeypatch.setattr(apps.get_app_config("core"), "notifier", fake)
    return fake


@pytest.fixture
def user(db):
    return User.objects.create_user(
        username="arjun@example.com",
        email="arjun@example.com",
        password="examplepass",
        display_name="Arjun",
        is_verified=True,
    )


@pytest.fixture
def package(db):
    return TravelPackage.objects.create(
        name="Spiti Circuit",
        description="High desert road trip.",
        destination="Spiti Valley",
        days=8,
        nights=7,
        accommodation="Homestays",
        transportation="SUV",
        meals="All meals",
        activities="Key monastery, Chandratal lake",
        price_paise=75000,
    )


@pytest.fixture
def booking_intent(user, package):
    return BookingIntent.objects.create(
        user=user,
        package=package,
        travel_date=timezone.localdate() + timedelta(days=45),
        persons=2,
        total_amount_paise=150000,
    )


@pytest.fixture
def order(user, booking_intent):
    return ledger.record_intent(
        order_id="order_abc",
        user=user,
        booking_intent=booking_intent,
        amount=150000,
        receipt="rcpt_1",
    )


def captured_event(order_id="order_abc", payment_id="pay_123", amount=150000, event="payment.captured"):
    return {
        "event": event,
        "payload": {
            "payment": {
                "entity": {
                    "id": payment_id,
                    "order_id": order_id,
                    "amount": amount,
                    "method": "upi",
                    "status": "captured",
                }
            }
        },
    }


def deliver(event, *, secret=SECRET, header="HTTP_X_RAZORPAY_SIGNATURE", signature=None, raw=None):
    raw = raw if raw is not None else json.dumps(event).encode("utf-8")
    headers = {}
    if header:
        headers[header] = signature if signature is not None else compute_signature(raw, secret)
    return APIClient().post(
        reverse("razorpay-webhook"),
        data=raw,
        content_type="application/json",
        **headers,
    )


def test_verify_signature():
    body = b'{"event": "payment.captured"}'
    good = compute_signature(body, SECRET)

    verify_signature(body, good, SECRET)
    with pytest.raises(WebhookSignatureError):
        verify_signature(body, "", SECRET)
    with pytest.raises(WebhookSignatureError):
        verify_signature(body + b" ", good, SECRET)
    with pytest.raises(WebhookSignatureError):
        verify_signature(body, compute_signature(body, "other-secret"), SECRET)


def test_order_to_booking_scenario(user, package, booking_intent, notifier, monkeypatch):
    monkeypatch.setattr(apps.get_app_config("payments"), "gateway", FixedGateway("order_abc"))
    client = APIClient()
    client.force_authenticate(user)

    created = client.post(
        reverse("payment-create-order"),
        {"amount": 150000, "booking_intent_id": booking_intent.id},
        format="json",
    )
    assert created.json()["order"]["id"] == "order_abc"
    intent = OrderIntent.objects.get(gateway_order_id="order_abc")
    assert (intent.status, intent.amount, intent.user) == (OrderIntent.CREATED, 150000, user)

    response = deliver(captured_event())

    assert response.status_code == 200
    assert response.json() == {"received": True}
    intent.refresh_from_db()
    assert intent.status == OrderIntent.PAID
    assert intent.gateway_payment_id == "pay_123"
    assert intent.notified_at is not None

    booking = Booking.objects.get()
    assert booking.buyer == user
    assert booking.package == package
    assert booking.order == intent
    assert booking.gateway_payment_id == "pay_123"
    assert booking.travel_date == booking_intent.travel_date
    assert booking.persons == 2
    assert booking.total_amount_paise == 150000

    booking_intent.refresh_from_db()
    assert booking_intent.status == BookingIntent.BOOKED

    assert len(notifier.sent) == 1
    assert notifier.sent[0]["recipient"] == "arjun@example.com"


def test_repeated_delivery_books_once(order, notifier):
    responses = [deliver(captured_event()) for _ in range(3)]

    assert [r.status_code for r in responses] == [200, 200, 200]
    assert all(r.json() == {"received": True} for r in responses)
    assert Booking.objects.count() == 1
    order.refresh_from_db()
    assert order.status == OrderIntent.PAID
    assert len(notifier.sent) == 1


def test_order_paid_event_is_treated_as_capture(order, notifier):
    deliver(captured_event(event="order.paid"))
    deliver(captured_event())

    assert Booking.objects.count() == 1
    assert len(notifier.sent) == 1


def test_existing_booking_for_payment_is_not_duplicated(order, package, user, notifier):
    Booking.objects.create(
        package=package,
        buyer=user,
        gateway_payment_id="pay_123",
        travel_date=timezone.localdate() + timedelta(days=45),
        persons=2,
        total_amount_paise=150000,
    )

    response = deliver(captured_event())

    assert response.status_code == 200
    assert Booking.objects.count() == 1
    assert len(notifier.sent) == 1


def test_concurrent_insert_keeps_the_first_booking(order, package, user, notifier, monkeypatch):
    winner = Booking.objects.create(
        package=package,
        buyer=user,
        order=order,
        gateway_payment_id="pay_123",
        travel_date=timezone.localdate() + timedelta(days=45),
        persons=2,
        total_amount_paise=150000,
    )
    lookups = []
    original = materializer._existing_booking

    def missed_on_first_lookup(intent, payment_id):
        lookups.append(payment_id)
        if len(lookups) == 1:
            return None
        return original(intent, payment_id)

    monkeypatch.setattr(materializer, "_existing_booking", missed_on_first_lookup)

    response = deliver(captured_event())

    assert response.status_code == 200
    assert response.json() == {"received": True}
    assert list(Booking.objects.all()) == [winner]
    assert len(lookups) == 2
    assert len(notifier.sent) == 1


def test_amount_mismatch_is_logged(order, notifier, caplog):
    with caplog.at_level(logging.WARNING, logger="payments.services.materializer"):
        response = deliver(captured_event(amount=100))

    assert response.status_code == 200
    assert "captured 100 paise but the order was for 150000" in caplog.text
    assert Booking.objects.count() == 1


def test_matching_amount_logs_no_warning(order, notifier, caplog):
    with caplog.at_level(logging.WARNING, logger="payments.services.materializer"):
        deliver(captured_event())

    assert "but the order was for" not in caplog.text


@pytest.mark.parametrize(
    "kwargs",
    [
        {"signature": "0" * 64},
        {"secret": "wrong-secret"},
        {"header": None},
    ],
)
def test_bad_signatures_are_rejected(order, notifier, kwargs):
    response = deliver(captured_event(), **kwargs)

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid signature"}
    order.refresh_from_db()
    assert order.status == OrderIntent.CREATED
    assert not Booking.objects.exists()
    assert notifier.sent == []


def test_altered_payload_with_original_signature_is_rejected(order, notifier):
    original = json.dumps(captured_event()).encode("utf-8")
    tampered = json.dumps(captured_event(amount=100)).encode("utf-8")

    response = deliver(None, raw=tampered, signature=compute_signature(original, SECRET))

    assert response.status_code == 400
    assert not Booking.objects.exists()


def test_signature_is_checked_on_raw_bytes(order, notifier):
    raw = json.dumps(captured_event(), indent=4, sort_keys=True).encode("utf-8")

    response = deliver(None, raw=raw)

    assert response.status_code == 200
    assert Booking.objects.count() == 1


def test_x_signature_header_is_accepted(order, notifier):
    response = deliver(captured_event(), header="HTTP_X_SIGNATURE")

    assert response.status_code == 200
    assert Booking.objects.count() == 1


def test_unknown_order_is_acknowledged(db, notifier):
    response = deliver(captured_event(order_id="order_missing"))

    assert response.status_code == 200
    assert response.json() == {"received": True}
    assert not Booking.objects.exists()
    assert notifier.sent == []


def test_notifier_failure_keeps_booking(order, monkeypatch):
    monkeypatch.setattr(apps.get_app_config("core"), "notifier", BrokenNotifier())

    response = deliver(captured_event())

    assert response.status_code == 200
    assert Booking.objects.count() == 1
    order.refresh_from_db()
    assert order.status == OrderIntent.PAID
    assert order.notified_at is None


def test_replay_retries_undelivered_email(order, monkeypatch):
    monkeypatch.setattr(apps.get_app_config("core"), "notifier", BrokenNotifier())
    deliver(captured_event())

    working = RecordingNotifier()
    monkeypatch.setattr(apps.get_app_config("core"), "notifier", working)
    deliver(captured_event())
    deliver(captured_event())

    assert Booking.objects.count() == 1
    assert len(working.sent) == 1


def test_failed_payment_is_terminal(order, notifier):
    failed = deliver(captured_event(event="payment.failed"))
    late_capture = deliver(captured_event())

    assert failed.status_code == 200
    assert late_capture.status_code == 200
    order.refresh_from_db()
    assert order.status == OrderIntent.FAILED
    assert not Booking.objects.exists()
    assert notifier.sent == []


def test_order_without_booking_intent_gets_receipt(user, notifier):
    ledger.record_intent(order_id="order_gift", user=user, amount=50000)

    response = deliver(captured_event(order_id="order_gift", payment_id="pay_gift", amount=50000))

    assert response.status_code == 200
    assert ledger.lookup("order_gift").status == OrderIntent.PAID
    assert not Booking.objects.exists()
    assert [mail["subject"] for mail in notifier.sent] == ["Payment received"]
    assert "Amount: INR 500.00" in notifier.sent[0]["body"]


def test_confirmation_email_goes_through_mail_backend(order, mailoutbox):
    deliver(captured_event())

    assert len(mailoutbox) == 1
    message = mailoutbox[0]
    assert message.to == ["arjun@example.com"]
    assert message.subject == "Spiti Circuit booking confirmed"
    assert "Payment ID: pay_123" in message.body
    assert "Total paid: INR 1500.00" in message.body


def test_other_events_are_ignored(order, notifier):
    response = deliver({"event": "refund.created", "payload": {}})

    assert response.status_code == 200
    order.refresh_from_db()
    assert order.status == OrderIntent.CREATED


def test_invalid_json_with_valid_signature(db):
    response = deliver(None, raw=b"not json")

    assert response.status_code == 400


def test_missing_secret_is_a_server_error(order, settings):
    settings.RAZORPAY_WEBHOOK_SECRET = ""

    response = deliver(captured_event(), secret="anything")

    assert response.status_code == 500
    assert not Booking.objects.exists()


def test_processing_errors_are_contained(order, monkeypatch):
    def explode(event, *, notifier):
        raise RuntimeError("database went away")

    monkeypatch.setattr("payments.api.handle_event", explode)

    response = deliver(captured_event())

    assert response.status_code == 500
    assert response.json()["success"] is False
