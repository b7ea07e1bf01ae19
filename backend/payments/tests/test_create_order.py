from datetime import timedelta

import pytest
from django.apps import apps
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from bookings.models import BookingIntent
from catalog.models import TravelPackage
from payments.models import OrderIntent
from payments.services.gateway import GatewayOrder, OrderCreationError


class FakeGateway:
    def __init__(self, order_id="order_abc", error=None):
        self.order_id = order_id
        self.error = error
        self.calls = []

    def create_order(self, *, amount, currency="INR", receipt):
        self.calls.append({"amount": amount, "currency": currency, "receipt": receipt})
        if self.error:
            raise self.error
        return GatewayOrder(id=self.order_id, amount=amount, currency=currency, receipt=receipt)


@pytest.fixture
def gateway(monkeypatch):
    fake = FakeGateway()
    monkeypatch.setattr(apps.get_app_config("payments"), "gateway", fake)
    return fake


@pytest.fixture
def user(db):
    return User.objects.create_user(
        username="priya@example.com",
        email="priya@example.com",
        password="examplepass",
        is_verified=True,
    )


@pytest.fixture
def client(user):
    client = APIClient()
    client.force_authenticate(user)
    return client


@pytest.fixture
def booking_intent(user):
    package = TravelPackage.objects.create(
        name="Jaipur Heritage",
        description="Forts and palaces.",
        destination="Jaipur",
        days=3,
        nights=2,
        accommodation="Haveli",
        transportation="AC car",
        meals="Breakfast",
        activities="Amber fort, city palace",
        price_paise=75000,
    )
    return BookingIntent.objects.create(
        user=user,
        package=package,
        travel_date=timezone.localdate() + timedelta(days=20),
        persons=2,
        total_amount_paise=150000,
    )


def test_gateway_key_is_public(db, settings):
    settings.RAZORPAY_KEY_ID = "rzp_test_public"

    response = APIClient().get(reverse("payment-key"))

    assert response.status_code == 200
    assert response.json() == {"success": True, "key": "rzp_test_public"}


def test_create_order_records_intent(client, user, gateway, booking_intent):
    response = client.post(
        reverse("payment-create-order"),
        {"amount": 150000, "booking_intent_id": booking_intent.id},
        format="json",
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["order"]["id"] == "order_abc"
    assert body["order"]["amount"] == 150000
    assert gateway.calls[0]["currency"] == "INR"
    assert gateway.calls[0]["receipt"].startswith("rcpt_")

    intent = OrderIntent.objects.get(gateway_order_id="order_abc")
    assert intent.status == OrderIntent.CREATED
    assert intent.user == user
    assert intent.amount == 150000
    assert intent.booking_intent == booking_intent
    assert intent.receipt == gateway.calls[0]["receipt"]


def test_create_order_without_booking_intent(client, gateway):
    response = client.post(reverse("payment-create-order"), {"amount": 5000}, format="json")

    assert response.status_code == 200
    assert OrderIntent.objects.get(gateway_order_id="order_abc").booking_intent is None


def test_create_order_uses_stub_gateway_by_default(client, settings):
    settings.PAYMENT_GATEWAY_USE_STUB = True

    response = client.post(reverse("payment-create-order"), {"amount": 5000}, format="json")

    assert response.status_code == 200
    order_id = response.json()["order"]["id"]
    assert order_id.startswith("order_test_")
    assert OrderIntent.objects.filter(gateway_order_id=order_id).exists()


@pytest.mark.parametrize("amount", [0, -10, "abc", None])
def test_invalid_amount_is_rejected(client, gateway, amount):
    response = client.post(reverse("payment-create-order"), {"amount": amount}, format="json")

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid amount"
    assert gateway.calls == []
    assert not OrderIntent.objects.exists()


def test_amount_must_match_booking_total(client, gateway, booking_intent):
    response = client.post(
        reverse("payment-create-order"),
        {"amount": 100, "booking_intent_id": booking_intent.id},
        format="json",
    )

    assert response.status_code == 400
    assert gateway.calls == []


def test_booking_intent_must_belong_to_user(gateway, booking_intent):
    other = User.objects.create_user(
        username="other@example.com",
        email="other@example.com",
        password="examplepass",
        is_verified=True,
    )
    client = APIClient()
    client.force_authenticate(other)

    response = client.post(
        reverse("payment-create-order"),
        {"amount": 150000, "booking_intent_id": booking_intent.id},
        format="json",
    )

    assert response.status_code == 400
    assert not OrderIntent.objects.exists()


def test_booked_intent_cannot_be_paid_again(client, gateway, booking_intent):
    booking_intent.status = BookingIntent.BOOKED
    booking_intent.save(update_fields=["status"])

    response = client.post(
        reverse("payment-create-order"),
        {"amount": 150000, "booking_intent_id": booking_intent.id},
        format="json",
    )

    assert response.status_code == 400


def test_gateway_failure_records_nothing(client, monkeypatch):
    failing = FakeGateway(error=OrderCreationError("gateway unreachable"))
    monkeypatch.setattr(apps.get_app_config("payments"), "gateway", failing)

    response = client.post(reverse("payment-create-order"), {"amount": 150000}, format="json")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to create order"}
    assert not OrderIntent.objects.exists()


def test_duplicate_gateway_order_id_is_not_recorded_twice(client, gateway):
    first = client.post(reverse("payment-create-order"), {"amount": 5000}, format="json")
    second = client.post(reverse("payment-create-order"), {"amount": 7000}, format="json")

    assert first.status_code == 200
    assert second.status_code == 500
    assert OrderIntent.objects.get(gateway_order_id="order_abc").amount == 5000


def test_create_order_requires_login(db, gateway):
    response = APIClient().post(reverse("payment-create-order"), {"amount": 5000}, format="json")

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_create_order_requires_verified_email(db, gateway):
    user = User.objects.create_user(
        username="fresh@example.com", email="fresh@example.com", password="examplepass"
    )
    client = APIClient()
    client.force_authenticate(user)

    response = client.post(reverse("payment-create-order"), {"amount": 5000}, format="json")

    assert response.status_code == 403
    assert gateway.calls == []


def test_order_listing_is_admin_only(client, gateway):
    client.post(reverse("payment-create-order"), {"amount": 5000}, format="json")
    assert client.get(reverse("payment-orders")).status_code == 403

    admin = User.objects.create_user(
        username="admin@example.com",
        email="admin@example.com",
        password="examplepass",
        is_staff=True,
    )
    admin_client = APIClient()
    admin_client.force_authenticate(admin)
    response = admin_client.get(reverse("payment-orders"))

    assert response.status_code == 200
    rows = response.json()
    assert [row["gateway_order_id"] for row in rows] == ["order_abc"]
    assert rows[0]["booking_id"] is None
    assert rows[0]["amount_display"] == "50.00"
