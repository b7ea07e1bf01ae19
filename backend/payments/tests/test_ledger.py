import pytest

from accounts.models import User
from payments.models import OrderIntent
from payments.services import ledger


@pytest.fixture
def user(db):
    return User.objects.create_user(
        username="vikram@example.com",
        email="vikram@example.com",
        password="examplepass",
        is_verified=True,
    )


@pytest.fixture
def intent(user):
    return ledger.record_intent(order_id="order_abc", user=user, amount=150000, receipt="rcpt_1")


def test_record_intent_starts_created(intent, user):
    assert intent.status == OrderIntent.CREATED
    assert intent.user == user
    assert intent.amount == 150000
    assert intent.currency == "INR"
    assert intent.booking_intent is None


def test_duplicate_order_id_is_rejected(intent, user):
    with pytest.raises(ledger.DuplicateOrderError):
        ledger.record_intent(order_id="order_abc", user=user, amount=999)

    assert OrderIntent.objects.filter(gateway_order_id="order_abc").count() == 1
    intent.refresh_from_db()
    assert intent.amount == 150000


def test_mark_paid_transitions_once(intent):
    assert ledger.mark_paid("order_abc", "pay_123") is True
    assert ledger.mark_paid("order_abc", "pay_123") is False

    intent.refresh_from_db()
    assert intent.status == OrderIntent.PAID
    assert intent.gateway_payment_id == "pay_123"


def test_paid_and_failed_are_terminal(user):
    ledger.record_intent(order_id="order_paid", user=user, amount=100)
    ledger.record_intent(order_id="order_failed", user=user, amount=100)
    ledger.mark_paid("order_paid", "pay_1")
    ledger.mark_failed("order_failed", "pay_2")

    assert ledger.mark_failed("order_paid", "pay_3") is False
    assert ledger.mark_paid("order_failed", "pay_4") is False

    assert ledger.lookup("order_paid").status == OrderIntent.PAID
    assert ledger.lookup("order_failed").status == OrderIntent.FAILED
    assert ledger.lookup("order_failed").gateway_payment_id == "pay_2"


def test_mark_paid_for_unknown_order_is_a_no_op(db):
    assert ledger.mark_paid("order_missing", "pay_1") is False


def test_lookup(intent):
    assert ledger.lookup("order_abc") == intent
    assert ledger.lookup("order_missing") is None
    assert ledger.lookup("") is None
