from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any

SIGNATURE_HEADERS = ("HTTP_X_RAZORPAY_SIGNATURE", "HTTP_X_SIGNATURE")


class WebhookSignatureError(Exception):
    """The webhook signature header is missing or does not match the body."""


def compute_signature(raw_body: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def signature_from_meta(meta) -> str:
    for header in SIGNATURE_HEADERS:
        value = meta.get(header)
        if value:
            return value.strip()
    return ""


def verify_signature(raw_body: bytes, signature: str, secret: str) -> None:
    """
    Check ``signature`` against an HMAC-SHA256 of the exact bytes received.

    ``raw_body`` must be the untouched request body; re-serialising parsed JSON
    changes the bytes and the digest with them.
    """
    if not signature:
        raise WebhookSignatureError("Missing signature header.")
    expected = compute_signature(raw_body, secret)
    if not hmac.compare_digest(expected, signature):
        raise WebhookSignatureError("Signature mismatch.")


def parse_event(raw_body: bytes) -> dict[str, Any]:
    try:
        event = json.loads(raw_body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError("Webhook body is not valid JSON.") from exc
    if not isinstance(event, dict):
        raise ValueError("Webhook body must be a JSON object.")
    return event


def payment_entity(event: dict[str, Any]) -> dict[str, Any]:
    """Return ``payload.payment.entity`` or an empty dict when the event carries none."""
    payload = event.get("payload")
    payment = payload.get("payment") if isinstance(payload, dict) else None
    entity = payment.get("entity") if isinstance(payment, dict) else None
    return entity if isinstance(entity, dict) else {}
