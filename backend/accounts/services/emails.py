from __future__ import annotations

from urllib.parse import quote

from django.conf import settings

from core.services.notifier import Notifier


def build_frontend_link(path: str, token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}{path}?token={quote(token)}"


def send_verification_email(*, notifier: Notifier, user, link: str):
    body_lines = [
        f"Hi {user.greeting_name},",
        "",
        "Confirm your email to activate your TravelMint account:",
        link,
        "",
        "If you did not sign up, you can ignore this email.",
        "",
        "- The TravelMint Team",
    ]
    notifier.send(
        recipient=user.email,
        subject="Verify your email",
        body="\n".join(body_lines),
    )


def send_password_reset_email(*, notifier: Notifier, user, link: str):
    body_lines = [
        f"Hi {user.greeting_name},",
        "",
        "Use the link below to set a new password. It expires soon.",
        link,
        "",
        "If you didn't request a reset, ignore this email.",
        "",
        "- The TravelMint Team",
    ]
    notifier.send(
        recipient=user.email,
        subject="Reset your password",
        body="\n".join(body_lines),
    )
