from __future__ import annotations

import logging

from django.apps import apps
from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)

SMTP_BACKEND = "django.core.mail.backends.smtp.EmailBackend"


class NotificationFailed(Exception):
    """An email could not be handed to the mail backend."""


class NotifierNotConfigured(NotificationFailed):
    """Raised when outbound email settings are missing."""


class Notifier:
    """
    Sends transactional email (verification, password reset, payment and booking
    confirmations) to a single recipient.

    One instance is built when the app registry is ready and handed to the views
    that need it, so tests can swap in a fake without patching Django's mail layer.
    """

    def __init__(self, *, from_email: str, backend: str | None = None):
        self.from_email = from_email
        self.backend = backend

    @classmethod
    def from_settings(cls) -> "Notifier":
        return cls(
            from_email=getattr(settings, "DEFAULT_FROM_EMAIL", ""),
            backend=getattr(settings, "EMAIL_BACKEND", None),
        )

    def missing_settings(self) -> list[str]:
        missing = []
        if not self.from_email:
            missing.append("DEFAULT_FROM_EMAIL")
        if self.backend == SMTP_BACKEND:
            for name in ("EMAIL_HOST", "EMAIL_HOST_USER", "EMAIL_HOST_PASSWORD"):
                if not getattr(settings, name, ""):
                    missing.append(name)
        return missing

    def ensure_configured(self) -> None:
        missing = self.missing_settings()
        if missing:
            raise NotifierNotConfigured(
                f"Email settings missing: {', '.join(missing)}"
            )

    def send(self, *, recipient: str, subject: str, body: str) -> None:
        self.ensure_configured()
        try:
            send_mail(
                subject,
                body,
                self.from_email,
                [recipient],
                fail_silently=False,
            )
        except OSError as exc:
            raise NotificationFailed(f"Could not send '{subject}' to {recipient}: {exc}") from exc
        logger.info("Sent '%s' email to %s", subject, recipient)


def get_notifier() -> Notifier:
    notifier = apps.get_app_config("core").notifier
    if notifier is None:
        notifier = Notifier.from_settings()
    return notifier
