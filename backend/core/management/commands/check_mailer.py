from django.core.mail import get_connection
from django.core.management.base import BaseCommand, CommandError

from core.services.notifier import NotifierNotConfigured, get_notifier


class Command(BaseCommand):
    help = "Check outbound email settings and open a connection to the mail server."

    def add_arguments(self, parser):
        parser.add_argument(
            "--send-to",
            help="Also send a test message to this address.",
        )

    def handle(self, *args, **options):
        notifier = get_notifier()
        try:
            notifier.ensure_configured()
        except NotifierNotConfigured as exc:
            raise CommandError(str(exc)) from exc

        connection = get_connection(fail_silently=False)
        try:
            connection.open()
        except OSError as exc:
            raise CommandError(f"Mail server connection failed: {exc}") from exc
        finally:
            connection.close()
        self.stdout.write(self.style.SUCCESS("Mail server connection OK."))

        recipient = options.get("send_to")
        if recipient:
            notifier.send(
                recipient=recipient,
                subject="TravelMint mail check",
                body="This is a test message from the TravelMint backend.",
            )
            self.stdout.write(self.style.SUCCESS(f"Test message sent to {recipient}."))
