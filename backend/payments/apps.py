from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    name = "payments"
    default_auto_field = "django.db.models.BigAutoField"
    gateway = None

    def ready(self):
        from payments.services.gateway import PaymentGatewayClient

        self.gateway = PaymentGatewayClient.from_settings()
