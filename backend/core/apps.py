from django.apps import AppConfig


class CoreConfig(AppConfig):
    name = "core"
    default_auto_field = "django.db.models.BigAutoField"
    notifier = None

    def ready(self):
        from core.services.notifier import Notifier

        self.notifier = Notifier.from_settings()
