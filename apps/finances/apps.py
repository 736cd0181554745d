from django.apps import AppConfig  # type: ignore


class FinancesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.finances"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from . import handlers
        from .domain.events import PaymentConfirmed

        message_bus.register_event_handler(PaymentConfirmed, handlers.log_payment_confirmed)
