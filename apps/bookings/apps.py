from django.apps import AppConfig  # type: ignore


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from . import handlers
        from .domain.events import BookingCancelled, BookingConfirmed, BookingCreated

        message_bus.register_event_handler(BookingCreated, handlers.log_booking_created)
        message_bus.register_event_handler(BookingConfirmed, handlers.log_booking_confirmed)
        message_bus.register_event_handler(BookingCancelled, handlers.log_booking_cancelled)
