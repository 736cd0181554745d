from datetime import date
from decimal import Decimal

from apps.bookings import handlers
from apps.bookings.domain.events import BookingCancelled, BookingConfirmed, BookingCreated
from apps.finances import handlers as finance_handlers
from apps.finances.domain.events import PaymentConfirmed
from shared.application.message_bus import message_bus


def test_audit_handlers_are_registered_at_startup():
    assert handlers.log_booking_created in message_bus.handlers_for(BookingCreated)
    assert handlers.log_booking_confirmed in message_bus.handlers_for(BookingConfirmed)
    assert handlers.log_booking_cancelled in message_bus.handlers_for(BookingCancelled)
    assert finance_handlers.log_payment_confirmed in message_bus.handlers_for(PaymentConfirmed)


def test_audit_handlers_accept_their_events():
    created, cancelled, confirmed = [
        BookingCreated(
            booking_id=1,
            property_id=2,
            booking_reference="BOOKABC123",
            check_in=date(2099, 1, 1),
            check_out=date(2099, 1, 5),
            grand_total=Decimal("1100.00"),
        ),
        BookingCancelled(booking_id=1, property_id=2, previous_status="pending"),
        PaymentConfirmed(
            payment_id=3,
            booking_id=1,
            period_index=0,
            period_count=1,
            amount=Decimal("400.00"),
            ledger_entry_id=4,
            confirmed_by="manager",
        ),
    ]

    handlers.log_booking_created(created)
    handlers.log_booking_cancelled(cancelled)
    finance_handlers.log_payment_confirmed(confirmed)
