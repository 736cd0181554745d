"""Payment registration and confirmation.

Every operation that reads the set of confirmed payments and then writes
runs under a lock on the booking row, so two confirmations for the same
booking are serialized and the sequential payment rule is evaluated
against committed state only.
"""

from __future__ import annotations

import logging
from datetime import datetime

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.domain.exceptions import BookingStateError
from apps.bookings.models import Booking
from shared.application.uow import DjangoUnitOfWork
from shared.infrastructure.locking import lock_row

from .domain.events import PaymentConfirmed
from .domain.sequencing import (
    PaymentSchedule,
    SequentialPaymentViolation,
    validate_next_payment,
)
from .models import LedgerEntry, Payment

logger = logging.getLogger(__name__)


def payment_schedule_for(booking: Booking) -> PaymentSchedule:
    confirmed = booking.payments.filter(status=Payment.Status.CONFIRMED)
    return PaymentSchedule.build(
        booking.price_periods(),
        (payment.covered_indices for payment in confirmed),
    )


def register_payment(
    booking_id: int,
    period_index: int | None = None,
    *,
    full_balance: bool = False,
    method: str = Payment.Method.CASH,
    notes: str = "",
) -> Payment:
    """
    Record a pending payment for the next period (or the whole balance)

    The amount is taken from the stored schedule, never from the caller.

    Raises:
        SequentialPaymentViolation: the target period cannot be paid yet
        BookingStateError: the booking is cancelled
    """
    with transaction.atomic():
        booking = lock_row(Booking, booking_id)
        if booking.status == Booking.Status.CANCELLED:
            raise BookingStateError(f"Booking {booking.booking_reference} is cancelled")

        decision = validate_next_payment(
            payment_schedule_for(booking),
            period_index,
            full_balance=full_balance,
        )
        if not decision.accepted:
            logger.warning(
                "Rejected payment for booking %s period %s: %s",
                booking.booking_reference,
                period_index,
                decision.reason,
            )
            raise decision.to_exception()

        payment = Payment.objects.create(
            booking=booking,
            period_index=decision.period_index,
            period_count=decision.period_count,
            full_balance=full_balance,
            amount=decision.amount_due.amount,
            currency=decision.amount_due.currency,
            method=method,
            notes=notes,
        )

    logger.info(
        "Registered payment %s for booking %s covering periods %s-%s (%s)",
        payment.pk,
        booking.booking_reference,
        payment.period_index,
        payment.period_index + payment.period_count - 1,
        decision.amount_due,
    )
    return payment


def _ledger_description(payment: Payment, booking: Booking) -> str:
    if payment.period_count == 1:
        covered = f"period {payment.period_index + 1}"
    else:
        covered = f"periods {payment.period_index + 1}-{payment.period_index + payment.period_count}"
    return f"Payment for booking {booking.booking_reference}, {covered}"


def confirm_payment(payment_id: int, confirmed_by: str = "", now: datetime | None = None) -> Payment:
    """
    Confirm a pending payment and write its ledger entry atomically

    The payment is re-validated against the confirmed payments at the time
    of confirmation. A payment registered for a period that another
    payment has since covered is stale and is rejected.
    """
    now = now or timezone.now()

    with DjangoUnitOfWork() as uow:
        booking_id = Payment.objects.values_list("booking_id", flat=True).get(pk=payment_id)
        booking = lock_row(Booking, booking_id)
        payment = lock_row(Payment, payment_id)

        if booking.status == Booking.Status.CANCELLED:
            raise BookingStateError(f"Booking {booking.booking_reference} is cancelled")
        if payment.status != Payment.Status.PENDING:
            raise BookingStateError(f"Payment {payment.pk} is {payment.status}, not pending")

        decision = validate_next_payment(
            payment_schedule_for(booking),
            payment.period_index,
            full_balance=payment.full_balance,
        )
        if not decision.accepted:
            raise decision.to_exception()
        if decision.covered != payment.covered_indices:
            raise SequentialPaymentViolation(
                f"Payment {payment.pk} no longer matches the unpaid periods; register it again.",
                first_unpaid_index=decision.period_index,
            )

        payment.status = Payment.Status.CONFIRMED
        payment.confirmed_at = now
        payment.confirmed_by = confirmed_by
        payment.save(update_fields=["status", "confirmed_at", "confirmed_by", "updated_at"])

        entry = LedgerEntry.objects.create(
            payment=payment,
            entry_type=payment.ledger_type,
            amount=payment.amount,
            currency=payment.currency,
            entry_date=timezone.localdate(now),
            description=_ledger_description(payment, booking),
        )

        uow.add_event(PaymentConfirmed(
            payment_id=payment.pk,
            booking_id=booking.pk,
            period_index=payment.period_index,
            period_count=payment.period_count,
            amount=payment.amount,
            ledger_entry_id=entry.pk,
            confirmed_by=confirmed_by,
        ))

    logger.info(
        "Confirmed payment %s for booking %s (%s %s, ledger %s)",
        payment.pk,
        booking.booking_reference,
        payment.amount,
        payment.currency,
        entry.entry_type,
    )
    return payment
