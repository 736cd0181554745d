"""Booking workflows on top of the pure pricing and availability engine.

Writes that depend on an availability check (creating or confirming a
booking) run inside one transaction after locking the property row with
``SELECT ... FOR UPDATE``, so concurrent requests for the same property are
serialized and cannot both observe "available". Losing that race surfaces
as the same ``PropertyUnavailableError`` as a pre-existing conflict.
"""

from __future__ import annotations

import logging
from datetime import date

from django.db.models import QuerySet  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.domain.availability import (
    DayAvailability,
    ensure_available,
    is_available,
    list_availability,
)
from apps.bookings.domain.discounts import PricingSummary, quote
from apps.bookings.domain.events import BookingCancelled, BookingConfirmed, BookingCreated
from apps.bookings.domain.exceptions import (
    BookingStateError,
    InvalidStayError,
    PropertyUnavailableError,
)
from apps.bookings.domain.pricing import Stay
from apps.properties.models import Property
from shared.application.uow import DjangoUnitOfWork
from shared.infrastructure.locking import lock_row

from .models import Booking, BookingPeriod

logger = logging.getLogger(__name__)


def lock_property(property_id: int) -> Property:
    """Load the property row and hold its lock until the transaction ends."""
    return lock_row(Property, property_id)


def confirmed_bookings(property_obj: Property, stay: Stay | None = None, *, exclude_booking_id=None) -> QuerySet:
    """Confirmed bookings of the property, optionally narrowed to those touching ``stay``."""
    qs = Booking.objects.filter(property=property_obj, status=Booking.Status.CONFIRMED)
    if stay is not None:
        qs = qs.filter(check_in__lt=stay.check_out, check_out__gt=stay.check_in)
    if exclude_booking_id is not None:
        qs = qs.exclude(pk=exclude_booking_id)
    return qs


def ensure_property_is_available(property_obj: Property, stay: Stay, *, exclude_booking_id=None) -> None:
    """Raise PropertyUnavailableError if a confirmed booking overlaps the stay."""
    candidates = confirmed_bookings(property_obj, stay, exclude_booking_id=exclude_booking_id)
    try:
        ensure_available(property_obj.pk, stay, candidates)
    except PropertyUnavailableError:
        logger.warning(
            "Availability conflict for property %s, stay %s - %s",
            property_obj.pk,
            stay.check_in,
            stay.check_out,
        )
        raise


def check_availability(property_obj: Property, stay: Stay) -> bool:
    return is_available(property_obj.pk, stay, confirmed_bookings(property_obj, stay))


def availability_calendar(property_obj: Property, range_start: date, range_end: date) -> list[DayAvailability]:
    bookings = Booking.objects.filter(
        property=property_obj,
        status=Booking.Status.CONFIRMED,
        check_in__lte=range_end,
        check_out__gt=range_start,
    )
    return list_availability(property_obj.pk, range_start, range_end, bookings)


def quote_for_property(property_obj: Property, stay: Stay) -> PricingSummary:
    summary = quote(property_obj.rate_schedule(), stay)
    logger.info(
        "Quoted property %s for %s - %s: %d periods, grand total %s",
        property_obj.pk,
        stay.check_in,
        stay.check_out,
        len(summary.periods),
        summary.grand_total,
    )
    return summary


def create_booking(
    property_id: int,
    stay: Stay,
    *,
    guest_name: str,
    guest_email: str,
    guest_phone: str = "",
    notes: str = "",
    as_of: date,
) -> Booking:
    """
    Price the stay and store the booking with its payment schedule

    ``as_of`` is the caller's "today"; stays starting before it are rejected.
    The property row stays locked until commit so a concurrent request for
    overlapping dates waits and then fails the availability check.

    Raises:
        InvalidStayError: check-in before ``as_of``
        InvalidRateError: property rates are not positive
        PropertyUnavailableError: a confirmed booking overlaps the stay
        Property.DoesNotExist: unknown property
    """
    if stay.check_in < as_of:
        raise InvalidStayError(f"Check-in ({stay.check_in}) cannot be before {as_of}")

    with DjangoUnitOfWork() as uow:
        property_obj = lock_property(property_id)
        ensure_property_is_available(property_obj, stay)
        summary = quote_for_property(property_obj, stay)

        booking = Booking.objects.create(
            property=property_obj,
            guest_name=guest_name,
            guest_email=guest_email,
            guest_phone=guest_phone,
            check_in=stay.check_in,
            check_out=stay.check_out,
            accommodation_total=summary.accommodation_total.amount,
            security_deposit=summary.security_deposit.amount,
            grand_total=summary.grand_total.amount,
            currency=summary.grand_total.currency,
            notes=notes or f"Booking for {guest_name}",
        )
        BookingPeriod.objects.bulk_create(
            [BookingPeriod.from_price_period(booking, period) for period in summary.periods]
        )

        uow.add_event(BookingCreated(
            booking_id=booking.pk,
            property_id=property_obj.pk,
            booking_reference=booking.booking_reference,
            check_in=booking.check_in,
            check_out=booking.check_out,
            grand_total=booking.grand_total,
        ))

    logger.info(
        "Created booking %s for property %s (%s - %s, %d periods)",
        booking.booking_reference,
        property_obj.pk,
        booking.check_in,
        booking.check_out,
        len(summary.periods),
    )
    return booking


def confirm_booking(booking_id: int) -> Booking:
    """
    PENDING -> CONFIRMED, re-checking availability under the property lock

    Two pending bookings for overlapping dates may coexist; only the first
    one to be confirmed wins.
    """
    with DjangoUnitOfWork() as uow:
        property_id = Booking.objects.values_list("property_id", flat=True).get(pk=booking_id)
        property_obj = lock_property(property_id)
        booking = lock_row(Booking, booking_id)

        if booking.status != Booking.Status.PENDING:
            raise BookingStateError(
                f"Booking {booking.booking_reference} cannot be confirmed from status {booking.status}"
            )

        ensure_property_is_available(property_obj, booking.stay, exclude_booking_id=booking.pk)

        booking.status = Booking.Status.CONFIRMED
        booking.confirmed_at = timezone.now()
        booking.save(update_fields=["status", "confirmed_at", "updated_at"])

        uow.add_event(BookingConfirmed(
            booking_id=booking.pk,
            property_id=property_obj.pk,
            check_in=booking.check_in,
            check_out=booking.check_out,
        ))

    logger.info("Confirmed booking %s", booking.booking_reference)
    return booking


def cancel_booking(booking_id: int, reason: str = "") -> Booking:
    """Cancel a pending or confirmed booking; its periods and payments are kept."""
    with DjangoUnitOfWork() as uow:
        booking = lock_row(Booking, booking_id)
        if booking.status == Booking.Status.CANCELLED:
            raise BookingStateError(f"Booking {booking.booking_reference} is already cancelled")

        previous_status = booking.status
        booking.status = Booking.Status.CANCELLED
        booking.cancelled_at = timezone.now()
        booking.cancellation_reason = reason
        booking.save(update_fields=["status", "cancelled_at", "cancellation_reason", "updated_at"])

        uow.add_event(BookingCancelled(
            booking_id=booking.pk,
            property_id=booking.property_id,
            previous_status=previous_status,
            reason=reason,
        ))

    logger.info("Cancelled booking %s (was %s)", booking.booking_reference, previous_status)
    return booking


def movements_on(day: date) -> dict[str, QuerySet]:
    """Arrivals and departures of non-cancelled bookings on ``day``."""
    active = Booking.objects.exclude(status=Booking.Status.CANCELLED).select_related("property")
    return {
        "check_ins": active.filter(check_in=day).order_by("property__name"),
        "check_outs": active.filter(check_out=day).order_by("property__name"),
    }


def find_guest_booking(reference: str, email: str) -> Booking | None:
    """
    Booking matching both the reference and the guest email

    Both comparisons ignore case. A wrong email looks exactly like an
    unknown reference so references cannot be probed for guest details.
    """
    booking = (
        Booking.objects.select_related("property")
        .prefetch_related("periods", "payments")
        .filter(booking_reference__iexact=reference.strip(), guest_email__iexact=email)
        .first()
    )
    if booking is None:
        logger.info("Guest lookup found no booking for reference %s", reference)
    return booking
