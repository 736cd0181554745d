"""
Availability Checking

Pure overlap logic over half-open day intervals [check_in, check_out).
Only confirmed bookings block a property; pending and cancelled ones
never do. The functions accept any objects exposing ``property_id``,
``check_in``, ``check_out`` and ``status`` (the Booking model does), so
the same code runs against ORM rows and plain test data.

Serializing concurrent writers is the caller's job: see
``apps.bookings.services`` which runs these checks under a row lock.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Iterator, Protocol

from shared.domain.value_objects import DateRange, as_day
from apps.bookings.domain.exceptions import InvalidStayError, PropertyUnavailableError
from apps.bookings.domain.pricing import Stay

CONFIRMED = 'confirmed'


class BookedInterval(Protocol):
    property_id: int
    check_in: date
    check_out: date
    status: str


@dataclass(frozen=True)
class Reservation:
    """Minimal booked interval, used where no ORM row is at hand."""

    property_id: int
    check_in: date
    check_out: date
    status: str = CONFIRMED
    booking_reference: str = ''


@dataclass(frozen=True)
class DayAvailability:
    date: date
    available: bool

    def as_dict(self) -> dict:
        return {'date': self.date.isoformat(), 'available': self.available}


def overlaps(a: DateRange, b: DateRange) -> bool:
    """Half-open overlap: a.start < b.end and b.start < a.end."""
    return a.overlaps_with(b)


def _blocking(property_id, bookings: Iterable[BookedInterval]) -> Iterator[BookedInterval]:
    for booking in bookings:
        if booking.property_id == property_id and booking.status == CONFIRMED:
            yield booking


def find_conflicts(property_id, stay: Stay, bookings: Iterable[BookedInterval]) -> list[BookedInterval]:
    """Return the confirmed bookings of ``property_id`` that overlap ``stay``."""
    return [
        booking
        for booking in _blocking(property_id, bookings)
        if overlaps(stay.dates, DateRange(booking.check_in, booking.check_out))
    ]


def is_available(property_id, stay: Stay, bookings: Iterable[BookedInterval]) -> bool:
    return not find_conflicts(property_id, stay, bookings)


def ensure_available(property_id, stay: Stay, bookings: Iterable[BookedInterval]) -> None:
    """
    Raise PropertyUnavailableError if any confirmed booking overlaps the stay
    """
    conflicts = find_conflicts(property_id, stay, bookings)
    if conflicts:
        first = conflicts[0]
        reference = getattr(first, 'booking_reference', '') or 'without reference'
        raise PropertyUnavailableError(
            f"Property {property_id} is not available for {stay.dates}: overlaps booking "
            f"{reference} ({as_day(first.check_in)} - {as_day(first.check_out)})"
        )


def list_availability(
    property_id,
    range_start: date,
    range_end: date,
    bookings: Iterable[BookedInterval],
) -> list[DayAvailability]:
    """
    One entry per day of the closed range [range_start, range_end]

    A day is unavailable iff it falls inside some confirmed booking's
    [check_in, check_out) interval for the property.
    """
    range_start = as_day(range_start)
    range_end = as_day(range_end)
    if range_end < range_start:
        raise InvalidStayError(f"Range end ({range_end}) is before range start ({range_start})")

    booked = [
        DateRange(booking.check_in, booking.check_out)
        for booking in _blocking(property_id, bookings)
    ]

    days = []
    current = range_start
    while current <= range_end:
        days.append(DayAvailability(
            date=current,
            available=not any(interval.contains(current) for interval in booked),
        ))
        current += timedelta(days=1)
    return days
