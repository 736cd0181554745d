"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from shared.domain.base import DomainEvent


@dataclass
class BookingCreated(DomainEvent):
    """
    Event: A new booking and its payment schedule were stored

    Triggers:
    - Audit log entry
    """
    booking_id: int
    property_id: int
    booking_reference: str
    check_in: date
    check_out: date
    grand_total: Decimal


@dataclass
class BookingConfirmed(DomainEvent):
    """
    Event: Booking confirmed (PENDING -> CONFIRMED)

    From now on its dates block the property.
    """
    booking_id: int
    property_id: int
    check_in: date
    check_out: date


@dataclass
class BookingCancelled(DomainEvent):
    """
    Event: Booking was cancelled

    Its dates no longer block the property.
    """
    booking_id: int
    property_id: int
    previous_status: str
    reason: str = ''
