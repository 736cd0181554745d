"""Audit log handlers for booking events, run after commit."""

from __future__ import annotations

import structlog

from .domain.events import BookingCancelled, BookingConfirmed, BookingCreated

logger = structlog.get_logger(__name__)


def log_booking_created(event: BookingCreated) -> None:
    logger.info(
        "booking.created",
        event_id=str(event.event_id),
        booking_id=event.booking_id,
        property_id=event.property_id,
        booking_reference=event.booking_reference,
        check_in=event.check_in.isoformat(),
        check_out=event.check_out.isoformat(),
        grand_total=str(event.grand_total),
    )


def log_booking_confirmed(event: BookingConfirmed) -> None:
    logger.info(
        "booking.confirmed",
        event_id=str(event.event_id),
        booking_id=event.booking_id,
        property_id=event.property_id,
        check_in=event.check_in.isoformat(),
        check_out=event.check_out.isoformat(),
    )


def log_booking_cancelled(event: BookingCancelled) -> None:
    logger.info(
        "booking.cancelled",
        event_id=str(event.event_id),
        booking_id=event.booking_id,
        property_id=event.property_id,
        previous_status=event.previous_status,
        reason=event.reason,
    )
