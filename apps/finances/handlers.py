"""Audit log handler for confirmed payments."""

from __future__ import annotations

import structlog

from .domain.events import PaymentConfirmed

logger = structlog.get_logger(__name__)


def log_payment_confirmed(event: PaymentConfirmed) -> None:
    logger.info(
        "payment.confirmed",
        event_id=str(event.event_id),
        payment_id=event.payment_id,
        booking_id=event.booking_id,
        periods=f"{event.period_index}-{event.period_index + event.period_count - 1}",
        amount=str(event.amount),
        ledger_entry_id=event.ledger_entry_id,
        confirmed_by=event.confirmed_by,
    )
