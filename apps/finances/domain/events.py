"""
Finance Domain Events

Published after the payment confirmation transaction commits.
"""

from dataclasses import dataclass
from decimal import Decimal

from shared.domain.base import DomainEvent


@dataclass
class PaymentConfirmed(DomainEvent):
    """
    Event: A payment was confirmed and its ledger entry written

    Triggers:
    - Audit log entry
    """
    payment_id: int
    booking_id: int
    period_index: int
    period_count: int
    amount: Decimal
    ledger_entry_id: int
    confirmed_by: str
