"""
Progressive Prepayment Discounts

Period ``i`` of a booking's schedule is discounted by ``min(i * 10, 50)``
percent: the first period is paid in full, each later period is 10% cheaper
than the one before, down to half price from the sixth period onwards.
The percentage depends only on the position in the schedule, never on
how long the periods are or when they fall.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from apps.bookings.domain.pricing import PeriodKind, PricePeriod, RateSchedule, Stay, decompose
from shared.domain.value_objects import Money

DISCOUNT_STEP_PERCENT = 10
MAX_DISCOUNT_PERCENT = 50
DEPOSIT_FLOOR_NIGHTS = 7


def discount_percent_for(sequence_index: int) -> int:
    if sequence_index < 0:
        raise ValueError(f"Sequence index cannot be negative: {sequence_index}")
    return min(sequence_index * DISCOUNT_STEP_PERCENT, MAX_DISCOUNT_PERCENT)


def discounted_amount(base_amount: Money, percent: int) -> Money:
    return base_amount * (Decimal(100 - percent) / Decimal(100))


def security_deposit_for(periods: Sequence[PricePeriod]) -> Money:
    """
    Deposit equals the undiscounted rate of the largest tier used by the stay

    monthly rate if a monthly period is present, else weekly rate if a weekly
    period is present, else seven nights at the nightly rate.
    """
    by_kind = {period.kind: period for period in periods}
    if PeriodKind.MONTHLY in by_kind:
        return by_kind[PeriodKind.MONTHLY].rate
    if PeriodKind.WEEKLY in by_kind:
        return by_kind[PeriodKind.WEEKLY].rate
    return by_kind[PeriodKind.DAILY].rate * DEPOSIT_FLOOR_NIGHTS


@dataclass(frozen=True)
class PricingSummary:
    """Discounted payment schedule plus the totals shown to the guest."""

    periods: tuple[PricePeriod, ...]
    accommodation_total: Money
    security_deposit: Money
    grand_total: Money

    def as_dict(self) -> dict:
        return {
            'periods': [period.as_dict() for period in self.periods],
            'accommodation_total': str(self.accommodation_total.amount),
            'security_deposit': str(self.security_deposit.amount),
            'grand_total': str(self.grand_total.amount),
            'currency': self.grand_total.currency,
        }


def apply_discounts(periods: Sequence[PricePeriod]) -> PricingSummary:
    """
    Discount each period by its position and compute booking totals

    The input periods are left untouched; discounted copies are returned
    in the same order.
    """
    if not periods:
        raise ValueError("Cannot price an empty period schedule")

    ordered = sorted(periods, key=lambda period: period.sequence_index)
    discounted = []
    for period in ordered:
        percent = discount_percent_for(period.sequence_index)
        discounted.append(period.with_discount(percent, discounted_amount(period.base_amount, percent)))

    accommodation_total = sum(
        (period.amount for period in discounted[1:]),
        discounted[0].amount,
    )
    security_deposit = security_deposit_for(discounted)

    return PricingSummary(
        periods=tuple(discounted),
        accommodation_total=accommodation_total,
        security_deposit=security_deposit,
        grand_total=accommodation_total + security_deposit,
    )


def quote(schedule: RateSchedule, stay: Stay) -> PricingSummary:
    """Decompose a stay and apply discounts in one call."""
    return apply_discounts(decompose(schedule, stay))
