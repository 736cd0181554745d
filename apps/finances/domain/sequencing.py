"""
Sequential Payment Rule

A booking's periods must be paid in chronological order. Confirmed
payments always cover a prefix of the schedule: if period k is unpaid,
nothing after k may be paid. The only way to pay ahead is to settle the
whole remaining balance in a single payment.
"""

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from apps.bookings.domain.exceptions import BookingDomainError
from apps.bookings.domain.pricing import PricePeriod
from shared.domain.value_objects import Money


class SequentialPaymentViolation(BookingDomainError):
    """A payment targets a period while an earlier one is still unpaid."""

    code = "sequential_payment_violation"

    def __init__(self, message: str, first_unpaid_index: int | None = None):
        super().__init__(message)
        self.first_unpaid_index = first_unpaid_index

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["first_unpaid_index"] = self.first_unpaid_index
        return data


@dataclass(frozen=True)
class PaymentSchedule:
    """
    A booking's periods together with the indices already covered by
    confirmed payments.
    """

    periods: tuple[PricePeriod, ...]
    confirmed_indices: frozenset[int] = field(default_factory=frozenset)

    @classmethod
    def build(cls, periods: Sequence[PricePeriod], confirmed_ranges: Iterable[range] = ()) -> "PaymentSchedule":
        """Collect confirmed indices from the ranges covered by confirmed payments."""
        confirmed: set[int] = set()
        for covered in confirmed_ranges:
            confirmed.update(covered)
        ordered = tuple(sorted(periods, key=lambda period: period.sequence_index))
        return cls(periods=ordered, confirmed_indices=frozenset(confirmed))

    @property
    def paid_periods_count(self) -> int:
        """Length of the contiguous run of paid periods starting at index 0."""
        count = 0
        while count < len(self.periods) and count in self.confirmed_indices:
            count += 1
        return count

    @property
    def is_settled(self) -> bool:
        return self.paid_periods_count == len(self.periods)

    def amount_for(self, indices: range) -> Money:
        amounts = [self.periods[index].amount for index in indices]
        return sum(amounts[1:], amounts[0])

    def remaining_balance(self) -> Money:
        remaining = range(self.paid_periods_count, len(self.periods))
        if not remaining:
            return Money.zero(self.periods[0].amount.currency)
        return self.amount_for(remaining)


@dataclass(frozen=True)
class Accepted:
    covered: range
    amount_due: Money

    accepted = True

    @property
    def period_index(self) -> int:
        return self.covered.start

    @property
    def period_count(self) -> int:
        return len(self.covered)


@dataclass(frozen=True)
class Rejected:
    reason: str
    first_unpaid_index: int | None = None

    accepted = False

    def to_exception(self) -> SequentialPaymentViolation:
        return SequentialPaymentViolation(self.reason, self.first_unpaid_index)


PaymentDecision = Accepted | Rejected


def validate_next_payment(
    schedule: PaymentSchedule,
    period_index: int | None,
    *,
    full_balance: bool = False,
) -> PaymentDecision:
    """
    Decide whether a payment for ``period_index`` may be taken now

    Accepted when ``period_index`` is exactly the first unpaid period, or
    when ``full_balance`` is set: such a payment covers every period from
    the first unpaid one through the last. Anything else is rejected with
    a reason naming the first unpaid period.
    """
    total = len(schedule.periods)
    paid = schedule.paid_periods_count

    if paid >= total:
        return Rejected("All periods of this booking are already paid.")

    first_unpaid = schedule.periods[paid]

    if full_balance:
        covered = range(paid, total)
        return Accepted(covered=covered, amount_due=schedule.amount_for(covered))

    if period_index is None or not 0 <= period_index < total:
        return Rejected(
            f"Period index {period_index} is outside the schedule (0-{total - 1}).",
            first_unpaid_index=paid,
        )

    if period_index < paid or period_index in schedule.confirmed_indices:
        return Rejected(
            f"{schedule.periods[period_index].label()} is already paid.",
            first_unpaid_index=paid,
        )

    if period_index != paid:
        return Rejected(
            f"{first_unpaid.label()} must be paid first.",
            first_unpaid_index=paid,
        )

    covered = range(paid, paid + 1)
    return Accepted(covered=covered, amount_due=schedule.amount_for(covered))
