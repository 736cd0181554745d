"""
Rate Period Decomposition

Turns a property's tiered rate schedule and a stay into the ordered list
of billable periods that make up the booking's payment schedule.

The walk is greedy and left to right from check-in:
1. a full calendar month if a monthly rate is set and the month fits,
2. otherwise a 7-day week if a weekly rate is set and a week fits,
3. otherwise one daily period that absorbs every remaining night.

Precedence is fixed (monthly > weekly > daily); there is no search for
the cheapest combination.
"""

from dataclasses import dataclass, replace
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Iterator

from dateutil.relativedelta import relativedelta

from shared.domain.base import ValueObject
from shared.domain.value_objects import DateRange, Money, as_day
from apps.bookings.domain.exceptions import InvalidRateError, InvalidStayError

WEEK = timedelta(days=7)
ONE_MONTH = relativedelta(months=1)


class PeriodKind(str, Enum):
    MONTHLY = 'monthly'
    WEEKLY = 'weekly'
    DAILY = 'daily'


@dataclass(frozen=True)
class RateSchedule(ValueObject):
    """
    Tiered rates of a property

    Only the nightly rate is mandatory. Weekly and monthly rates are
    optional and decomposition falls back to nightly pricing without them.
    """
    nightly_rate: Money
    weekly_rate: Money | None = None
    monthly_rate: Money | None = None

    def __post_init__(self):
        if self.nightly_rate.amount <= 0:
            raise InvalidRateError(f"Nightly rate must be positive, got {self.nightly_rate.amount}")
        for name in ('weekly_rate', 'monthly_rate'):
            rate = getattr(self, name)
            if rate is not None and rate.amount <= 0:
                raise InvalidRateError(
                    f"{name.replace('_', ' ').capitalize()} must be positive, got {rate.amount}"
                )

    @classmethod
    def from_amounts(cls, nightly, weekly=None, monthly=None) -> 'RateSchedule':
        """
        Build a schedule from raw numbers (Decimal, str or int)

        Non-positive values raise InvalidRateError before Money rejects
        negative amounts, so callers see a single error type for bad rates.
        """
        def to_money(value, name: str) -> Money | None:
            if value is None:
                return None
            amount = Decimal(str(value))
            if amount <= 0:
                raise InvalidRateError(f"{name} must be positive, got {amount}")
            return Money(amount)

        return cls(
            nightly_rate=to_money(nightly, 'Nightly rate'),
            weekly_rate=to_money(weekly, 'Weekly rate'),
            monthly_rate=to_money(monthly, 'Monthly rate'),
        )

    def rate_for(self, kind: PeriodKind) -> Money | None:
        return {
            PeriodKind.MONTHLY: self.monthly_rate,
            PeriodKind.WEEKLY: self.weekly_rate,
            PeriodKind.DAILY: self.nightly_rate,
        }[kind]


@dataclass(frozen=True)
class Stay(ValueObject):
    """
    A guest's stay: nights from check_in up to (not including) check_out

    Datetimes are reduced to their calendar day. Reversed or zero-length
    stays are rejected, never swapped.
    """
    check_in: date
    check_out: date

    def __post_init__(self):
        try:
            object.__setattr__(self, 'check_in', as_day(self.check_in))
            object.__setattr__(self, 'check_out', as_day(self.check_out))
        except TypeError as exc:
            raise InvalidStayError(str(exc)) from exc
        if self.check_in >= self.check_out:
            raise InvalidStayError(
                f"Check-out ({self.check_out}) must be after check-in ({self.check_in})"
            )

    @property
    def dates(self) -> DateRange:
        return DateRange(self.check_in, self.check_out)

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days


@dataclass(frozen=True)
class PricePeriod(ValueObject):
    """
    One billable slice of a stay

    ``units`` is 1 for monthly and weekly periods and the number of nights
    for a daily period; ``base_amount == rate * units``. ``amount`` is the
    discounted price (equal to ``base_amount`` until discounts are applied).
    """
    kind: PeriodKind
    start: date
    end: date
    units: int
    rate: Money
    base_amount: Money
    amount: Money
    sequence_index: int
    discount_percent: int = 0

    @property
    def dates(self) -> DateRange:
        return DateRange(self.start, self.end)

    @property
    def nights(self) -> int:
        return (self.end - self.start).days

    def with_discount(self, percent: int, amount: Money) -> 'PricePeriod':
        return replace(self, discount_percent=percent, amount=amount)

    def label(self) -> str:
        """Human readable name, 1-based: 'Period 2 (weekly, 2025-02-01 - 2025-02-08)'."""
        return f"Period {self.sequence_index + 1} ({self.kind.value}, {self.start} - {self.end})"

    def as_dict(self) -> dict:
        return {
            'sequence_index': self.sequence_index,
            'kind': self.kind.value,
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'units': self.units,
            'rate': str(self.rate.amount),
            'base_amount': str(self.base_amount.amount),
            'discount_percent': self.discount_percent,
            'amount': str(self.amount.amount),
        }


def _walk(schedule: RateSchedule, stay: Stay) -> Iterator[tuple[PeriodKind, date, date, int]]:
    cursor = stay.check_in
    end = stay.check_out
    while cursor < end:
        if schedule.monthly_rate is not None and cursor + ONE_MONTH <= end:
            next_cursor = cursor + ONE_MONTH
            yield PeriodKind.MONTHLY, cursor, next_cursor, 1
        elif schedule.weekly_rate is not None and cursor + WEEK <= end:
            next_cursor = cursor + WEEK
            yield PeriodKind.WEEKLY, cursor, next_cursor, 1
        else:
            yield PeriodKind.DAILY, cursor, end, (end - cursor).days
            return
        cursor = next_cursor


def decompose(schedule: RateSchedule, stay: Stay) -> tuple[PricePeriod, ...]:
    """
    Split a stay into monthly, weekly and daily periods

    Returns a non-empty tuple ordered by ``sequence_index`` (chronological).
    The periods are contiguous and cover exactly [check_in, check_out).

    Raises:
        InvalidStayError: check_in >= check_out
        InvalidRateError: nightly rate <= 0
    """
    # Stay and RateSchedule already validate on construction; these checks
    # cover duck-typed callers that bypass them.
    if not isinstance(stay, Stay):
        raise InvalidStayError("A Stay is required")
    if schedule.nightly_rate.amount <= 0:
        raise InvalidRateError(f"Nightly rate must be positive, got {schedule.nightly_rate.amount}")

    periods = []
    for index, (kind, start, end, units) in enumerate(_walk(schedule, stay)):
        rate = schedule.rate_for(kind)
        base_amount = rate * units
        periods.append(PricePeriod(
            kind=kind,
            start=start,
            end=end,
            units=units,
            rate=rate,
            base_amount=base_amount,
            amount=base_amount,
            sequence_index=index,
        ))
    return tuple(periods)
