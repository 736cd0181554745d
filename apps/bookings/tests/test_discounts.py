from datetime import date, timedelta
from decimal import Decimal

import pytest

from apps.bookings.domain.discounts import (
    apply_discounts,
    discount_percent_for,
    quote,
    security_deposit_for,
)
from apps.bookings.domain.pricing import PeriodKind, RateSchedule, Stay, decompose
from shared.domain.value_objects import Money


def usd(amount) -> Money:
    return Money(Decimal(str(amount)), "USD")


@pytest.fixture
def tiered():
    return RateSchedule.from_amounts(nightly=100, weekly=600, monthly=2000)


@pytest.mark.parametrize(
    "index, percent",
    [(0, 0), (1, 10), (2, 20), (3, 30), (4, 40), (5, 50), (6, 50), (20, 50)],
)
def test_discount_grows_by_ten_percent_and_caps_at_half(index, percent):
    assert discount_percent_for(index) == percent


def test_negative_index_is_rejected():
    with pytest.raises(ValueError):
        discount_percent_for(-1)


def test_forty_day_stay_from_january_first(tiered):
    summary = quote(tiered, Stay(date(2025, 1, 1), date(2025, 2, 10)))

    assert [p.kind for p in summary.periods] == [PeriodKind.MONTHLY, PeriodKind.WEEKLY, PeriodKind.DAILY]
    assert [p.discount_percent for p in summary.periods] == [0, 10, 20]
    assert [p.amount for p in summary.periods] == [usd(2000), usd(540), usd(160)]
    assert summary.accommodation_total == usd(2700)
    assert summary.security_deposit == usd(2000)
    assert summary.grand_total == usd(4700)


def test_fifth_and_sixth_periods_are_both_half_price():
    schedule = RateSchedule.from_amounts(nightly=100, weekly=600)
    start = date(2025, 1, 1)

    summary = quote(schedule, Stay(start, start + timedelta(days=50)))

    assert [p.discount_percent for p in summary.periods] == [0, 10, 20, 30, 40, 50, 50, 50]
    assert summary.periods[5].amount == usd(300)
    assert summary.periods[6].amount == usd(300)
    assert summary.periods[7].amount == usd(50)


def test_discounts_keep_base_amounts_and_inputs(tiered):
    periods = decompose(tiered, Stay(date(2025, 1, 1), date(2025, 2, 15)))

    summary = apply_discounts(periods)

    assert all(p.discount_percent == 0 for p in periods)
    assert [p.base_amount for p in summary.periods] == [p.base_amount for p in periods]
    assert summary.periods[2].amount == usd(480)


def test_amounts_are_rounded_half_up_to_cents():
    schedule = RateSchedule.from_amounts(nightly="33.35", weekly="99.99")
    start = date(2025, 1, 1)

    summary = quote(schedule, Stay(start, start + timedelta(days=8)))

    # 33.35 * 0.9 = 30.015
    assert summary.periods[1].amount == usd("30.02")
    assert summary.accommodation_total == usd("130.01")


def test_accommodation_total_is_sum_of_discounted_periods(tiered):
    summary = quote(tiered, Stay(date(2025, 3, 3), date(2025, 7, 19)))

    total = sum((p.amount for p in summary.periods[1:]), summary.periods[0].amount)
    assert summary.accommodation_total == total
    assert summary.grand_total == summary.accommodation_total + summary.security_deposit


def test_deposit_uses_weekly_rate_without_a_month(tiered):
    summary = quote(tiered, Stay(date(2025, 1, 1), date(2025, 1, 10)))

    assert summary.security_deposit == usd(600)


def test_deposit_falls_back_to_seven_nights():
    schedule = RateSchedule.from_amounts(nightly=120, weekly=700, monthly=2500)

    summary = quote(schedule, Stay(date(2025, 1, 1), date(2025, 1, 4)))

    assert summary.security_deposit == usd(840)


def test_deposit_for_nightly_only_long_stay():
    schedule = RateSchedule.from_amounts(nightly=50)
    periods = decompose(schedule, Stay(date(2025, 1, 1), date(2025, 3, 1)))

    assert security_deposit_for(periods) == usd(350)


def test_empty_schedule_cannot_be_priced():
    with pytest.raises(ValueError):
        apply_discounts([])


def test_summary_serializes_decimal_strings(tiered):
    data = quote(tiered, Stay(date(2025, 1, 1), date(2025, 2, 10))).as_dict()

    assert data["accommodation_total"] == "2700.00"
    assert data["grand_total"] == "4700.00"
    assert data["currency"] == "USD"
    assert data["periods"][1]["discount_percent"] == 10
