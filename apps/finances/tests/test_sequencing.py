from datetime import date
from decimal import Decimal

import pytest

from apps.bookings.domain.discounts import quote
from apps.bookings.domain.pricing import RateSchedule, Stay
from apps.finances.domain.sequencing import (
    PaymentSchedule,
    SequentialPaymentViolation,
    validate_next_payment,
)
from shared.domain.value_objects import Money


@pytest.fixture
def periods():
    # monthly 2000.00, weekly 540.00, daily 160.00
    schedule = RateSchedule.from_amounts(nightly=100, weekly=600, monthly=2000)
    return quote(schedule, Stay(date(2025, 1, 1), date(2025, 2, 10))).periods


def test_first_payment_must_target_period_zero(periods):
    schedule = PaymentSchedule.build(periods)

    decision = validate_next_payment(schedule, 1)

    assert not decision.accepted
    assert decision.first_unpaid_index == 0
    assert "Period 1 (monthly, 2025-01-01 - 2025-02-01) must be paid first." == decision.reason


def test_period_two_rejected_while_period_one_unpaid(periods):
    schedule = PaymentSchedule.build(periods, [range(0, 1)])

    decision = validate_next_payment(schedule, 2)

    assert not decision.accepted
    assert decision.first_unpaid_index == 1
    assert "Period 2" in decision.reason


def test_next_unpaid_period_is_accepted(periods):
    schedule = PaymentSchedule.build(periods, [range(0, 1)])

    decision = validate_next_payment(schedule, 1)

    assert decision.accepted
    assert decision.covered == range(1, 2)
    assert decision.period_count == 1
    assert decision.amount_due == Money(Decimal("540"))


def test_full_balance_covers_the_remainder(periods):
    schedule = PaymentSchedule.build(periods, [range(0, 1)])

    decision = validate_next_payment(schedule, 2, full_balance=True)

    assert decision.accepted
    assert decision.covered == range(1, 3)
    assert decision.amount_due == Money(Decimal("700"))


def test_full_balance_on_unpaid_booking_covers_everything(periods):
    decision = validate_next_payment(PaymentSchedule.build(periods), None, full_balance=True)

    assert decision.covered == range(0, 3)
    assert decision.amount_due == Money(Decimal("2700"))


def test_paid_period_is_rejected(periods):
    schedule = PaymentSchedule.build(periods, [range(0, 2)])

    decision = validate_next_payment(schedule, 0)

    assert not decision.accepted
    assert "already paid" in decision.reason


def test_out_of_range_index_is_rejected(periods):
    decision = validate_next_payment(PaymentSchedule.build(periods), 3)

    assert not decision.accepted
    assert decision.first_unpaid_index == 0


def test_settled_schedule_rejects_any_payment(periods):
    schedule = PaymentSchedule.build(periods, [range(0, 3)])

    assert schedule.is_settled
    assert schedule.remaining_balance() == Money(Decimal("0"))
    assert not validate_next_payment(schedule, None, full_balance=True).accepted


def test_paid_count_is_the_contiguous_prefix(periods):
    schedule = PaymentSchedule.build(periods, [range(0, 1), range(2, 3)])

    assert schedule.paid_periods_count == 1
    assert schedule.remaining_balance() == Money(Decimal("700"))


def test_rejection_converts_to_domain_error(periods):
    decision = validate_next_payment(PaymentSchedule.build(periods), 2)

    error = decision.to_exception()

    assert isinstance(error, SequentialPaymentViolation)
    assert error.to_dict() == {
        "detail": decision.reason,
        "code": "sequential_payment_violation",
        "first_unpaid_index": 0,
    }
