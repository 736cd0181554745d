"""Booking models: the booking itself and its priced payment schedule."""

from __future__ import annotations

import builtins
import secrets
import string
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.pricing import PeriodKind, PricePeriod, Stay
from shared.domain.value_objects import Money

REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
REFERENCE_LENGTH = 6


class Booking(models.Model):
    """A guest's reservation of a property for a stay."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")

    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    booking_reference = models.CharField(max_length=16, unique=True, editable=False)
    guest_name = models.CharField(max_length=255)
    guest_email = models.EmailField()
    guest_phone = models.CharField(max_length=32, blank=True)
    check_in = models.DateField()
    check_out = models.DateField()
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )
    accommodation_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    security_deposit = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    grand_total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="USD")
    notes = models.TextField(blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="booking_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "status", "check_in", "check_out"]),
        ]

    def __str__(self) -> str:
        return f"Booking {self.booking_reference} for property {self.property_id}"

    @staticmethod
    def generate_booking_reference() -> str:
        prefix = getattr(settings, "BOOKING_REFERENCE_PREFIX", "BOOK")
        suffix = "".join(secrets.choice(REFERENCE_ALPHABET) for _position in range(REFERENCE_LENGTH))
        return f"{prefix}{suffix}"

    def save(self, *args, **kwargs):  # type: ignore
        if self._state.adding and not self.booking_reference:
            reference = self.generate_booking_reference()
            while Booking.objects.filter(booking_reference=reference).exists():
                reference = self.generate_booking_reference()
            self.booking_reference = reference
        super().save(*args, **kwargs)

    @builtins.property
    def stay(self) -> Stay:
        return Stay(self.check_in, self.check_out)

    @builtins.property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    def price_periods(self) -> tuple[PricePeriod, ...]:
        return tuple(period.to_price_period() for period in self.periods.order_by("sequence_index"))


class BookingPeriod(models.Model):
    """One discounted period of a booking's payment schedule; never edited after creation."""

    class Kind(models.TextChoices):
        MONTHLY = PeriodKind.MONTHLY.value, _("Monthly")
        WEEKLY = PeriodKind.WEEKLY.value, _("Weekly")
        DAILY = PeriodKind.DAILY.value, _("Daily")

    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name="periods",
    )
    sequence_index = models.PositiveSmallIntegerField()
    kind = models.CharField(max_length=10, choices=Kind.choices)
    start_date = models.DateField()
    end_date = models.DateField()
    units = models.PositiveSmallIntegerField()
    rate = models.DecimalField(max_digits=12, decimal_places=2)
    base_amount = models.DecimalField(max_digits=12, decimal_places=2)
    discount_percent = models.PositiveSmallIntegerField(default=0)
    amount = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        verbose_name = _("Booking period")
        verbose_name_plural = _("Booking periods")
        ordering = ["booking", "sequence_index"]
        constraints = [
            models.UniqueConstraint(
                fields=["booking", "sequence_index"],
                name="booking_period_unique_index",
            ),
            models.CheckConstraint(
                condition=models.Q(end_date__gt=models.F("start_date")),
                name="booking_period_valid_dates",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.booking_id}#{self.sequence_index} {self.kind} {self.start_date} - {self.end_date}"

    @classmethod
    def from_price_period(cls, booking: Booking, period: PricePeriod) -> "BookingPeriod":
        return cls(
            booking=booking,
            sequence_index=period.sequence_index,
            kind=period.kind.value,
            start_date=period.start,
            end_date=period.end,
            units=period.units,
            rate=period.rate.amount,
            base_amount=period.base_amount.amount,
            discount_percent=period.discount_percent,
            amount=period.amount.amount,
        )

    def to_price_period(self) -> PricePeriod:
        currency = self.booking.currency
        return PricePeriod(
            kind=PeriodKind(self.kind),
            start=self.start_date,
            end=self.end_date,
            units=self.units,
            rate=Money(self.rate, currency),
            base_amount=Money(self.base_amount, currency),
            amount=Money(self.amount, currency),
            sequence_index=self.sequence_index,
            discount_percent=self.discount_percent,
        )
