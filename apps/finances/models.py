"""Financial models: guest payments and the bookkeeping ledger."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Payment(models.Model):
    """
    A payment against one or more consecutive periods of a booking.

    ``period_index`` is the first covered period and ``period_count`` the
    number of covered periods; only a full-balance payment covers more
    than one. Rows are appended and never deleted.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        REFUNDED = "refunded", _("Refunded")

    class Method(models.TextChoices):
        CASH = "cash", _("Cash")
        BANK_TRANSFER = "bank_transfer", _("Bank transfer")
        CARD = "card", _("Card")

    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.PROTECT,
        related_name="payments",
    )
    period_index = models.PositiveSmallIntegerField()
    period_count = models.PositiveSmallIntegerField(default=1)
    full_balance = models.BooleanField(default=False)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="USD")
    method = models.CharField(max_length=20, choices=Method.choices, default=Method.CASH)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_date = models.DateField(default=timezone.localdate)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    confirmed_by = models.CharField(max_length=150, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["booking", "status"]),
        ]

    def __str__(self) -> str:
        return f"Payment {self.pk} for booking {self.booking_id} ({self.status})"

    @property
    def covered_indices(self) -> range:
        return range(self.period_index, self.period_index + self.period_count)

    @property
    def ledger_type(self) -> str:
        if self.method == self.Method.CASH:
            return LedgerEntry.EntryType.CASH
        return LedgerEntry.EntryType.BANK


class LedgerEntry(models.Model):
    """Asset entry written in the same transaction that confirms a payment."""

    class EntryType(models.TextChoices):
        CASH = "cash", _("Cash")
        BANK = "bank", _("Bank")

    payment = models.OneToOneField(
        Payment,
        on_delete=models.PROTECT,
        related_name="ledger_entry",
    )
    entry_type = models.CharField(max_length=10, choices=EntryType.choices)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=3, default="USD")
    entry_date = models.DateField(default=timezone.localdate)
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Ledger entry")
        verbose_name_plural = _("Ledger entries")
        ordering = ["-entry_date", "-created_at"]

    def __str__(self) -> str:
        return f"{self.entry_type} {self.amount} {self.currency} (payment {self.payment_id})"
