"""Property domain models.

A property carries the tiered rate schedule (nightly, optional weekly and
monthly) that the pricing engine decomposes stays against.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.bookings.domain.pricing import RateSchedule

POSITIVE_RATE = MinValueValidator(Decimal("0.01"))


class Property(models.Model):
    """A unit listed for short-term rental."""

    class PropertyType(models.TextChoices):
        APARTMENT = "apartment", _("Apartment")
        HOUSE = "house", _("House")
        SHARED_SPACE = "shared_space", _("Shared space")

    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255)
    property_type = models.CharField(
        max_length=20,
        choices=PropertyType.choices,
        default=PropertyType.APARTMENT,
    )
    capacity = models.PositiveSmallIntegerField(default=1)
    nightly_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[POSITIVE_RATE],
        help_text=_("Price per night; also used for the remainder of a stay."),
    )
    weekly_rate = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[POSITIVE_RATE],
        help_text=_("Flat price for 7 consecutive nights."),
    )
    monthly_rate = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[POSITIVE_RATE],
        help_text=_("Flat price for one calendar month."),
    )
    image_urls = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Property")
        verbose_name_plural = _("Properties")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def rate_schedule(self) -> RateSchedule:
        """Snapshot of the current rates; raises InvalidRateError if they are not positive."""
        return RateSchedule.from_amounts(
            nightly=self.nightly_rate,
            weekly=self.weekly_rate,
            monthly=self.monthly_rate,
        )
