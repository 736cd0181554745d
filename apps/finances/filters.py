"""FilterSet definitions for payment and ledger listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import LedgerEntry, Payment


class PaymentFilterSet(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name="payment_date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="payment_date", lookup_expr="lte")
    guest = django_filters.CharFilter(field_name="booking__guest_name", lookup_expr="icontains")

    class Meta:
        model = Payment
        fields = ["booking", "status", "method"]


class LedgerEntryFilterSet(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name="entry_date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="entry_date", lookup_expr="lte")

    class Meta:
        model = LedgerEntry
        fields = ["entry_type"]
