"""Serializers for the finance domain (payments and ledger)."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import LedgerEntry, Payment


class LedgerEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = LedgerEntry
        fields = [
            "id",
            "payment",
            "entry_type",
            "amount",
            "currency",
            "entry_date",
            "description",
            "created_at",
        ]
        read_only_fields = fields


class PaymentSerializer(serializers.ModelSerializer):
    """Payment with the schedule slice it covers."""

    booking_reference = serializers.ReadOnlyField(source="booking.booking_reference")
    ledger_entry = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = [
            "id",
            "booking",
            "booking_reference",
            "period_index",
            "period_count",
            "full_balance",
            "amount",
            "currency",
            "method",
            "status",
            "payment_date",
            "confirmed_at",
            "confirmed_by",
            "notes",
            "ledger_entry",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_ledger_entry(self, obj: Payment):  # type: ignore
        entry = getattr(obj, "ledger_entry", None)
        if entry is None:
            return None
        return LedgerEntrySerializer(entry).data


class PaymentCreateSerializer(serializers.Serializer):
    """
    Payment registration request.

    Either ``period_index`` (the next unpaid period) or ``full_balance``
    must be given; the amount always comes from the stored schedule.
    """

    booking = serializers.IntegerField(min_value=1)
    period_index = serializers.IntegerField(min_value=0, required=False, allow_null=True, default=None)
    full_balance = serializers.BooleanField(required=False, default=False)
    method = serializers.ChoiceField(choices=Payment.Method.choices, default=Payment.Method.CASH)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):  # type: ignore
        if attrs["period_index"] is None and not attrs["full_balance"]:
            raise serializers.ValidationError(
                {"period_index": ["Required unless full_balance is set."]}
            )
        return attrs
