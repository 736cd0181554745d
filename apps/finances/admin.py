"""Admin registration for payments and ledger entries."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import LedgerEntry, Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "booking",
        "period_index",
        "period_count",
        "amount",
        "method",
        "status",
        "payment_date",
    )
    list_filter = ("status", "method", "payment_date")
    search_fields = ("booking__booking_reference", "booking__guest_name")
    readonly_fields = ("amount", "currency", "confirmed_at", "confirmed_by", "created_at", "updated_at")


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    list_display = ("entry_date", "entry_type", "amount", "currency", "payment")
    list_filter = ("entry_type", "entry_date")
    search_fields = ("description",)
    readonly_fields = ("payment", "entry_type", "amount", "currency", "entry_date", "description", "created_at")
