"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Booking, BookingPeriod


class BookingPeriodInline(admin.TabularInline):
    model = BookingPeriod
    extra = 0
    can_delete = False
    fields = (
        "sequence_index",
        "kind",
        "start_date",
        "end_date",
        "units",
        "rate",
        "discount_percent",
        "amount",
    )
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):  # type: ignore
        return False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_reference",
        "property",
        "guest_name",
        "status",
        "check_in",
        "check_out",
        "grand_total",
        "created_at",
    )
    list_filter = ("status", "check_in", "check_out")
    search_fields = ("booking_reference", "property__name", "guest_name", "guest_email")
    readonly_fields = (
        "booking_reference",
        "accommodation_total",
        "security_deposit",
        "grand_total",
        "currency",
        "confirmed_at",
        "cancelled_at",
        "created_at",
        "updated_at",
    )
    inlines = (BookingPeriodInline,)
