"""Admin registrations for properties domain."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Property


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "property_type",
        "capacity",
        "nightly_rate",
        "weekly_rate",
        "monthly_rate",
    )
    list_filter = ("property_type",)
    search_fields = ("name", "address")
    readonly_fields = ("created_at", "updated_at")
