"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.bookings.domain.exceptions import InvalidStayError
from apps.bookings.domain.pricing import Stay

from .models import Booking, BookingPeriod


class StaySerializer(serializers.Serializer):
    """Check-in/check-out pair shared by quote, availability and booking requests."""

    check_in = serializers.DateField()
    check_out = serializers.DateField()

    def validate(self, attrs):  # type: ignore
        try:
            attrs["stay"] = Stay(attrs["check_in"], attrs["check_out"])
        except InvalidStayError as exc:
            raise serializers.ValidationError({"check_out": [exc.message]}, code=exc.code)
        return attrs


class AvailabilityRangeSerializer(serializers.Serializer):
    start = serializers.DateField()
    end = serializers.DateField()

    def validate(self, attrs):  # type: ignore
        if attrs["end"] < attrs["start"]:
            raise serializers.ValidationError({"end": ["End date must not be before start date."]})
        return attrs


class BookingCreateSerializer(StaySerializer):
    """Booking request: dates, guest contact details and the target property."""

    property = serializers.IntegerField(min_value=1)
    guest_name = serializers.CharField(max_length=255)
    guest_email = serializers.EmailField()
    guest_phone = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class BookingPeriodSerializer(serializers.ModelSerializer):
    class Meta:
        model = BookingPeriod
        fields = [
            "sequence_index",
            "kind",
            "start_date",
            "end_date",
            "units",
            "rate",
            "base_amount",
            "discount_percent",
            "amount",
        ]
        read_only_fields = fields


class BookingSerializer(serializers.ModelSerializer):
    """Booking with its stored payment schedule."""

    property_id = serializers.ReadOnlyField(source="property.id")
    property_name = serializers.ReadOnlyField(source="property.name")
    nights = serializers.ReadOnlyField()
    periods = BookingPeriodSerializer(many=True, read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "booking_reference",
            "property_id",
            "property_name",
            "guest_name",
            "guest_email",
            "guest_phone",
            "check_in",
            "check_out",
            "nights",
            "status",
            "accommodation_total",
            "security_deposit",
            "grand_total",
            "currency",
            "notes",
            "periods",
            "confirmed_at",
            "cancelled_at",
            "cancellation_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingMovementSerializer(serializers.ModelSerializer):
    """Short form used by the daily arrivals/departures listing."""

    property_id = serializers.ReadOnlyField()
    property_name = serializers.ReadOnlyField(source="property.name")

    class Meta:
        model = Booking
        fields = [
            "id",
            "booking_reference",
            "property_id",
            "property_name",
            "guest_name",
            "guest_phone",
            "check_in",
            "check_out",
            "status",
        ]
        read_only_fields = fields


class CancelBookingSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class GuestLookupSerializer(serializers.Serializer):
    """Booking reference plus the guest email it was made with."""

    ref = serializers.CharField(max_length=16)
    email = serializers.EmailField()
