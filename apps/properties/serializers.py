"""Serializers for the properties domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.bookings.domain.exceptions import InvalidRateError

from .models import Property


class PropertySerializer(serializers.ModelSerializer):
    class Meta:
        model = Property
        fields = [
            "id",
            "name",
            "address",
            "property_type",
            "capacity",
            "nightly_rate",
            "weekly_rate",
            "monthly_rate",
            "image_urls",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def validate_image_urls(self, value):  # type: ignore
        if not isinstance(value, list) or not all(isinstance(url, str) for url in value):
            raise serializers.ValidationError("Expected a list of URLs.")
        return value

    def validate(self, attrs):  # type: ignore
        rates = {
            name: attrs.get(name, getattr(self.instance, name, None))
            for name in ("nightly_rate", "weekly_rate", "monthly_rate")
        }
        try:
            Property(**rates).rate_schedule()
        except InvalidRateError as exc:
            raise serializers.ValidationError({"nightly_rate": [exc.message]}, code=exc.code)
        return attrs


class DayAvailabilitySerializer(serializers.Serializer):
    date = serializers.DateField()
    available = serializers.BooleanField()
