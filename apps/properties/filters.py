"""FilterSet definitions for property listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Property


class PropertyFilterSet(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    property_type = django_filters.ChoiceFilter(choices=Property.PropertyType.choices)
    capacity_min = django_filters.NumberFilter(field_name="capacity", lookup_expr="gte")
    price_min = django_filters.NumberFilter(field_name="nightly_rate", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="nightly_rate", lookup_expr="lte")

    class Meta:
        model = Property
        fields = ["name", "property_type"]
