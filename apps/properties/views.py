"""Property API views: rate management plus quote and availability lookups."""

from __future__ import annotations

from django.db.models import ProtectedError  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings import services as booking_services
from apps.bookings.domain.exceptions import BookingDomainError
from apps.bookings.serializers import AvailabilityRangeSerializer, StaySerializer
from shared.infrastructure.api import domain_error_response

from .filters import PropertyFilterSet
from .models import Property
from .serializers import DayAvailabilitySerializer, PropertySerializer


class PropertyViewSet(viewsets.ModelViewSet):
    """Property CRUD including the rate schedule."""

    queryset = Property.objects.all()
    serializer_class = PropertySerializer
    permission_classes = [permissions.IsAuthenticatedOrReadOnly]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = PropertyFilterSet
    ordering_fields = ["name", "nightly_rate", "created_at"]

    def destroy(self, request, *args, **kwargs):  # type: ignore
        property_obj: Property = self.get_object()
        try:
            self.perform_destroy(property_obj)
        except ProtectedError:
            return Response(
                {
                    "detail": f"Property {property_obj.pk} has bookings and cannot be deleted.",
                    "code": "property_in_use",
                },
                status=status.HTTP_409_CONFLICT,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(
        detail=True,
        methods=["post"],
        permission_classes=[permissions.AllowAny],
    )
    def quote(self, request, pk=None):  # type: ignore
        """Decomposed, discounted price for ``{check_in, check_out}``."""
        property_obj: Property = self.get_object()
        serializer = StaySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            summary = booking_services.quote_for_property(property_obj, serializer.validated_data["stay"])
        except BookingDomainError as exc:
            return domain_error_response(exc)

        data = summary.as_dict()
        data["property_id"] = property_obj.pk
        data["nights"] = serializer.validated_data["stay"].nights
        return Response(data)

    @action(
        detail=True,
        methods=["post"],
        url_path="check-availability",
        permission_classes=[permissions.AllowAny],
    )
    def check_availability(self, request, pk=None):  # type: ignore
        property_obj: Property = self.get_object()
        serializer = StaySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        stay = serializer.validated_data["stay"]
        return Response({
            "property_id": property_obj.pk,
            "check_in": stay.check_in.isoformat(),
            "check_out": stay.check_out.isoformat(),
            "available": booking_services.check_availability(property_obj, stay),
        })

    @action(detail=True, methods=["get"])
    def availability(self, request, pk=None):  # type: ignore
        """One entry per day of ``[start, end]``; confirmed bookings make days unavailable."""
        property_obj: Property = self.get_object()
        serializer = AvailabilityRangeSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        try:
            days = booking_services.availability_calendar(
                property_obj,
                serializer.validated_data["start"],
                serializer.validated_data["end"],
            )
        except BookingDomainError as exc:
            return domain_error_response(exc)

        return Response({
            "property_id": property_obj.pk,
            "dates": DayAvailabilitySerializer(days, many=True).data,
        })
