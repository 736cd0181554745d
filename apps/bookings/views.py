"""API views for the booking domain."""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, serializers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.domain.exceptions import BookingDomainError
from apps.finances.serializers import PaymentSerializer
from apps.finances.services import payment_schedule_for
from apps.properties.models import Property
from shared.infrastructure.api import domain_error_response

from . import services
from .models import Booking
from .serializers import (
    BookingCreateSerializer,
    BookingMovementSerializer,
    BookingSerializer,
    CancelBookingSerializer,
    GuestLookupSerializer,
)


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Create, list and move bookings through their statuses.

    Bookings carry guest contact details, so every endpoint except the
    guest ``lookup`` requires an authenticated user and status changes
    are reserved for staff.
    """

    queryset = Booking.objects.select_related("property").prefetch_related("periods")
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ["property", "status"]
    ordering_fields = ["check_in", "created_at"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        return BookingSerializer

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            booking = services.create_booking(
                data["property"],
                data["stay"],
                guest_name=data["guest_name"],
                guest_email=data["guest_email"],
                guest_phone=data["guest_phone"],
                notes=data["notes"],
                as_of=timezone.localdate(),
            )
        except Property.DoesNotExist:
            raise serializers.ValidationError({"property": ["Property not found."]})
        except BookingDomainError as exc:
            return domain_error_response(exc)

        read_serializer = BookingSerializer(booking, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAdminUser])
    def confirm(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()
        try:
            booking = services.confirm_booking(booking.pk)
        except BookingDomainError as exc:
            return domain_error_response(exc)
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAdminUser])
    def cancel(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()
        serializer = CancelBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            booking = services.cancel_booking(booking.pk, serializer.validated_data["reason"])
        except BookingDomainError as exc:
            return domain_error_response(exc)
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    @action(detail=False, methods=["get"])
    def today(self, request):  # type: ignore
        """Arrivals and departures for ``?date=`` (defaults to the local date)."""
        day = timezone.localdate()
        raw = request.query_params.get("date")
        if raw:
            day = serializers.DateField().to_internal_value(raw)

        movements = services.movements_on(day)
        return Response({
            "date": day.isoformat(),
            "check_ins": BookingMovementSerializer(movements["check_ins"], many=True).data,
            "check_outs": BookingMovementSerializer(movements["check_outs"], many=True).data,
        })

    @action(detail=True, methods=["get"], url_path="payment-schedule")
    def payment_schedule(self, request, pk=None):  # type: ignore
        """Stored periods with paid flags and the next payable period."""
        booking: Booking = self.get_object()
        return Response(_schedule_payload(booking))

    @action(detail=False, methods=["get"], permission_classes=[permissions.AllowAny])
    def lookup(self, request):  # type: ignore
        """Guest self-service view for ``?ref=&email=``: booking, schedule and payments."""
        serializer = GuestLookupSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        booking = services.find_guest_booking(
            serializer.validated_data["ref"],
            serializer.validated_data["email"],
        )
        if booking is None:
            return Response({"detail": "Booking not found."}, status=status.HTTP_404_NOT_FOUND)

        data = BookingSerializer(booking, context=self.get_serializer_context()).data
        data["payment_schedule"] = _schedule_payload(booking)
        data["payments"] = PaymentSerializer(
            booking.payments.order_by("period_index", "created_at"),
            many=True,
            context=self.get_serializer_context(),
        ).data
        return Response(data)


def _schedule_payload(booking: Booking) -> dict:
    schedule = payment_schedule_for(booking)
    paid_count = schedule.paid_periods_count

    periods = []
    for period in schedule.periods:
        item = period.as_dict()
        item["paid"] = period.sequence_index in schedule.confirmed_indices
        item["has_prior_unpaid"] = period.sequence_index > paid_count
        item["label"] = period.label()
        periods.append(item)

    return {
        "booking_id": booking.pk,
        "booking_reference": booking.booking_reference,
        "currency": booking.currency,
        "periods": periods,
        "paid_periods_count": paid_count,
        "next_period_index": None if schedule.is_settled else paid_count,
        "remaining_balance": str(schedule.remaining_balance().amount),
    }
