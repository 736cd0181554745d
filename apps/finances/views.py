"""API views for payment processing.

Payments are registered against a booking's stored schedule and later
confirmed by staff once the money has arrived. Confirmation writes the
ledger entry in the same transaction.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, serializers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.domain.exceptions import BookingDomainError
from apps.bookings.models import Booking
from shared.infrastructure.api import domain_error_response

from . import services
from .filters import LedgerEntryFilterSet, PaymentFilterSet
from .models import LedgerEntry, Payment
from .serializers import LedgerEntrySerializer, PaymentCreateSerializer, PaymentSerializer


class PaymentViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Register, list and confirm payments."""

    queryset = Payment.objects.select_related("booking", "ledger_entry").all()
    serializer_class = PaymentSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = PaymentFilterSet

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return PaymentCreateSerializer
        return PaymentSerializer

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            payment = services.register_payment(
                data["booking"],
                data["period_index"],
                full_balance=data["full_balance"],
                method=data["method"],
                notes=data["notes"],
            )
        except Booking.DoesNotExist:
            raise serializers.ValidationError({"booking": ["Booking not found."]})
        except BookingDomainError as exc:
            return domain_error_response(exc)

        read_serializer = PaymentSerializer(payment, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAdminUser])
    def confirm(self, request, pk=None):  # type: ignore
        """Mark the payment confirmed and book it into the ledger."""
        payment: Payment = self.get_object()
        try:
            payment = services.confirm_payment(payment.pk, confirmed_by=request.user.get_username())
        except BookingDomainError as exc:
            return domain_error_response(exc)
        return Response(PaymentSerializer(payment, context=self.get_serializer_context()).data)


class LedgerEntryViewSet(viewsets.ReadOnlyModelViewSet):
    """Cash and bank asset entries created by payment confirmations."""

    queryset = LedgerEntry.objects.select_related("payment").all()
    serializer_class = LedgerEntrySerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = LedgerEntryFilterSet
