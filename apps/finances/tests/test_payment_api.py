"""Integration tests for payment registration, confirmation and the ledger."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings import services as booking_services
from apps.bookings.domain.exceptions import BookingStateError
from apps.bookings.domain.pricing import Stay
from apps.finances import services
from apps.finances.domain.events import PaymentConfirmed
from apps.finances.models import LedgerEntry, Payment
from apps.properties.models import Property
from shared.application.message_bus import message_bus


class PaymentAPITests(APITestCase):
    def setUp(self) -> None:
        user_model = get_user_model()
        self.clerk = user_model.objects.create_user(username="clerk", password="ClerkPass123")
        self.manager = user_model.objects.create_user(
            username="manager",
            password="ManagerPass123",
            is_staff=True,
        )
        self.property = Property.objects.create(
            name="Garden studio",
            address="3 Elm Row",
            nightly_rate=Decimal("100.00"),
            weekly_rate=Decimal("600.00"),
            monthly_rate=Decimal("2000.00"),
        )
        # Periods: 2000.00 (month), 540.00 (week), 160.00 (2 nights)
        self.booking = booking_services.create_booking(
            self.property.id,
            Stay(date(2099, 1, 1), date(2099, 2, 10)),
            guest_name="Grace Guest",
            guest_email="grace@example.com",
            as_of=timezone.localdate(),
        )
        self.list_url = reverse("payment-list")
        self.client.force_authenticate(self.clerk)

    def _register(self, **payload):
        payload.setdefault("booking", self.booking.pk)
        return self.client.post(self.list_url, payload, format="json")

    def _confirm(self, payment_id: int):
        self.client.force_authenticate(self.manager)
        try:
            return self.client.post(reverse("payment-confirm", args=[payment_id]))
        finally:
            self.client.force_authenticate(self.clerk)

    def test_first_payment_must_be_period_zero(self) -> None:
        response = self._register(period_index=1)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "sequential_payment_violation")
        self.assertEqual(response.data["first_unpaid_index"], 0)
        self.assertIn("Period 1", response.data["detail"])
        self.assertEqual(Payment.objects.count(), 0)

    def test_register_takes_amount_from_schedule(self) -> None:
        response = self._register(period_index=0, method="bank_transfer", amount="1.00")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["amount"], "2000.00")
        self.assertEqual(response.data["status"], Payment.Status.PENDING)
        self.assertEqual(response.data["period_count"], 1)
        self.assertIsNone(response.data["ledger_entry"])

    def test_period_index_or_full_balance_is_required(self) -> None:
        response = self._register()

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("period_index", response.data)

    def test_unknown_booking_is_rejected(self) -> None:
        response = self._register(booking=self.booking.pk + 100, period_index=0)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("booking", response.data)

    def test_confirm_writes_ledger_entry(self) -> None:
        payment_id = self._register(period_index=0).data["id"]

        response = self._confirm(payment_id)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["status"], Payment.Status.CONFIRMED)
        self.assertEqual(response.data["confirmed_by"], "manager")
        entry = LedgerEntry.objects.get()
        self.assertEqual(entry.payment_id, payment_id)
        self.assertEqual(entry.entry_type, LedgerEntry.EntryType.CASH)
        self.assertEqual(entry.amount, Decimal("2000.00"))
        self.assertIn(self.booking.booking_reference, entry.description)

    def test_bank_transfer_is_booked_as_bank_asset(self) -> None:
        payment_id = self._register(period_index=0, method="bank_transfer").data["id"]

        self._confirm(payment_id)

        self.assertEqual(LedgerEntry.objects.get().entry_type, LedgerEntry.EntryType.BANK)

    def test_only_staff_can_confirm(self) -> None:
        payment_id = self._register(period_index=0).data["id"]

        response = self.client.post(reverse("payment-confirm", args=[payment_id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(LedgerEntry.objects.exists())

    def test_periods_are_paid_in_order(self) -> None:
        self._confirm(self._register(period_index=0).data["id"])

        skipped = self._register(period_index=2)
        next_period = self._register(period_index=1)

        self.assertEqual(skipped.status_code, status.HTTP_400_BAD_REQUEST, skipped.data)
        self.assertEqual(skipped.data["first_unpaid_index"], 1)
        self.assertIn("Period 2", skipped.data["detail"])
        self.assertEqual(next_period.status_code, status.HTTP_201_CREATED, next_period.data)
        self.assertEqual(next_period.data["amount"], "540.00")

    def test_full_balance_pays_the_rest(self) -> None:
        self._confirm(self._register(period_index=0).data["id"])

        response = self._register(period_index=2, full_balance=True)
        confirm = self._confirm(response.data["id"])

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["period_index"], 1)
        self.assertEqual(response.data["period_count"], 2)
        self.assertEqual(response.data["amount"], "700.00")
        self.assertEqual(confirm.status_code, status.HTTP_200_OK, confirm.data)

        schedule = self.client.get(reverse("booking-payment-schedule", args=[self.booking.pk])).data
        self.assertEqual(schedule["paid_periods_count"], 3)
        self.assertIsNone(schedule["next_period_index"])
        self.assertEqual(schedule["remaining_balance"], "0.00")

    def test_confirming_twice_is_rejected(self) -> None:
        payment_id = self._register(period_index=0).data["id"]
        self._confirm(payment_id)

        response = self._confirm(payment_id)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "invalid_booking_state")
        self.assertEqual(LedgerEntry.objects.count(), 1)

    def test_stale_duplicate_payment_cannot_be_confirmed(self) -> None:
        first = self._register(period_index=0).data["id"]
        duplicate = self._register(period_index=0).data["id"]
        self._confirm(first)

        response = self._confirm(duplicate)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "sequential_payment_violation")
        self.assertEqual(Payment.objects.get(pk=duplicate).status, Payment.Status.PENDING)

    def test_ledger_failure_rolls_back_confirmation(self) -> None:
        payment = services.register_payment(self.booking.pk, 0)

        with mock.patch.object(LedgerEntry.objects, "create", side_effect=DatabaseError("disk full")):
            with self.assertRaises(DatabaseError):
                services.confirm_payment(payment.pk, confirmed_by="manager")

        payment.refresh_from_db()
        self.assertEqual(payment.status, Payment.Status.PENDING)
        self.assertIsNone(payment.confirmed_at)
        self.assertFalse(LedgerEntry.objects.exists())

    def test_confirmation_event_is_published_after_commit(self) -> None:
        payment = services.register_payment(self.booking.pk, 0)

        with mock.patch.object(message_bus, "publish_events") as publish:
            with self.captureOnCommitCallbacks(execute=True):
                services.confirm_payment(payment.pk, confirmed_by="manager")

        (events,) = publish.call_args.args
        self.assertEqual(len(events), 1)
        self.assertIsInstance(events[0], PaymentConfirmed)
        self.assertEqual(events[0].payment_id, payment.pk)
        self.assertEqual(events[0].ledger_entry_id, LedgerEntry.objects.get().pk)

    def test_cancelled_booking_accepts_no_payments(self) -> None:
        booking_services.cancel_booking(self.booking.pk)

        with self.assertRaises(BookingStateError):
            services.register_payment(self.booking.pk, 0)

    def test_pending_payment_of_cancelled_booking_cannot_be_confirmed(self) -> None:
        payment_id = self._register(period_index=0).data["id"]
        booking_services.cancel_booking(self.booking.pk)

        response = self._confirm(payment_id)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["code"], "invalid_booking_state")
        self.assertEqual(Payment.objects.get(pk=payment_id).status, Payment.Status.PENDING)
        self.assertFalse(LedgerEntry.objects.exists())

    def test_anonymous_users_cannot_list_payments(self) -> None:
        self._register(period_index=0)
        self.client.force_authenticate(None)

        response = self.client.get(self.list_url)

        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_payment_list_filters(self) -> None:
        confirmed_id = self._register(period_index=0).data["id"]
        self._confirm(confirmed_id)
        pending_id = self._register(period_index=1).data["id"]

        by_status = self.client.get(self.list_url, {"status": "pending"})
        by_booking = self.client.get(self.list_url, {"booking": self.booking.pk})
        by_date = self.client.get(self.list_url, {"date_from": "2000-01-01", "date_to": "2000-12-31"})

        self.assertEqual([item["id"] for item in by_status.data], [pending_id])
        self.assertEqual({item["id"] for item in by_booking.data}, {confirmed_id, pending_id})
        self.assertEqual(by_date.data, [])

    def test_ledger_lists_entries_by_type(self) -> None:
        self._confirm(self._register(period_index=0, method="cash").data["id"])
        self._confirm(self._register(period_index=1, method="card").data["id"])

        cash = self.client.get(reverse("ledger-entry-list"), {"entry_type": "cash"})
        bank = self.client.get(reverse("ledger-entry-list"), {"entry_type": "bank"})

        self.assertEqual(cash.status_code, status.HTTP_200_OK)
        self.assertEqual([item["amount"] for item in cash.data], ["2000.00"])
        self.assertEqual([item["amount"] for item in bank.data], ["540.00"])
