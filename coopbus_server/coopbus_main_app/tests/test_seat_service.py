"""Tests for seat inventory, payment and boarding"""
import uuid
from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone

from ..services.seat_service import SeatService
from ..services.seat_hold_service import SeatHoldService
from ..services.exceptions import (
    SeatUnavailableError, ValidationError, ResourceUnavailableError, UnauthorizedScopeError, NotFoundError,
)
from ..models import Trip, Ticket
from ..utils.constants import TicketStatus, TripStatus, PaymentMethod, PaymentStatus, SeatType
from .helpers import make_cooperative, make_route, make_group, make_bus, make_frequency, make_user


def make_trip(cooperative, route, bus, day, departure_time='08:00'):
    frequency = make_frequency(cooperative, route, bus.group, departure_time)
    return Trip.objects.create(frequency=frequency, bus=bus, date=day, departure_time=departure_time)


class SeatServiceTest(TestCase):
    def setUp(self):
        cache.clear()
        self.coop = make_cooperative()
        self.route = make_route(self.coop, base_price='5.00', stops=[('B', '2.00'), ('C', '3.50')])
        self.bus = make_bus(self.coop, make_group(self.coop))
        self.trip = make_trip(self.coop, self.route, self.bus, timezone.localdate() + timedelta(days=1))
        self.client_user = make_user(self.coop, 'client')
        self.service = SeatService()

    def test_reserve_prices_from_seat_type(self):
        ticket = self.service.reserve_seat(self.trip.id, 3, boarding_stop='A', dropoff_stop='C')

        self.assertEqual(ticket.status, TicketStatus.RESERVED)
        self.assertEqual(ticket.seat_type, SeatType.VIP)
        self.assertEqual(ticket.base_price, Decimal('3.50'))
        self.assertEqual(ticket.total_price, Decimal('4.55'))
        self.assertEqual(len(ticket.qr_code), 64)

    def test_defaults_to_full_route(self):
        ticket = self.service.reserve_seat(self.trip.id, 1)

        self.assertEqual(ticket.boarding_stop, 'A')
        self.assertEqual(ticket.dropoff_stop, 'D')
        self.assertEqual(ticket.total_price, Decimal('5.00'))

    def test_seat_cannot_be_sold_twice(self):
        self.service.reserve_seat(self.trip.id, 1)

        with self.assertRaises(SeatUnavailableError):
            self.service.sell_ticket(self.trip.id, 1)

        self.assertEqual(Ticket.objects.filter(trip=self.trip, seat_number=1).count(), 1)

    def test_seat_outside_layout_rejected(self):
        with self.assertRaises(ValidationError):
            self.service.reserve_seat(self.trip.id, 40)

    def test_layout_without_seats_uses_total_count(self):
        self.bus.seat_layout = {}
        self.bus.total_seats = 10
        self.bus.save()

        ticket = self.service.reserve_seat(self.trip.id, 10)

        self.assertEqual(ticket.seat_type, SeatType.NORMAL)

    def test_cancelled_trip_not_sellable(self):
        self.trip.status = TripStatus.CANCELLED
        self.trip.save()

        with self.assertRaises(ValidationError):
            self.service.reserve_seat(self.trip.id, 1)

    def test_cash_sale_is_paid(self):
        ticket = self.service.sell_ticket(self.trip.id, 2, payment_method=PaymentMethod.CASH)

        self.assertEqual(ticket.status, TicketStatus.PAID)
        self.assertEqual(ticket.payment_status, PaymentStatus.APPROVED)

    def test_online_sale_waits_for_payment(self):
        ticket = self.service.sell_ticket(self.trip.id, 2, payment_method=PaymentMethod.PAYPAL)

        self.assertEqual(ticket.status, TicketStatus.PENDING_PAYMENT)
        self.assertEqual(ticket.payment_status, PaymentStatus.PENDING)

        ticket = self.service.confirm_payment(ticket.id)

        self.assertEqual(ticket.status, TicketStatus.PAID)
        self.assertEqual(ticket.payment_status, PaymentStatus.APPROVED)

    def test_confirm_payment_rechecks_seat(self):
        pending = self.service.sell_ticket(self.trip.id, 2, payment_method=PaymentMethod.PAYPAL)
        self.service.sell_ticket(self.trip.id, 2, payment_method=PaymentMethod.CASH)

        with self.assertRaises(SeatUnavailableError):
            self.service.confirm_payment(pending.id)

        self.assertEqual(Ticket.objects.get(id=pending.id).status, TicketStatus.PENDING_PAYMENT)

    def test_invalid_payment_method(self):
        with self.assertRaises(ValidationError):
            self.service.sell_ticket(self.trip.id, 2, payment_method='BITCOIN')

    def test_cancel_frees_seat(self):
        ticket = self.service.reserve_seat(self.trip.id, 1)

        self.service.cancel_ticket(ticket.id)
        again = self.service.sell_ticket(self.trip.id, 1)

        self.assertEqual(again.status, TicketStatus.PAID)
        self.assertEqual(Ticket.objects.get(id=ticket.id).status, TicketStatus.CANCELLED)

    def test_client_cannot_cancel_foreign_ticket(self):
        ticket = self.service.reserve_seat(self.trip.id, 1, user=self.client_user)
        stranger = make_user(self.coop, 'client')

        with self.assertRaises(UnauthorizedScopeError):
            self.service.cancel_ticket(ticket.id, user=stranger)

    def test_cannot_cancel_used_ticket(self):
        ticket = self.service.sell_ticket(self.trip.id, 1)
        Ticket.objects.filter(id=ticket.id).update(status=TicketStatus.USED, is_used=True)

        with self.assertRaises(ValidationError):
            self.service.cancel_ticket(ticket.id)

    def test_cannot_cancel_past_trip(self):
        past = make_trip(self.coop, self.route, self.bus, timezone.localdate() - timedelta(days=1), '10:00')
        ticket = self.service.sell_ticket(past.id, 1)

        with self.assertRaises(ValidationError):
            self.service.cancel_ticket(ticket.id)

    def test_scope_enforced(self):
        other = make_cooperative('Other')

        with self.assertRaises(UnauthorizedScopeError):
            self.service.sell_ticket(self.trip.id, 1, cooperative=other)

    def test_validate_boarding(self):
        today = make_trip(self.coop, self.route, self.bus, timezone.localdate(), '06:00')
        ticket = self.service.sell_ticket(today.id, 1)

        boarded = self.service.validate_boarding(ticket.qr_code, trip_id=today.id)

        self.assertEqual(boarded.status, TicketStatus.USED)
        self.assertTrue(boarded.is_used)
        self.assertIsNotNone(boarded.used_at)

        with self.assertRaises(ValidationError):
            self.service.validate_boarding(ticket.qr_code)

    def test_boarding_requires_paid_ticket_for_today(self):
        reserved = self.service.reserve_seat(self.trip.id, 1)
        paid_tomorrow = self.service.sell_ticket(self.trip.id, 2)

        with self.assertRaises(ValidationError):
            self.service.validate_boarding(reserved.qr_code)
        with self.assertRaises(ValidationError):
            self.service.validate_boarding(paid_tomorrow.qr_code)
        with self.assertRaises(NotFoundError):
            self.service.validate_boarding('not-a-code')

    def test_boarding_on_wrong_trip(self):
        today = make_trip(self.coop, self.route, self.bus, timezone.localdate(), '06:00')
        ticket = self.service.sell_ticket(today.id, 1)

        with self.assertRaises(ValidationError):
            self.service.validate_boarding(ticket.qr_code, trip_id=self.trip.id)

    def test_seat_map(self):
        self.service.sell_ticket(self.trip.id, 1)
        cancelled = self.service.reserve_seat(self.trip.id, 2)
        self.service.cancel_ticket(cancelled.id)

        seat_map = self.service.get_seat_map(self.trip.id)

        statuses = {seat['number']: seat['status'] for seat in seat_map['seats']}
        self.assertEqual(statuses, {1: 'OCCUPIED', 2: 'AVAILABLE', 3: 'AVAILABLE', 4: 'AVAILABLE'})
        self.assertEqual(seat_map['occupied_seats'], [1])
        self.assertEqual(seat_map['rows'], 2)

    def test_seat_map_shows_holds(self):
        SeatHoldService().hold_seat(self.trip.id, 3, holder='someone')

        seat_map = self.service.get_seat_map(self.trip.id)

        held = {seat['number']: seat['held_until'] for seat in seat_map['seats']}
        self.assertIsNotNone(held[3])
        self.assertIsNone(held[4])

    def test_manifest(self):
        self.service.sell_ticket(
            self.trip.id, 1, boarding_stop='B', passenger={'passenger_name': 'Ana Vera'}
        )
        self.service.sell_ticket(self.trip.id, 2)
        self.service.reserve_seat(self.trip.id, 3)

        manifest = self.service.get_passenger_manifest(self.trip.id)

        self.assertEqual([p['seat_number'] for p in manifest['passengers']], [1, 2])
        self.assertEqual(manifest['passengers'][0]['name'], 'Ana Vera')
        self.assertEqual(manifest['summary'], {'total_tickets': 2, 'total_used': 0, 'total_pending': 2})

        from_b = self.service.get_passenger_manifest(self.trip.id, boarding_stop='B')
        self.assertEqual(len(from_b['passengers']), 1)

    def test_concurrent_sale_of_same_seat_rejected(self):
        self.service.sell_ticket(self.trip.id, 1)

        # The racing request read the seat as free before the first sale committed
        with mock.patch.object(SeatService, '_ensure_seat_free'):
            with self.assertRaises(SeatUnavailableError):
                self.service.reserve_seat(self.trip.id, 1)

        self.assertEqual(Ticket.objects.filter(trip=self.trip, seat_number=1).count(), 1)

    def test_concurrent_payment_for_taken_seat_rejected(self):
        pending = self.service.sell_ticket(self.trip.id, 2, payment_method=PaymentMethod.PAYPAL)
        self.service.sell_ticket(self.trip.id, 2)

        with mock.patch.object(SeatService, '_ensure_seat_free'):
            with self.assertRaises(SeatUnavailableError):
                self.service.confirm_payment(pending.id)

        self.assertEqual(Ticket.objects.get(id=pending.id).status, TicketStatus.PENDING_PAYMENT)
        self.assertEqual(
            Ticket.objects.filter(trip=self.trip, seat_number=2, status__in=TicketStatus.SEAT_HOLDING).count(), 1
        )

    def test_hold_seat(self):
        expires_at = self.service.hold_seat(self.trip.id, 3, holder='someone')

        self.assertEqual(self.service.holds.get_holds(self.trip.id)[3]['expires_at'], expires_at)

    def test_hold_outside_layout_rejected(self):
        with self.assertRaises(ValidationError):
            self.service.hold_seat(self.trip.id, 40, holder='someone')

        self.assertEqual(self.service.holds.get_holds(self.trip.id), {})

    def test_hold_on_sold_seat_rejected(self):
        self.service.sell_ticket(self.trip.id, 1)

        with self.assertRaises(SeatUnavailableError):
            self.service.hold_seat(self.trip.id, 1, holder='someone')

    def test_hold_on_unknown_trip(self):
        with self.assertRaises(NotFoundError):
            self.service.hold_seat(uuid.uuid4(), 1, holder='someone')


class SeatHoldServiceTest(TestCase):
    def setUp(self):
        cache.clear()
        self.service = SeatHoldService(hold_seconds=60)

    def test_hold_and_release(self):
        self.service.hold_seat('trip-1', 5, holder='alice')

        self.assertEqual(list(self.service.get_holds('trip-1')), [5])
        self.assertTrue(self.service.release_seat('trip-1', 5, holder='alice'))
        self.assertEqual(self.service.get_holds('trip-1'), {})

    def test_other_holder_blocked(self):
        self.service.hold_seat('trip-1', 5, holder='alice')

        with self.assertRaises(ResourceUnavailableError):
            self.service.hold_seat('trip-1', 5, holder='bob')
        self.assertFalse(self.service.release_seat('trip-1', 5, holder='bob'))

    def test_same_holder_extends(self):
        first = self.service.hold_seat('trip-1', 5, holder='alice')
        second = self.service.hold_seat('trip-1', 5, holder='alice')

        self.assertGreaterEqual(second, first)
