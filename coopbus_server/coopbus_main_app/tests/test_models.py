"""Tests for model-level validation and helpers"""
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from ..models import RouteStop
from ..utils.constants import UserRole
from ..utils.tenant_utils import get_cooperative_for_user, is_super_admin
from .helpers import make_cooperative, make_user, make_route, make_bus


class RouteStopValidationTest(TestCase):
    def setUp(self):
        self.route = make_route(make_cooperative(), base_price='5.00', stops=[('B', '2.00'), ('C', '3.50')])

    def stop(self, order, price, name='X'):
        return RouteStop(route=self.route, name=name, order=order, price_from_origin=Decimal(price))

    def test_stop_between_neighbours_accepted(self):
        self.stop(3, '4.00').full_clean()

    def test_stop_priced_at_base_rejected(self):
        with self.assertRaises(ValidationError):
            self.stop(3, '5.00').full_clean()

    def test_stop_cheaper_than_earlier_stop_rejected(self):
        with self.assertRaises(ValidationError):
            self.stop(3, '3.00').full_clean()

    def test_stop_dearer_than_later_stop_rejected(self):
        stop = self.route.stops.get(name='B')
        stop.price_from_origin = Decimal('3.50')

        with self.assertRaises(ValidationError):
            stop.full_clean()

    def test_duplicate_order_rejected(self):
        with self.assertRaises(ValidationError):
            self.stop(2, '4.00').full_clean()

    def test_route_base_below_last_stop_rejected(self):
        self.route.base_price = Decimal('3.50')

        with self.assertRaises(ValidationError):
            self.route.full_clean()


class BusLayoutTest(TestCase):
    def test_drawn_layout(self):
        bus = make_bus(make_cooperative())

        self.assertEqual(bus.get_seat(3)['type'], 'VIP')
        self.assertIsNone(bus.get_seat(40))

    def test_undrawn_layout_falls_back_to_total_seats(self):
        bus = make_bus(make_cooperative())
        bus.seat_layout = {}
        bus.total_seats = 10

        self.assertEqual(len(bus.layout_seats()), 10)
        self.assertEqual(bus.get_seat(10)['type'], 'NORMAL')
        self.assertIsNone(bus.get_seat(11))


class CooperativeScopeTest(TestCase):
    def test_super_admin_profile_is_unscoped(self):
        admin = make_user(None, UserRole.SUPER_ADMIN)

        self.assertTrue(is_super_admin(admin))
        self.assertIsNone(get_cooperative_for_user(admin))

    def test_staff_scoped_to_own_cooperative(self):
        coop = make_cooperative()
        clerk = make_user(coop, UserRole.CLERK)

        self.assertFalse(is_super_admin(clerk))
        self.assertEqual(get_cooperative_for_user(clerk), coop)
