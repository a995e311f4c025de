"""Tests for segment fares"""
from decimal import Decimal

from django.test import TestCase

from ..services.fare_service import compute_fare
from ..services.exceptions import ValidationError
from ..utils.constants import SeatType
from .helpers import make_cooperative, make_route


class FareServiceTest(TestCase):
    def setUp(self):
        self.route = make_route(
            make_cooperative(), origin='A', destination='D', base_price='5.00',
            stops=[('B', '2.00'), ('C', '3.50')],
        )

    def test_vip_origin_to_intermediate(self):
        quote = compute_fare(self.route, 'A', 'C', SeatType.VIP)

        self.assertEqual(quote.base_price, Decimal('3.50'))
        self.assertEqual(quote.seat_premium, Decimal('1.05'))
        self.assertEqual(quote.total_price, Decimal('4.55'))

    def test_full_route_normal_is_base_price(self):
        quote = compute_fare(self.route, 'A', 'D')

        self.assertEqual(quote.base_price, Decimal('5.00'))
        self.assertEqual(quote.seat_premium, Decimal('0.00'))
        self.assertEqual(quote.total_price, Decimal('5.00'))

    def test_intermediate_to_destination(self):
        self.assertEqual(compute_fare(self.route, 'B', 'D').base_price, Decimal('3.00'))

    def test_between_intermediate_stops(self):
        self.assertEqual(compute_fare(self.route, 'B', 'C').base_price, Decimal('1.50'))

    def test_legs_add_up(self):
        for middle in ('B', 'C'):
            first = compute_fare(self.route, 'A', middle).base_price
            second = compute_fare(self.route, middle, 'D').base_price
            self.assertEqual(first + second, compute_fare(self.route, 'A', 'D').base_price)

    def test_premium_class(self):
        quote = compute_fare(self.route, 'A', 'D', SeatType.PREMIUM)

        self.assertEqual(quote.seat_premium, Decimal('2.50'))
        self.assertEqual(quote.total_price, Decimal('7.50'))

    def test_rounds_half_up(self):
        route = make_route(make_cooperative(), base_price='1.15')

        self.assertEqual(compute_fare(route, 'A', 'D', SeatType.VIP).seat_premium, Decimal('0.35'))

    def test_unknown_stop_rejected(self):
        with self.assertRaises(ValidationError):
            compute_fare(self.route, 'A', 'Z')

    def test_reversed_stops_rejected(self):
        with self.assertRaises(ValidationError):
            compute_fare(self.route, 'C', 'B')

    def test_same_stop_rejected(self):
        with self.assertRaises(ValidationError):
            compute_fare(self.route, 'B', 'B')

    def test_unknown_seat_type_rejected(self):
        with self.assertRaises(ValidationError):
            compute_fare(self.route, 'A', 'D', 'BUSINESS')

    def test_stop_priced_at_base_gives_no_fare_to_destination(self):
        route = make_route(make_cooperative(), base_price='5.00', stops=[('B', '5.00')])

        with self.assertRaises(ValidationError):
            compute_fare(route, 'B', 'D')

    def test_equally_priced_stops_rejected(self):
        route = make_route(make_cooperative(), base_price='5.00', stops=[('B', '2.00'), ('C', '2.00')])

        with self.assertRaises(ValidationError):
            compute_fare(route, 'B', 'C')
        self.assertEqual(compute_fare(route, 'A', 'C').base_price, Decimal('2.00'))
