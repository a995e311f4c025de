"""Tests for route sheets"""
from datetime import date

from django.test import TestCase

from ..services.route_sheet_service import RouteSheetService
from ..services.seat_service import SeatService
from ..services.exceptions import UnauthorizedScopeError, ValidationError
from ..models import Trip
from ..utils.constants import TripStatus
from .helpers import make_cooperative, make_route, make_group, make_bus, make_frequency, make_driver

DAY = date(2030, 1, 7)


class RouteSheetServiceTest(TestCase):
    def setUp(self):
        self.coop = make_cooperative()
        self.route = make_route(self.coop)
        self.group = make_group(self.coop)
        self.bus1 = make_bus(self.coop, self.group, internal_number=1)
        self.bus2 = make_bus(self.coop, self.group, internal_number=2)
        self.driver = make_driver(self.coop, 'Luis', 'Mora')
        self.service = RouteSheetService()

    def _trip(self, bus, day, departure_time, **kwargs):
        frequency = make_frequency(self.coop, self.route, self.group, departure_time)
        return Trip.objects.create(frequency=frequency, bus=bus, date=day, departure_time=departure_time, **kwargs)

    def test_groups_by_date_then_bus(self):
        self._trip(self.bus2, DAY, '06:00')
        self._trip(self.bus1, DAY, '09:00', driver=self.driver)
        self._trip(self.bus1, date(2030, 1, 8), '07:00')

        sheet = self.service.get_route_sheet(self.group.id, DAY, date(2030, 1, 8))

        self.assertEqual([entry['date'] for entry in sheet['dates']], ['2030-01-07', '2030-01-08'])
        first_day = sheet['dates'][0]['buses']
        self.assertEqual([entry['bus']['internal_number'] for entry in first_day], [1, 2])
        self.assertEqual(first_day[0]['trips'][0]['driver']['name'], 'Luis Mora')
        self.assertIsNone(first_day[1]['trips'][0]['driver'])

    def test_cancelled_trips_left_out(self):
        self._trip(self.bus1, DAY, '06:00', status=TripStatus.CANCELLED)

        sheet = self.service.get_route_sheet(self.group.id, DAY)

        self.assertEqual(sheet['dates'], [])

    def test_passenger_count_ignores_cancelled_tickets(self):
        trip = self._trip(self.bus1, DAY, '06:00')
        seats = SeatService()
        seats.sell_ticket(trip.id, 1)
        seats.reserve_seat(trip.id, 2)
        cancelled = seats.reserve_seat(trip.id, 3)
        seats.cancel_ticket(cancelled.id)

        sheet = self.service.get_route_sheet(self.group.id, DAY)

        self.assertEqual(sheet['dates'][0]['buses'][0]['trips'][0]['passengers_count'], 2)

    def test_other_cooperative_denied(self):
        with self.assertRaises(UnauthorizedScopeError):
            self.service.get_route_sheet(self.group.id, DAY, cooperative=make_cooperative('Other'))

    def test_inverted_range(self):
        with self.assertRaises(ValidationError):
            self.service.get_route_sheet(self.group.id, date(2030, 1, 8), DAY)
