"""Tests for manual trip assignment"""
from datetime import date
from unittest import mock

from django.test import TestCase

from ..services.trip_assignment_service import TripAssignmentService
from ..services.exceptions import ConflictError, ValidationError, UnauthorizedScopeError, NotFoundError
from ..models import Trip
from ..utils.constants import TripStatus, UserRole, AccountStatus
from .helpers import (
    make_cooperative, make_user, make_route, make_group, make_bus, make_frequency, make_driver,
)

DAY = date(2030, 1, 7)


class TripAssignmentServiceTest(TestCase):
    def setUp(self):
        self.coop = make_cooperative()
        self.route = make_route(self.coop, duration=180)
        self.group = make_group(self.coop)
        self.bus1 = make_bus(self.coop, self.group)
        self.bus2 = make_bus(self.coop, self.group)
        self.morning = make_frequency(self.coop, self.route, self.group, '08:00')
        self.late = make_frequency(self.coop, self.route, self.group, '09:00')
        self.driver = make_driver(self.coop)
        self.service = TripAssignmentService(turnaround_minutes=30)

    def test_create_trip_with_driver(self):
        trip = self.service.create_trip(self.morning.id, self.bus1.id, DAY, driver_id=self.driver.id)

        self.assertEqual(trip.status, TripStatus.SCHEDULED)
        self.assertEqual(trip.departure_time, '08:00')
        self.assertEqual(trip.driver, self.driver)

    def test_duplicate_slot_rejected(self):
        self.service.create_trip(self.morning.id, self.bus1.id, DAY)

        with self.assertRaises(ConflictError):
            self.service.create_trip(self.morning.id, self.bus1.id, DAY)

    def test_cancelled_trip_frees_slot(self):
        trip = self.service.create_trip(self.morning.id, self.bus1.id, DAY)
        self.service.update_status(trip.id, TripStatus.CANCELLED)

        again = self.service.create_trip(self.morning.id, self.bus1.id, DAY)

        self.assertNotEqual(again.id, trip.id)

    def test_inactive_bus_rejected(self):
        self.bus1.status = 'MAINTENANCE'
        self.bus1.save()

        with self.assertRaises(ValidationError):
            self.service.create_trip(self.morning.id, self.bus1.id, DAY)

    def test_foreign_bus_rejected(self):
        other = make_cooperative('Other')
        foreign_bus = make_bus(other)

        with self.assertRaises(ValidationError):
            self.service.create_trip(self.morning.id, foreign_bus.id, DAY)

    def test_frequency_outside_scope_rejected(self):
        other = make_cooperative('Other')

        with self.assertRaises(UnauthorizedScopeError):
            self.service.create_trip(self.morning.id, self.bus1.id, DAY, cooperative=other)

    def test_unknown_bus(self):
        with self.assertRaises(NotFoundError):
            self.service.create_trip(self.morning.id, self.late.id, DAY)

    def test_turnaround_conflict_still_creates_trip(self):
        self.service.create_trip(self.morning.id, self.bus1.id, DAY)

        with self.assertLogs('coopbus_main_app.services.trip_assignment_service', level='WARNING'):
            trip = self.service.create_trip(self.late.id, self.bus1.id, DAY)

        self.assertEqual(trip.bus, self.bus1)

    def test_driver_on_another_bus_rejected(self):
        self.service.create_trip(self.morning.id, self.bus1.id, DAY, driver_id=self.driver.id)
        evening = make_frequency(self.coop, self.route, self.group, '18:00')

        with self.assertRaises(ConflictError):
            self.service.create_trip(evening.id, self.bus2.id, DAY, driver_id=self.driver.id)

    def test_driver_overlap_rejected(self):
        self.service.create_trip(self.morning.id, self.bus1.id, DAY, driver_id=self.driver.id)

        with self.assertRaises(ConflictError):
            self.service.create_trip(self.late.id, self.bus1.id, DAY, driver_id=self.driver.id)

    def test_wrong_role_rejected(self):
        clerk = make_user(self.coop, UserRole.CLERK)

        with self.assertRaises(ValidationError):
            self.service.create_trip(self.morning.id, self.bus1.id, DAY, driver_id=clerk.id)

    def test_inactive_driver_rejected(self):
        self.driver.profile.status = AccountStatus.INACTIVE
        self.driver.profile.save()

        with self.assertRaises(ValidationError):
            self.service.create_trip(self.morning.id, self.bus1.id, DAY, driver_id=self.driver.id)

    def test_assign_assistant(self):
        trip = self.service.create_trip(self.morning.id, self.bus1.id, DAY)
        assistant = make_user(self.coop, UserRole.ASSISTANT)

        trip = self.service.assign_personnel(trip.id, assistant_id=assistant.id)

        self.assertEqual(trip.assistant, assistant)

    def test_assign_personnel_requires_someone(self):
        trip = self.service.create_trip(self.morning.id, self.bus1.id, DAY)

        with self.assertRaises(ValidationError):
            self.service.assign_personnel(trip.id)

    def test_one_trip_in_progress_per_driver(self):
        first = self.service.create_trip(self.morning.id, self.bus1.id, DAY, driver_id=self.driver.id)
        second = self.service.create_trip(
            self.late.id, self.bus1.id, date(2030, 1, 8), driver_id=self.driver.id
        )
        self.service.update_status(first.id, TripStatus.IN_PROGRESS)

        with self.assertRaises(ConflictError):
            self.service.update_status(second.id, TripStatus.IN_PROGRESS)

        self.assertEqual(Trip.objects.get(id=second.id).status, TripStatus.SCHEDULED)

    def test_driver_free_again_after_completion(self):
        first = self.service.create_trip(self.morning.id, self.bus1.id, DAY, driver_id=self.driver.id)
        second = self.service.create_trip(
            self.late.id, self.bus1.id, date(2030, 1, 8), driver_id=self.driver.id
        )
        self.service.update_status(first.id, TripStatus.IN_PROGRESS)
        self.service.update_status(first.id, TripStatus.COMPLETED)

        trip = self.service.update_status(second.id, TripStatus.IN_PROGRESS)

        self.assertEqual(trip.status, TripStatus.IN_PROGRESS)

    def test_invalid_transition_rejected(self):
        trip = self.service.create_trip(self.morning.id, self.bus1.id, DAY)

        with self.assertRaises(ValidationError):
            self.service.update_status(trip.id, TripStatus.COMPLETED)

    def test_update_moves_trip_to_other_bus(self):
        trip = self.service.create_trip(self.morning.id, self.bus1.id, DAY)

        trip = self.service.update_trip(trip.id, bus_id=self.bus2.id)

        self.assertEqual(Trip.objects.get(id=trip.id).bus, self.bus2)

    def test_cancelled_trip_not_editable(self):
        trip = self.service.create_trip(self.morning.id, self.bus1.id, DAY)
        self.service.update_status(trip.id, TripStatus.CANCELLED)

        with self.assertRaises(ValidationError):
            self.service.update_trip(trip.id, bus_id=self.bus2.id)

    def test_update_trip_cannot_hand_running_trip_to_busy_driver(self):
        first = self.service.create_trip(self.morning.id, self.bus1.id, DAY, driver_id=self.driver.id)
        second = self.service.create_trip(self.late.id, self.bus1.id, date(2030, 1, 8))
        self.service.update_status(first.id, TripStatus.IN_PROGRESS)
        self.service.update_status(second.id, TripStatus.IN_PROGRESS)

        with self.assertRaises(ConflictError):
            self.service.update_trip(second.id, driver_id=self.driver.id)

        self.assertIsNone(Trip.objects.get(id=second.id).driver)

    def test_assign_personnel_cannot_hand_running_trip_to_busy_driver(self):
        first = self.service.create_trip(self.morning.id, self.bus1.id, DAY, driver_id=self.driver.id)
        second = self.service.create_trip(self.late.id, self.bus1.id, date(2030, 1, 8))
        self.service.update_status(first.id, TripStatus.IN_PROGRESS)
        self.service.update_status(second.id, TripStatus.IN_PROGRESS)

        with self.assertRaises(ConflictError):
            self.service.assign_personnel(second.id, driver_id=self.driver.id)

        self.assertIsNone(Trip.objects.get(id=second.id).driver)

    def test_assign_personnel_to_running_trip_when_driver_idle(self):
        trip = self.service.create_trip(self.morning.id, self.bus1.id, DAY)
        self.service.update_status(trip.id, TripStatus.IN_PROGRESS)

        trip = self.service.assign_personnel(trip.id, driver_id=self.driver.id)

        self.assertEqual(Trip.objects.get(id=trip.id).driver, self.driver)

    def test_concurrent_duplicate_insert_becomes_conflict(self):
        self.service.create_trip(self.morning.id, self.bus1.id, DAY)

        # Simulate a racing request that passed the duplicate check first
        with mock.patch.object(TripAssignmentService, '_check_duplicate'):
            with self.assertRaises(ConflictError):
                self.service.create_trip(self.morning.id, self.bus1.id, DAY)

        self.assertEqual(Trip.objects.filter(frequency=self.morning, date=DAY, bus=self.bus1).count(), 1)

    def test_turnaround_warning_for_later_trip_on_same_bus(self):
        self.service.create_trip(self.late.id, self.bus1.id, DAY)

        with self.assertLogs('coopbus_main_app.services.trip_assignment_service', level='WARNING'):
            trip = self.service.create_trip(self.morning.id, self.bus1.id, DAY)

        self.assertEqual(trip.bus, self.bus1)
