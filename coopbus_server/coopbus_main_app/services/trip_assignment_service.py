"""Trip assignment service - manual trip creation, personnel and status changes"""
import logging

from django.contrib.auth.models import User
from django.db import IntegrityError, transaction

from ..models import Frequency, Trip, Bus
from ..utils.constants import TripStatus, BusStatus, UserRole, AccountStatus
from ..utils.schedule_utils import is_valid_departure_time, occupied_window
from . import availability
from .exceptions import ValidationError, ConflictError, NotFoundError, UnauthorizedScopeError

logger = logging.getLogger(__name__)


class TripAssignmentService:
    """Applies the generator's bus and driver rules to one caller-chosen trip"""

    def __init__(self, turnaround_minutes=None):
        if turnaround_minutes is None:
            turnaround_minutes = availability.default_turnaround_minutes()
        self.turnaround_minutes = turnaround_minutes

    @transaction.atomic
    def create_trip(self, frequency_id, bus_id, date, departure_time=None,
                    driver_id=None, assistant_id=None, cooperative=None):
        """
        Create a single SCHEDULED trip

        Raises:
            NotFoundError: unknown frequency, bus or person
            UnauthorizedScopeError: frequency outside the caller's cooperative
            ValidationError: inactive bus, wrong tenant or role
            ConflictError: duplicate slot, or driver busy or tied to another bus
        """
        frequency = self._get_frequency(frequency_id, cooperative)
        departure_time = departure_time or frequency.departure_time
        if not is_valid_departure_time(departure_time):
            raise ValidationError('Invalid time format (HH:MM)')

        bus = self._get_bus(bus_id, frequency)
        self._check_duplicate(frequency, date, bus)
        self._warn_on_turnaround(bus, frequency.route, date, departure_time)

        driver = None
        if driver_id:
            driver = self._validate_driver(driver_id, frequency, bus, date, departure_time)
        assistant = self._validate_assistant(assistant_id, frequency) if assistant_id else None

        try:
            with transaction.atomic():
                trip = Trip.objects.create(
                    frequency=frequency,
                    bus=bus,
                    date=date,
                    departure_time=departure_time,
                    driver=driver,
                    assistant=assistant,
                    status=TripStatus.SCHEDULED,
                )
        except IntegrityError:
            raise ConflictError('A trip already exists for this frequency, date and bus')

        logger.info(f'[ASSIGNER] Created trip {trip.id} on bus #{bus.internal_number} for {date} {departure_time}')
        return trip

    @transaction.atomic
    def update_trip(self, trip_id, cooperative=None, bus_id=None, date=None, departure_time=None,
                    driver_id=None, assistant_id=None, status=None):
        """Change bus, schedule or personnel of an existing trip, revalidating the result"""
        trip = self._get_trip(trip_id, cooperative)
        if trip.status in (TripStatus.COMPLETED, TripStatus.CANCELLED):
            raise ValidationError(f'Cannot edit a {trip.status.lower()} trip')

        frequency = trip.frequency
        bus = self._get_bus(bus_id, frequency) if bus_id else trip.bus
        date = date or trip.date
        departure_time = departure_time or trip.departure_time
        if not is_valid_departure_time(departure_time):
            raise ValidationError('Invalid time format (HH:MM)')

        if bus.id != trip.bus_id or date != trip.date:
            self._check_duplicate(frequency, date, bus, exclude_trip_id=trip.id)
            self._warn_on_turnaround(bus, frequency.route, date, departure_time, exclude_trip_id=trip.id)

        # Keep the current driver only if they still fit the changed slot
        driver_id = driver_id or trip.driver_id
        if driver_id:
            trip.driver = self._validate_driver(
                driver_id, frequency, bus, date, departure_time, exclude_trip_id=trip.id
            )
        if assistant_id:
            trip.assistant = self._validate_assistant(assistant_id, frequency)
        if trip.status == TripStatus.IN_PROGRESS and trip.driver_id:
            self._ensure_no_active_trip(trip.driver_id, trip)

        trip.bus = bus
        trip.date = date
        trip.departure_time = departure_time
        try:
            with transaction.atomic():
                trip.save()
        except IntegrityError:
            raise ConflictError('A trip already exists for this frequency, date and bus')

        if status and status != trip.status:
            trip = self._apply_status(trip, status)

        logger.info(f'[ASSIGNER] Updated trip {trip.id}')
        return trip

    @transaction.atomic
    def assign_personnel(self, trip_id, driver_id=None, assistant_id=None, cooperative=None):
        if not driver_id and not assistant_id:
            raise ValidationError('driver_id or assistant_id is required')

        trip = self._get_trip(trip_id, cooperative)
        if trip.status in (TripStatus.COMPLETED, TripStatus.CANCELLED):
            raise ValidationError(f'Cannot assign personnel to a {trip.status.lower()} trip')

        if driver_id:
            driver = self._validate_driver(
                driver_id, trip.frequency, trip.bus, trip.date, trip.departure_time, exclude_trip_id=trip.id
            )
            if trip.status == TripStatus.IN_PROGRESS:
                self._ensure_no_active_trip(driver.id, trip)
            trip.driver = driver
        if assistant_id:
            trip.assistant = self._validate_assistant(assistant_id, trip.frequency)

        trip.save(update_fields=['driver', 'assistant', 'updated_at'])
        logger.info(f'[ASSIGNER] Personnel for trip {trip.id}: driver={trip.driver_id} assistant={trip.assistant_id}')
        return trip

    @transaction.atomic
    def update_status(self, trip_id, status, cooperative=None):
        """
        Move a trip along SCHEDULED -> IN_PROGRESS -> COMPLETED, or cancel it

        A driver may have only one IN_PROGRESS trip. The driver row is locked
        so two concurrent starts for the same driver serialize.
        """
        trip = self._get_trip(trip_id, cooperative)
        return self._apply_status(trip, status)

    def _apply_status(self, trip, status):
        if status not in TripStatus.TRANSITIONS:
            raise ValidationError(f'Invalid trip status "{status}"')
        if status not in TripStatus.TRANSITIONS[trip.status]:
            raise ValidationError(f'Cannot change trip status from {trip.status} to {status}')

        if status == TripStatus.IN_PROGRESS and trip.driver_id:
            self._ensure_no_active_trip(trip.driver_id, trip)

        previous = trip.status
        trip.status = status
        trip.save(update_fields=['status', 'updated_at'])
        logger.info(f'[ASSIGNER] Trip {trip.id} {previous} -> {status}')
        return trip

    def _ensure_no_active_trip(self, driver_id, trip):
        """Lock the driver row so concurrent starts and reassignments serialize, then check"""
        User.objects.select_for_update().get(id=driver_id)
        active = Trip.objects.filter(
            driver_id=driver_id, status=TripStatus.IN_PROGRESS
        ).exclude(id=trip.id).first()
        if active:
            logger.warning(f'[ASSIGNER] Driver {driver_id} already running trip {active.id}, rejecting {trip.id}')
            raise ConflictError('Driver already has a trip in progress; complete or cancel it first')

    def _check_duplicate(self, frequency, date, bus, exclude_trip_id=None):
        duplicates = Trip.objects.filter(frequency=frequency, date=date, bus=bus).exclude(status=TripStatus.CANCELLED)
        if exclude_trip_id:
            duplicates = duplicates.exclude(id=exclude_trip_id)
        if duplicates.exists():
            logger.warning(f'[ASSIGNER] Duplicate slot {frequency.id}/{date}/bus #{bus.internal_number}')
            raise ConflictError('A trip already exists for this frequency, date and bus')

    def _warn_on_turnaround(self, bus, route, date, departure_time, exclude_trip_id=None):
        departure_at, free_at = occupied_window(date, departure_time, route.estimated_duration, self.turnaround_minutes)
        recent = availability.recent_bus_trips(bus, date, departure_time, exclude_trip_id=exclude_trip_id)
        later = availability.later_bus_trips(bus, date, departure_time, exclude_trip_id=exclude_trip_id)
        if availability.bus_conflicts(recent, departure_at, self.turnaround_minutes) or \
                availability.blocks_later_trip(later, free_at):
            logger.warning(
                f'[ASSIGNER] Bus #{bus.internal_number} has not completed turnaround before {date} {departure_time}'
            )

    def _validate_driver(self, driver_id, frequency, bus, date, departure_time, exclude_trip_id=None):
        driver = self._get_member(driver_id, frequency, UserRole.DRIVER)

        day_trips = availability.driver_day_trips(driver, date, exclude_trip_id=exclude_trip_id)
        if availability.other_bus_ids(day_trips, bus):
            logger.warning(f'[ASSIGNER] Driver {driver.id} already drives another bus on {date}')
            raise ConflictError('Driver is already assigned to another bus that day')

        window = occupied_window(date, departure_time, frequency.route.estimated_duration, self.turnaround_minutes)
        clash = availability.overlapping_trip(day_trips, window, self.turnaround_minutes)
        if clash:
            logger.warning(f'[ASSIGNER] Driver {driver.id} overlaps trip {clash.id} on {date}')
            raise ConflictError(f'Driver has an overlapping trip at {clash.departure_time}')
        return driver

    def _validate_assistant(self, assistant_id, frequency):
        return self._get_member(assistant_id, frequency, UserRole.ASSISTANT)

    def _get_member(self, user_id, frequency, role):
        try:
            user = User.objects.select_related('profile').get(id=user_id)
        except User.DoesNotExist:
            raise NotFoundError(f'{role.capitalize()} not found')

        profile = getattr(user, 'profile', None)
        if profile is None or profile.role != role:
            raise ValidationError(f'User must have the {role} role')
        if profile.cooperative_id != frequency.cooperative_id:
            raise ValidationError(f'{role.capitalize()} does not belong to the same cooperative')
        if profile.status != AccountStatus.ACTIVE:
            raise ValidationError(f'{role.capitalize()} is not active')
        return user

    def _get_bus(self, bus_id, frequency):
        try:
            bus = Bus.objects.get(id=bus_id)
        except Bus.DoesNotExist:
            raise NotFoundError('Bus not found')
        if bus.status != BusStatus.ACTIVE:
            raise ValidationError('Bus is not active')
        if bus.cooperative_id != frequency.cooperative_id:
            raise ValidationError('Bus does not belong to the same cooperative')
        return bus

    def _get_frequency(self, frequency_id, cooperative):
        try:
            frequency = Frequency.objects.select_related('route').get(id=frequency_id)
        except Frequency.DoesNotExist:
            raise NotFoundError('Frequency not found')
        if cooperative is not None and frequency.cooperative_id != cooperative.id:
            raise UnauthorizedScopeError('No permission to create trips for this frequency')
        return frequency

    def _get_trip(self, trip_id, cooperative):
        try:
            trip = Trip.objects.select_for_update().select_related('frequency__route', 'bus').get(id=trip_id)
        except Trip.DoesNotExist:
            raise NotFoundError('Trip not found')
        if cooperative is not None and trip.frequency.cooperative_id != cooperative.id:
            raise UnauthorizedScopeError('No access to this trip')
        return trip
