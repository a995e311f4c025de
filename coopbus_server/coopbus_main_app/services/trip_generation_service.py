"""Trip generation service - expands active frequencies into dated trips"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from django.db import IntegrityError, transaction

from ..models import Frequency, Trip, Bus
from ..utils.constants import TripStatus, SkipReason
from ..utils.schedule_utils import daterange, occupied_window, weekday_name
from . import availability
from .exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class BusAssignment:
    """How a bus was picked for a slot"""
    bus: Bus
    continuity: bool = False
    via_fallback: bool = False
    turnaround_violated: bool = False


@dataclass
class GeneratedTrip:
    trip: Trip
    assignment: BusAssignment


@dataclass
class SkippedSlot:
    frequency_id: str
    date: Optional[date]
    reason: str


@dataclass
class GenerationReport:
    created: List[GeneratedTrip] = field(default_factory=list)
    skipped: List[SkippedSlot] = field(default_factory=list)

    def to_dict(self):
        return {
            'created': [
                {
                    'id': str(item.trip.id),
                    'frequency_id': str(item.trip.frequency_id),
                    'date': item.trip.date.isoformat(),
                    'departure_time': item.trip.departure_time,
                    'bus_id': str(item.assignment.bus.id),
                    'driver_id': item.trip.driver_id,
                    'continuity': item.assignment.continuity,
                    'via_fallback': item.assignment.via_fallback,
                    'turnaround_violated': item.assignment.turnaround_violated,
                }
                for item in self.created
            ],
            'skipped': [
                {
                    'frequency_id': str(item.frequency_id),
                    'date': item.date.isoformat() if item.date else None,
                    'reason': item.reason,
                }
                for item in self.skipped
            ],
        }


class TripGenerationService:
    """
    Greedy scheduler turning recurring frequencies into Trip rows

    Frequencies are processed by departure time, dates ascending. Each
    created trip is committed on its own so one bad slot never rolls back
    the rest of the batch.
    """

    def __init__(self, turnaround_minutes=None):
        if turnaround_minutes is None:
            turnaround_minutes = availability.default_turnaround_minutes()
        self.turnaround_minutes = turnaround_minutes

    def generate_trips(self, start_date, end_date, frequency_ids=None, cooperative=None):
        """
        Generate trips for every operating day in [start_date, end_date]

        Args:
            start_date: first calendar day (inclusive)
            end_date: last calendar day (inclusive)
            frequency_ids: explicit selection; defaults to all active frequencies
            cooperative: restricts the selection to one tenant when given

        Returns:
            GenerationReport with created trips and skipped slots
        """
        if start_date > end_date:
            raise ValidationError('Start date must be on or before end date')

        frequencies = self._select_frequencies(frequency_ids, cooperative)
        report = GenerationReport()
        # (day, driver_id) -> bus_id for drivers assigned during this run
        driver_pins = {}

        logger.info(
            f'[GENERATOR] Generating {start_date}..{end_date} for {len(frequencies)} frequencies '
            f'(turnaround={self.turnaround_minutes}m)'
        )

        for frequency in frequencies:
            self._generate_for_frequency(frequency, start_date, end_date, driver_pins, report)

        logger.info(f'[GENERATOR] Done: {len(report.created)} created, {len(report.skipped)} skipped')
        return report

    def _select_frequencies(self, frequency_ids, cooperative):
        queryset = Frequency.objects.filter(is_active=True).select_related('route', 'bus_group', 'cooperative')
        if frequency_ids:
            queryset = queryset.filter(id__in=frequency_ids)
        if cooperative is not None:
            queryset = queryset.filter(cooperative=cooperative)
        return list(queryset.order_by('departure_time', 'created_at', 'id'))

    def _generate_for_frequency(self, frequency, start_date, end_date, driver_pins, report):
        buses = frequency.bus_group.active_buses() if frequency.bus_group else []
        if not buses:
            logger.info(f'[GENERATOR] Frequency {frequency.id} has no active buses in its group, skipping')
            report.skipped.append(SkippedSlot(frequency.id, None, SkipReason.NO_BUSES))
            return

        drivers = availability.active_drivers(frequency.cooperative)
        cursor = 0

        for day in daterange(start_date, end_date):
            if weekday_name(day) not in (frequency.operating_days or []):
                continue

            if self._slot_exists(frequency, day):
                report.skipped.append(SkippedSlot(frequency.id, day, SkipReason.DUPLICATE))
                continue

            if self._group_exhausted(frequency, buses, day):
                logger.info(f'[GENERATOR] Group exhausted for {frequency.id} on {day} {frequency.departure_time}')
                report.skipped.append(SkippedSlot(frequency.id, day, SkipReason.GROUP_EXHAUSTED))
                continue

            assignment, cursor = self._select_bus(frequency, buses, day, cursor)

            if self._bus_slot_taken(frequency, day, assignment.bus):
                report.skipped.append(SkippedSlot(frequency.id, day, SkipReason.DUPLICATE))
                continue

            driver = self._select_driver(frequency, assignment.bus, day, drivers, driver_pins)

            try:
                with transaction.atomic():
                    trip = Trip.objects.create(
                        frequency=frequency,
                        bus=assignment.bus,
                        date=day,
                        departure_time=frequency.departure_time,
                        driver=driver,
                        status=TripStatus.SCHEDULED,
                    )
            except IntegrityError:
                logger.info(f'[GENERATOR] Concurrent insert for {frequency.id} on {day}, skipping')
                report.skipped.append(SkippedSlot(frequency.id, day, SkipReason.DUPLICATE))
                continue

            if driver is not None:
                driver_pins[(day, driver.id)] = assignment.bus.id

            if assignment.turnaround_violated:
                logger.warning(
                    f'[GENERATOR] Bus #{assignment.bus.internal_number} assigned to {trip.id} '
                    f'without full turnaround (round-robin fallback)'
                )

            report.created.append(GeneratedTrip(trip, assignment))

    def _slot_exists(self, frequency, day):
        return Trip.objects.filter(frequency=frequency, date=day).exclude(status=TripStatus.CANCELLED).exists()

    def _bus_slot_taken(self, frequency, day, bus):
        return Trip.objects.filter(frequency=frequency, date=day, bus=bus).exclude(
            status=TripStatus.CANCELLED
        ).exists()

    def _group_exhausted(self, frequency, buses, day):
        taken = Trip.objects.filter(
            bus__in=buses,
            date=day,
            departure_time=frequency.departure_time,
        ).exclude(status=TripStatus.CANCELLED).count()
        return taken >= len(buses)

    def _select_bus(self, frequency, buses, day, cursor):
        """
        Rotate through the pool from cursor

        A bus conflicts when an earlier trip has not finished its turnaround
        by departure, or when this trip would not be back before one of the
        bus's later departures that day. A non-conflicting bus with no prior
        trips wins at once. Otherwise the first non-conflicting bus whose last
        trip ended at this route's origin is taken. With neither, the bus under
        the cursor is used as-is.
        """
        departure_at, free_at = occupied_window(
            day, frequency.departure_time, frequency.route.estimated_duration, self.turnaround_minutes
        )
        conflicted = set()

        for offset in range(len(buses)):
            index = (cursor + offset) % len(buses)
            candidate = buses[index]
            recent = availability.recent_bus_trips(candidate, day, frequency.departure_time)
            later = availability.later_bus_trips(candidate, day, frequency.departure_time)

            if availability.blocks_later_trip(later, free_at) or availability.bus_conflicts(
                recent, departure_at, self.turnaround_minutes
            ):
                conflicted.add(candidate.id)
                continue

            if not recent:
                return BusAssignment(candidate), (index + 1) % len(buses)

            if availability.continues_from(recent, frequency.route, departure_at, self.turnaround_minutes):
                return BusAssignment(candidate, continuity=True), (index + 1) % len(buses)

        fallback = buses[cursor % len(buses)]
        return (
            BusAssignment(fallback, via_fallback=True, turnaround_violated=fallback.id in conflicted),
            (cursor + 1) % len(buses),
        )

    def _select_driver(self, frequency, bus, day, drivers, driver_pins):
        """Least-loaded driver free for the whole window and not tied to another bus that day"""
        window = occupied_window(
            day, frequency.departure_time, frequency.route.estimated_duration, self.turnaround_minutes
        )
        best = None
        best_load = None

        for driver in drivers:
            pinned_bus_id = driver_pins.get((day, driver.id))
            if pinned_bus_id is not None and pinned_bus_id != bus.id:
                continue

            day_trips = availability.driver_day_trips(driver, day)
            if availability.other_bus_ids(day_trips, bus):
                continue
            if availability.overlapping_trip(day_trips, window, self.turnaround_minutes):
                continue

            load = len(day_trips) + (1 if pinned_bus_id is not None else 0)
            if best is None or load < best_load:
                best, best_load = driver, load

        return best
