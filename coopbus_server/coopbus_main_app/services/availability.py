"""Bus and driver availability checks shared by batch generation and manual assignment"""
from datetime import timedelta

from django.conf import settings
from django.contrib.auth.models import User
from django.db.models import Q

from ..models import Trip
from ..utils.constants import TripStatus, UserRole, AccountStatus, BusinessRules
from ..utils.schedule_utils import arrival_datetime, occupied_window, windows_overlap


def default_turnaround_minutes():
    return getattr(settings, 'FREQUENCY_TURNAROUND_MINUTES', BusinessRules.DEFAULT_TURNAROUND_MINUTES)


def _active_bus_trips(bus, exclude_trip_id):
    queryset = Trip.objects.filter(bus=bus).exclude(
        status=TripStatus.CANCELLED
    ).select_related('frequency__route')
    if exclude_trip_id:
        queryset = queryset.exclude(id=exclude_trip_id)
    return queryset


def recent_bus_trips(bus, day, departure_time, exclude_trip_id=None):
    """
    Latest non-cancelled trips of a bus departing no later than day + departure_time, newest first

    A same-day trip at the very same time counts as prior so that it conflicts.
    HH:MM strings compare in clock order.
    """
    queryset = _active_bus_trips(bus, exclude_trip_id).filter(
        Q(date__lt=day) | Q(date=day, departure_time__lte=departure_time)
    )
    return list(queryset.order_by('-date', '-departure_time')[:BusinessRules.RECENT_TRIPS_LOOKBACK])


def later_bus_trips(bus, day, departure_time, exclude_trip_id=None):
    """Non-cancelled trips of the bus later on the same day"""
    return list(
        _active_bus_trips(bus, exclude_trip_id).filter(date=day, departure_time__gt=departure_time)
    )


def ready_at(trip, turnaround_minutes):
    """Instant the bus can leave again after this trip"""
    arrival = arrival_datetime(trip.date, trip.departure_time, trip.frequency.route.estimated_duration)
    return arrival + timedelta(minutes=turnaround_minutes)


def bus_conflicts(recent_trips, departure_at, turnaround_minutes):
    """True when any recent trip still occupies the bus at departure_at"""
    return any(ready_at(trip, turnaround_minutes) > departure_at for trip in recent_trips)


def blocks_later_trip(later_trips, free_at):
    """True when the bus would not be back before one of its later departures"""
    return any(trip.departure_at < free_at for trip in later_trips)


def continues_from(recent_trips, route, departure_at, turnaround_minutes):
    """Last trip ended where this route starts, with time to turn around"""
    if not recent_trips:
        return False
    last_trip = recent_trips[0]
    return (
        last_trip.frequency.route.destination == route.origin
        and ready_at(last_trip, turnaround_minutes) <= departure_at
    )


def active_drivers(cooperative):
    return list(
        User.objects.filter(
            profile__cooperative=cooperative,
            profile__role=UserRole.DRIVER,
            profile__status=AccountStatus.ACTIVE,
            is_active=True,
        ).select_related('profile').order_by('id')
    )


def driver_day_trips(driver, day, exclude_trip_id=None):
    queryset = Trip.objects.filter(driver=driver, date=day).exclude(
        status=TripStatus.CANCELLED
    ).select_related('frequency__route')
    if exclude_trip_id:
        queryset = queryset.exclude(id=exclude_trip_id)
    return list(queryset)


def trip_window(trip, turnaround_minutes):
    return occupied_window(trip.date, trip.departure_time, trip.frequency.route.estimated_duration, turnaround_minutes)


def overlapping_trip(day_trips, window, turnaround_minutes):
    """First trip whose occupied window intersects window, or None"""
    for trip in day_trips:
        if windows_overlap(window, trip_window(trip, turnaround_minutes)):
            return trip
    return None


def other_bus_ids(day_trips, bus):
    return {trip.bus_id for trip in day_trips if trip.bus_id != bus.id}
