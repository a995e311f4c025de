"""Date/time helpers shared by the scheduling services"""
import re
from datetime import datetime, timedelta

from .constants import Weekday

DEPARTURE_TIME_REGEX = r'^([0-1][0-9]|2[0-3]):[0-5][0-9]$'
DEPARTURE_TIME_PATTERN = re.compile(DEPARTURE_TIME_REGEX)


def is_valid_departure_time(value):
    return isinstance(value, str) and bool(DEPARTURE_TIME_PATTERN.match(value))


def departure_minutes(departure_time):
    """Minute-of-day for an HH:MM string"""
    hours, minutes = departure_time.split(':')
    return int(hours) * 60 + int(minutes)


def departure_datetime(day, departure_time):
    """Combine a calendar day with an HH:MM departure (naive, tenant-local)"""
    return datetime(day.year, day.month, day.day) + timedelta(minutes=departure_minutes(departure_time))


def weekday_name(day):
    return Weekday.ORDERED[day.weekday()]


def daterange(start_date, end_date):
    """Inclusive ascending range of calendar days"""
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def arrival_datetime(day, departure_time, duration_minutes):
    return departure_datetime(day, departure_time) + timedelta(minutes=duration_minutes or 0)


def occupied_window(day, departure_time, duration_minutes, turnaround_minutes):
    """[departure, arrival + turnaround) for a trip"""
    start = departure_datetime(day, departure_time)
    end = start + timedelta(minutes=(duration_minutes or 0) + turnaround_minutes)
    return start, end


def windows_overlap(first, second):
    return first[0] < second[1] and second[0] < first[1]
