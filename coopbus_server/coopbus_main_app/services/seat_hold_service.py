"""Seat hold service - short-lived advisory holds kept in the cache"""
import logging
from datetime import timedelta

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

from ..signals import seat_held, seat_released
from ..utils.cache_keys import CacheKeys
from ..utils.constants import BusinessRules
from .exceptions import ResourceUnavailableError

logger = logging.getLogger(__name__)


class SeatHoldService:
    """
    Advisory holds broadcast to seat-map viewers

    Holds are not locks: ticket creation re-checks seat exclusivity against
    the database whether or not a hold exists or has expired.
    """

    def __init__(self, hold_seconds=None):
        if hold_seconds is None:
            hold_seconds = getattr(settings, 'SEAT_HOLD_SECONDS', BusinessRules.DEFAULT_SEAT_HOLD_SECONDS)
        self.hold_seconds = hold_seconds

    def get_holds(self, trip_id):
        """Live holds for a trip as {seat_number: {'holder', 'expires_at'}}"""
        now = timezone.now()
        holds = cache.get(CacheKeys.seat_holds(trip_id)) or {}
        return {
            int(seat): hold for seat, hold in holds.items()
            if hold['expires_at'] > now
        }

    def hold_seat(self, trip_id, seat_number, holder):
        holds = self.get_holds(trip_id)
        current = holds.get(seat_number)
        if current and current['holder'] != str(holder):
            raise ResourceUnavailableError(f'Seat {seat_number} is held by another customer')

        expires_at = timezone.now() + timedelta(seconds=self.hold_seconds)
        holds[seat_number] = {'holder': str(holder), 'expires_at': expires_at}
        cache.set(CacheKeys.seat_holds(trip_id), holds, self.hold_seconds)

        seat_held.send(sender=self.__class__, trip_id=trip_id, seat_number=seat_number,
                       holder=str(holder), expires_at=expires_at)
        return expires_at

    def release_seat(self, trip_id, seat_number, holder=None):
        """Drop a hold; with holder given, only that holder's hold is dropped"""
        holds = self.get_holds(trip_id)
        current = holds.get(seat_number)
        if current is None or (holder is not None and current['holder'] != str(holder)):
            return False

        del holds[seat_number]
        if holds:
            cache.set(CacheKeys.seat_holds(trip_id), holds, self.hold_seconds)
        else:
            cache.delete(CacheKeys.seat_holds(trip_id))

        seat_released.send(sender=self.__class__, trip_id=trip_id, seat_number=seat_number)
        return True

    def clear_hold(self, trip_id, seat_number):
        """Remove a hold silently once the seat is sold"""
        holds = self.get_holds(trip_id)
        if holds.pop(seat_number, None) is not None:
            if holds:
                cache.set(CacheKeys.seat_holds(trip_id), holds, self.hold_seconds)
            else:
                cache.delete(CacheKeys.seat_holds(trip_id))
