"""Trip search service - customer-facing lookup of bookable trips"""
import logging
from datetime import timedelta

from django.db.models import Count, Q
from django.utils import timezone

from ..models import Trip
from ..utils.constants import TicketStatus, TripStatus, BusinessRules
from .exceptions import ValidationError

logger = logging.getLogger(__name__)

AMENITY_FIELDS = ['has_ac', 'has_wifi', 'has_bathroom']


class TripSearchService:
    """Scheduled trips of active routes and frequencies, across every cooperative unless narrowed"""

    def search_trips(self, origin, destination, date, cooperative_id=None, amenities=None):
        """
        Scheduled trips on date whose route origin and destination contain the given text

        Args:
            origin: case-insensitive fragment of the route origin
            destination: case-insensitive fragment of the route destination
            date: travel day
            cooperative_id: restricts results to one cooperative when given
            amenities: amenity field names the bus must have (see AMENITY_FIELDS)

        Returns:
            list of trip dicts ordered by departure time, with free seat counts
        """
        if not origin or not destination or not date:
            raise ValidationError('origin, destination and date are required')

        trips = self._bookable().filter(
            frequency__route__origin__icontains=origin,
            frequency__route__destination__icontains=destination,
            date=date,
        )
        if cooperative_id:
            trips = trips.filter(frequency__cooperative_id=cooperative_id)
        for amenity in amenities or []:
            if amenity not in AMENITY_FIELDS:
                raise ValidationError(f'Unknown amenity "{amenity}"')
            trips = trips.filter(**{f'bus__{amenity}': True})

        trips = trips.select_related(
            'frequency__route', 'frequency__cooperative', 'bus'
        ).annotate(
            seats_taken=Count('tickets', filter=Q(tickets__status__in=TicketStatus.ON_BOARD_COUNTED))
        ).order_by('departure_time', 'id')

        results = [self._entry(trip) for trip in trips]
        logger.info(f'[SEARCH] {origin} -> {destination} on {date}: {len(results)} trips')
        return results

    def available_dates(self, origin, destination, days=None):
        """Distinct upcoming days with a scheduled trip between exactly these two places"""
        if not origin or not destination:
            raise ValidationError('origin and destination are required')

        days = BusinessRules.SEARCH_WINDOW_DAYS if days is None else days
        today = timezone.localdate()
        dates = self._bookable().filter(
            frequency__route__origin__iexact=origin,
            frequency__route__destination__iexact=destination,
            date__gte=today,
            date__lte=today + timedelta(days=days),
        ).order_by('date').values_list('date', flat=True).distinct()
        return [day.isoformat() for day in dates]

    def _bookable(self):
        return Trip.objects.filter(
            status=TripStatus.SCHEDULED,
            frequency__is_active=True,
            frequency__route__is_active=True,
        )

    def _entry(self, trip):
        route = trip.frequency.route
        cooperative = trip.frequency.cooperative
        bus = trip.bus
        return {
            'id': str(trip.id),
            'date': trip.date.isoformat(),
            'departure_time': trip.departure_time,
            'route': {
                'id': str(route.id),
                'origin': route.origin,
                'destination': route.destination,
                'base_price': str(route.base_price),
                'estimated_duration': route.estimated_duration,
            },
            'bus': {
                'id': str(bus.id),
                'internal_number': bus.internal_number,
                'total_seats': bus.total_seats,
                'has_ac': bus.has_ac,
                'has_wifi': bus.has_wifi,
                'has_bathroom': bus.has_bathroom,
            },
            'cooperative': {
                'id': str(cooperative.id),
                'name': cooperative.name,
                'config': cooperative.config,
            },
            'available_seats': max(bus.total_seats - trip.seats_taken, 0),
        }
