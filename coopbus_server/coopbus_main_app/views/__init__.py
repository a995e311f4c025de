"""Views package - HTTP request handlers"""

from .frequency_views import FrequencyViewSet
from .trip_views import TripViewSet
from .ticket_views import TicketViewSet

__all__ = [
    'FrequencyViewSet',
    'TripViewSet',
    'TicketViewSet',
]
