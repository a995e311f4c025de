"""Serializers package - imports from domain-specific modules"""

# Schedule serializers
from .frequency_serializers import (
    RouteStopSerializer,
    RouteSerializer,
    FrequencySerializer,
    FrequencyWriteSerializer,
    GenerateTripsSerializer,
)

# Trip serializers
from .trip_serializers import (
    BusSummarySerializer,
    TripSerializer,
    TripCreateSerializer,
    TripUpdateSerializer,
    TripStatusSerializer,
    PersonnelSerializer,
    RouteSheetQuerySerializer,
    TripSearchQuerySerializer,
    AvailableDatesQuerySerializer,
)

# Ticket serializers
from .ticket_serializers import (
    TicketSerializer,
    SeatRequestSerializer,
    SeatBookingSerializer,
    FareQuoteQuerySerializer,
    BoardingSerializer,
)

__all__ = [
    'RouteStopSerializer',
    'RouteSerializer',
    'FrequencySerializer',
    'FrequencyWriteSerializer',
    'GenerateTripsSerializer',
    'BusSummarySerializer',
    'TripSerializer',
    'TripCreateSerializer',
    'TripUpdateSerializer',
    'TripStatusSerializer',
    'PersonnelSerializer',
    'RouteSheetQuerySerializer',
    'TripSearchQuerySerializer',
    'AvailableDatesQuerySerializer',
    'TicketSerializer',
    'SeatRequestSerializer',
    'SeatBookingSerializer',
    'FareQuoteQuerySerializer',
    'BoardingSerializer',
]
