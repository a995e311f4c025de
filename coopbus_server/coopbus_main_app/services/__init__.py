"""Services package - business logic layer"""

from .exceptions import (
    ServiceError, ValidationError, ConflictError, ResourceUnavailableError,
    SeatUnavailableError, UnauthorizedScopeError, NotFoundError,
)
from .frequency_service import FrequencyService
from .trip_generation_service import (
    TripGenerationService, GenerationReport, GeneratedTrip, SkippedSlot, BusAssignment,
)
from .trip_assignment_service import TripAssignmentService
from .fare_service import FareQuote, compute_fare
from .seat_hold_service import SeatHoldService
from .seat_service import SeatService
from .route_sheet_service import RouteSheetService
from .trip_search_service import TripSearchService

__all__ = [
    'ServiceError',
    'ValidationError',
    'ConflictError',
    'ResourceUnavailableError',
    'SeatUnavailableError',
    'UnauthorizedScopeError',
    'NotFoundError',
    'FrequencyService',
    'TripGenerationService',
    'GenerationReport',
    'GeneratedTrip',
    'SkippedSlot',
    'BusAssignment',
    'TripAssignmentService',
    'FareQuote',
    'compute_fare',
    'SeatHoldService',
    'SeatService',
    'RouteSheetService',
    'TripSearchService',
]
