"""Models package - domain-based organization"""

# Tenant models
from .tenant import Cooperative, Profile

# Schedule template models
from .route import Route, RouteStop
from .schedule import Frequency

# Fleet models
from .fleet import BusGroup, Bus

# Trip models
from .trip import Trip

# Ticket models
from .ticket import Ticket

__all__ = [
    'Cooperative', 'Profile', 'Route', 'RouteStop', 'Frequency', 'BusGroup', 'Bus', 'Trip', 'Ticket',
]
