"""Centralized cache key patterns"""

class CacheKeys:
    """Cache key generators for consistent naming"""

    @staticmethod
    def seat_holds(trip_id):
        return f'seat_holds:{trip_id}'
