"""Service-layer exceptions shared by scheduling and booking"""


class ServiceError(Exception):
    """Base error carrying an HTTP status and a user-visible reason"""
    status_code = 400

    def __init__(self, reason, status_code=None):
        super().__init__(reason)
        self.reason = reason
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.reason}


class ValidationError(ServiceError):
    """Raised when input is malformed or breaks a business rule"""
    status_code = 400


class ConflictError(ServiceError):
    """Raised when a scheduling collision is detected"""
    status_code = 409

    def __init__(self, reason, days=None, time=None):
        super().__init__(reason)
        self.days = list(days or [])
        self.time = time

    def to_dict(self):
        data = super().to_dict()
        if self.days:
            data['days'] = self.days
        if self.time:
            data['time'] = self.time
        return data


class ResourceUnavailableError(ServiceError):
    """Raised when no bus, driver or seat is free"""
    status_code = 409


class SeatUnavailableError(ResourceUnavailableError):
    """Raised when a seat is already held on a trip"""

    def __init__(self, seat_number):
        super().__init__(f"Seat {seat_number} is not available")
        self.seat_number = seat_number


class UnauthorizedScopeError(ServiceError):
    """Raised on cross-cooperative access"""
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404
