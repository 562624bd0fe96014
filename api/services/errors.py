"""
Domain errors raised by services and routers.

Each error carries the HTTP status it maps to; main.py renders all of them
into the same ``{"success": false, "message": ..., "data": ...}`` envelope.
"""


class CourierError(Exception):
    """Base class for business-rule failures."""

    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None, data=None):
        self.message = message or self.default_message
        self.data = data
        super().__init__(self.message)


class ValidationFailed(CourierError):
    status_code = 422
    default_message = "Validation failed"


class AuthenticationRequired(CourierError):
    status_code = 401
    default_message = "Authentication required"


class InvalidCredentials(CourierError):
    status_code = 401
    default_message = "Invalid credentials"


class AccessDenied(CourierError):
    status_code = 403
    default_message = "Access denied"


class NotFound(CourierError):
    status_code = 404
    default_message = "Not found"


class StateConflict(CourierError):
    status_code = 409
    default_message = "Request conflicts with the current state"


class InvalidStatusTransition(StateConflict):
    """Requested parcel status change is not allowed from the current status."""

    def __init__(self, current: str, target: str, message: str | None = None):
        self.current = current
        self.target = target
        super().__init__(message or f"Invalid status transition: {current} -> {target}")
