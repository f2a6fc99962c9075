"""
exceptions.py
-------------
Domain errors raised by the booking services.

They subclass ValueError so callers that only know "bad input" keep working,
and each carries the HTTP status the API answers with.
"""


class BookingError(ValueError):
    status_code = 400


class ValidationError(BookingError):
    """Booking request is incomplete (no services, no time slot, unknown ids)."""
    status_code = 400


class UnavailableError(BookingError):
    """The requested stylist is off or already holds that date/slot."""
    status_code = 409


class InvalidTransitionError(BookingError):
    """Status change outside the allowed state machine."""
    status_code = 409
