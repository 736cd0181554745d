"""
Booking Domain Errors

Every error here is a local validation failure that the caller can
recover from (reject the request and report the reason). None of them
is fatal to the process.
"""


class BookingDomainError(Exception):
    """Base class for recoverable booking engine failures."""

    code = "booking_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class InvalidStayError(BookingDomainError, ValueError):
    """Check-out is not strictly after check-in (or the range is otherwise invalid)."""

    code = "invalid_stay"


class InvalidRateError(BookingDomainError, ValueError):
    """A rate in the property's schedule is not positive."""

    code = "invalid_rate"


class PropertyUnavailableError(BookingDomainError):
    """
    The requested dates overlap a confirmed booking.

    Raised both for a pre-existing conflict and for a lost race between
    concurrent requests; the caller's retry path is the same.
    """

    code = "property_unavailable"


class BookingStateError(BookingDomainError):
    """A status transition is not allowed from the booking's current status."""

    code = "invalid_booking_state"
