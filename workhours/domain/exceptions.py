"""
Domain-specific exception hierarchy for the workhours application.
"""


class WorkhoursError(Exception):
    """Base class for all application-level errors."""


class InvalidIntervalError(WorkhoursError, ValueError):
    """Raised when a slot or break violates 0 <= start < end <= 1440."""


class WorkingHoursAPIError(WorkhoursError):
    """Raised when working hours cannot be fetched or parsed."""


class CalendarAPIError(WorkhoursError):
    """Raised when calendar events cannot be fetched or parsed."""


class AuthenticationError(WorkhoursError):
    """Raised when no access token is available or it is rejected."""
