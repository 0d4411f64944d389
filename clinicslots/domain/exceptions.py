"""
Domain-specific exception hierarchy for the clinic scheduling application.
"""


class ClinicSlotsError(Exception):
    """Base class for all application-level errors."""


class InvalidInputError(ClinicSlotsError, ValueError):
    """Raised when a caller supplies a malformed duration, timestamp or value."""


class AuthenticationError(ClinicSlotsError):
    """Raised when credentials are wrong or no user is logged in."""


class AuthorizationError(ClinicSlotsError):
    """Raised when the current user's role does not permit an action."""


class BookingConflictError(ClinicSlotsError):
    """Raised when a booking overlaps an existing active appointment."""


class AppointmentNotFoundError(ClinicSlotsError):
    """Raised when an appointment id is unknown."""


class StorageError(ClinicSlotsError):
    """Raised when persisted state cannot be read or written."""
