"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    AppointmentNotFoundError,
    AuthenticationError,
    AuthorizationError,
    BookingConflictError,
    ClinicSlotsError,
    InvalidInputError,
    StorageError,
)
from .models import (
    Appointment,
    AppointmentStatus,
    SuggestedSlot,
    TherapyType,
    TimeRange,
    User,
    UserRole,
    WorkingHours,
)
from .suggestion_engine import SuggestionEngine

__all__ = [
    "Appointment",
    "AppointmentNotFoundError",
    "AppointmentStatus",
    "AuthenticationError",
    "AuthorizationError",
    "BookingConflictError",
    "ClinicSlotsError",
    "InvalidInputError",
    "StorageError",
    "SuggestedSlot",
    "SuggestionEngine",
    "TherapyType",
    "TimeRange",
    "User",
    "UserRole",
    "WorkingHours",
]
