"""
Service layer helpers that orchestrate state, persistence and domain logic.
"""

from .auth import AuthService, require_role
from .booking import BookingService
from .context import ClinicContext, build_context
from .dashboards import DashboardStats, PatientDashboard, PractitionerDashboard, build_dashboard
from .state import AppointmentStoreProtocol, ClinicState, SessionStoreProtocol
from .suggestions import SuggestionService

__all__ = [
    "AppointmentStoreProtocol",
    "AuthService",
    "BookingService",
    "ClinicContext",
    "ClinicState",
    "DashboardStats",
    "PatientDashboard",
    "PractitionerDashboard",
    "SessionStoreProtocol",
    "SuggestionService",
    "build_context",
    "build_dashboard",
    "require_role",
]
