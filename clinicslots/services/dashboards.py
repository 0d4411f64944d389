"""
Role-specific dashboards.

Which dashboard a user gets is a dispatch on ``UserRole``; the two
dashboards share no base class.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Union

from ..domain.models import Appointment, AppointmentStatus, SuggestedSlot, TimeRange, User, UserRole
from .auth import require_role
from .booking import BookingService
from .state import ClinicState
from .suggestions import SuggestionService


def _by_start(appointments: List[Appointment]) -> List[Appointment]:
    return sorted(appointments, key=lambda appointment: appointment.start)


@dataclass
class PatientDashboard:
    """Upcoming sessions, suggestions and booking for a patient."""
    user: User
    state: ClinicState
    suggestion_service: SuggestionService
    booking_service: BookingService

    def __post_init__(self):
        require_role(self.user, UserRole.PATIENT)

    def visible_appointments(self) -> List[Appointment]:
        """The patient's own appointments, earliest first."""
        return _by_start(
            [a for a in self.state.appointments if a.patient_name == self.user.display_name]
        )

    def upcoming_appointments(self, limit: int = 3) -> List[Appointment]:
        now = self.suggestion_service.now()
        return [a for a in self.visible_appointments() if a.start > now][:limit]

    def suggestions(self, session_duration_minutes: int) -> List[SuggestedSlot]:
        return self.suggestion_service.suggest(session_duration_minutes)

    def book(self, slot: TimeRange, therapy_type: str, notes: str = "") -> Appointment:
        """Book a selected slot in the patient's own name."""
        return self.booking_service.book(
            slot=slot,
            therapy_type=therapy_type,
            patient_name=self.user.display_name,
            notes=notes,
        )


@dataclass(frozen=True)
class DashboardStats:
    today: int
    pending: int
    this_week: int


@dataclass
class PractitionerDashboard:
    """Day view, pending requests and approvals for a practitioner."""
    user: User
    state: ClinicState
    suggestion_service: SuggestionService
    booking_service: BookingService

    def __post_init__(self):
        require_role(self.user, UserRole.PRACTITIONER)

    def visible_appointments(self) -> List[Appointment]:
        return _by_start(self.state.appointments)

    def appointments_on(self, selected_date: Optional[date] = None) -> List[Appointment]:
        """Appointments starting on ``selected_date`` (default today), in order."""
        day = selected_date or self.suggestion_service.now().date()
        return [a for a in self.visible_appointments() if a.start.date() == day]

    def pending_appointments(self, limit: Optional[int] = None) -> List[Appointment]:
        """Scheduled but not yet confirmed appointments still in the future."""
        now = self.suggestion_service.now()
        pending = [
            a for a in self.visible_appointments()
            if a.status == AppointmentStatus.SCHEDULED and a.start > now
        ]
        return pending[:limit]

    def stats(self, selected_date: Optional[date] = None) -> DashboardStats:
        now = self.suggestion_service.now()
        week_start = now.start_of("week")
        week_end = now.end_of("week")

        return DashboardStats(
            today=len(self.appointments_on(selected_date)),
            pending=len(self.pending_appointments()),
            this_week=sum(1 for a in self.state.appointments if week_start < a.start < week_end),
        )

    def approve(self, appointment_id: str) -> Appointment:
        return self.booking_service.approve(appointment_id)

    def decline(self, appointment_id: str) -> Appointment:
        return self.booking_service.decline(appointment_id)


Dashboard = Union[PatientDashboard, PractitionerDashboard]


def build_dashboard(
    user: User,
    state: ClinicState,
    suggestion_service: SuggestionService,
    booking_service: BookingService,
) -> Dashboard:
    """Compose the dashboard matching the user's role."""
    dashboards = {
        UserRole.PATIENT: PatientDashboard,
        UserRole.PRACTITIONER: PractitionerDashboard,
    }
    return dashboards[user.role](
        user=user,
        state=state,
        suggestion_service=suggestion_service,
        booking_service=booking_service,
    )
