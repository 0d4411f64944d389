"""
Wiring of config, stores and services into one application context.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..adapters.demo_data import demo_appointments_for
from ..adapters.json_store import JsonAppointmentStore, JsonSessionStore
from ..config import AppConfig
from ..domain.models import Appointment, User
from .auth import AuthService
from .booking import BookingService
from .dashboards import Dashboard, build_dashboard
from .state import ClinicState
from .suggestions import Clock, SuggestionService

logger = logging.getLogger(__name__)


@dataclass
class ClinicContext:
    config: AppConfig
    state: ClinicState
    auth: AuthService
    suggestions: SuggestionService
    booking: BookingService

    def dashboard_for(self, user: User) -> Dashboard:
        return build_dashboard(
            user=user,
            state=self.state,
            suggestion_service=self.suggestions,
            booking_service=self.booking,
        )

    def current_dashboard(self) -> Dashboard:
        return self.dashboard_for(self.auth.current_user())

    def seed_demo_calendar(self, user: User) -> List[Appointment]:
        """
        Fill an empty calendar with the demo appointments for ``user``'s role.

        Returns the seeded appointments, or an empty list if the calendar
        already had data.
        """
        if self.state.appointments:
            return []

        demo = demo_appointments_for(user, self.suggestions.now())
        self.state.replace_appointments(demo)
        logger.info("Seeded %d demo appointment(s) for %s", len(demo), user.role.value)
        return demo


def build_context(config: AppConfig, clock: Optional[Clock] = None) -> ClinicContext:
    """Load persisted state and build the services around it."""
    state = ClinicState(
        appointment_store=JsonAppointmentStore(config.appointments_file, timezone=config.timezone),
        session_store=JsonSessionStore(config.session_file),
    )

    return ClinicContext(
        config=config,
        state=state,
        auth=AuthService(state, config),
        suggestions=SuggestionService(
            state,
            config.clinic.build_engine(),
            timezone=config.timezone,
            clock=clock,
        ),
        booking=BookingService(state),
    )
