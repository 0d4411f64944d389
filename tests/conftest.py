"""
Shared stubs and fixtures.
"""

from typing import List, Optional, Sequence

import pendulum
import pytest

from clinicslots.domain.models import Appointment, User, UserRole
from clinicslots.domain.suggestion_engine import SuggestionEngine
from clinicslots.services.booking import BookingService
from clinicslots.services.state import ClinicState
from clinicslots.services.suggestions import SuggestionService

TZ = "Europe/Berlin"

# Monday morning
FIXED_NOW = pendulum.parse("2024-11-25 09:00", tz=TZ)


class StubAppointmentStore:
    """Minimal in-memory stand-in matching AppointmentStoreProtocol."""

    def __init__(self, appointments: Optional[List[Appointment]] = None):
        self.saved: List[Appointment] = list(appointments or [])
        self.save_calls = 0

    def load(self) -> List[Appointment]:
        return list(self.saved)

    def save(self, appointments: Sequence[Appointment]) -> None:
        self.saved = list(appointments)
        self.save_calls += 1


class StubSessionStore:
    """Minimal in-memory stand-in matching SessionStoreProtocol."""

    def __init__(self, user: Optional[User] = None):
        self.user = user

    def load(self) -> Optional[User]:
        return self.user

    def save(self, user: User) -> None:
        self.user = user

    def clear(self) -> None:
        self.user = None


def at(value: str):
    return pendulum.parse(value, tz=TZ)


def make_appointment(appointment_id: str, start: str, end: str, **kwargs) -> Appointment:
    kwargs.setdefault("title", "Initial Consultation")
    return Appointment(id=appointment_id, start=at(start), end=at(end), **kwargs)


PATIENT = User(id="1", username="patient", role=UserRole.PATIENT, full_name="Sarah Johnson")
PRACTITIONER = User(id="2", username="practitioner", role=UserRole.PRACTITIONER, full_name="Dr. Priya Sharma")


@pytest.fixture
def appointment_store():
    return StubAppointmentStore()


@pytest.fixture
def session_store():
    return StubSessionStore()


@pytest.fixture
def state(appointment_store, session_store):
    return ClinicState(appointment_store=appointment_store, session_store=session_store)


@pytest.fixture
def suggestion_service(state):
    return SuggestionService(state, SuggestionEngine(), timezone=TZ, clock=lambda: FIXED_NOW)


@pytest.fixture
def booking_service(state):
    counter = iter(range(100, 1000))
    return BookingService(state, id_factory=lambda: str(next(counter)))
