"""
Explicit application state shared by the services.

Holds the current user and the appointment list, loading both from their
stores on start and saving them back on every change.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

from ..domain.models import Appointment, User


class AppointmentStoreProtocol(Protocol):
    """Persistence needed for the clinic calendar."""

    def load(self) -> List[Appointment]:
        """Return all stored appointments."""

    def save(self, appointments: Sequence[Appointment]) -> None:
        """Replace the stored appointments."""


class SessionStoreProtocol(Protocol):
    """Persistence needed for the logged-in user."""

    def load(self) -> Optional[User]:
        """Return the saved user, if any."""

    def save(self, user: User) -> None:
        """Remember the user."""

    def clear(self) -> None:
        """Forget the saved user."""


class ClinicState:
    """
    The appointment list and the current user, backed by stores.

    Services read ``appointments`` directly but must go through the
    mutating methods so changes get persisted.
    """

    def __init__(
        self,
        appointment_store: AppointmentStoreProtocol,
        session_store: SessionStoreProtocol,
    ) -> None:
        self._appointment_store = appointment_store
        self._session_store = session_store
        self._appointments: List[Appointment] = appointment_store.load()
        self._current_user: Optional[User] = session_store.load()

    @property
    def appointments(self) -> List[Appointment]:
        return list(self._appointments)

    @property
    def current_user(self) -> Optional[User]:
        return self._current_user

    def add_appointment(self, appointment: Appointment) -> None:
        self._appointments.append(appointment)
        self._appointment_store.save(self._appointments)

    def replace_appointments(self, appointments: Sequence[Appointment]) -> None:
        self._appointments = list(appointments)
        self._appointment_store.save(self._appointments)

    def update_appointment(self, appointment: Appointment) -> None:
        """Swap in a changed appointment with the same id."""
        self._appointments = [
            appointment if existing.id == appointment.id else existing
            for existing in self._appointments
        ]
        self._appointment_store.save(self._appointments)

    def set_current_user(self, user: Optional[User]) -> None:
        self._current_user = user
        if user is None:
            self._session_store.clear()
        else:
            self._session_store.save(user)
