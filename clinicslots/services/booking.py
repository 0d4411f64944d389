"""
Booking flow: turning a selected slot into an appointment and moving
appointments through their lifecycle.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from typing import Callable, Optional

from ..domain.exceptions import AppointmentNotFoundError, BookingConflictError, InvalidInputError
from ..domain.models import (
    Appointment,
    AppointmentStatus,
    TimeRange,
    therapy_display_name,
)
from .state import ClinicState

logger = logging.getLogger(__name__)


def _new_appointment_id() -> str:
    return uuid.uuid4().hex[:12]


class BookingService:
    """
    Creates and updates appointments in the shared clinic state.
    """

    def __init__(
        self,
        state: ClinicState,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._state = state
        self._id_factory = id_factory or _new_appointment_id

    def book(
        self,
        slot: TimeRange,
        therapy_type: str,
        patient_name: str,
        notes: str = "",
        practitioner_name: Optional[str] = None,
    ) -> Appointment:
        """
        Book a selected ``{start, end}`` slot.

        Args:
            slot: Interval picked by the user, e.g. ``SuggestedSlot.time_range()``
            therapy_type: Therapy key such as ``"abhyanga"``
            patient_name: Who the session is for
            notes: Free-text notes
            practitioner_name: Optional assigned practitioner

        Returns:
            The new, scheduled appointment

        Raises:
            InvalidInputError: If the therapy type or patient name is empty
            BookingConflictError: If the slot overlaps an active appointment
        """
        if not therapy_type:
            raise InvalidInputError("therapy_type must not be empty")
        if not patient_name:
            raise InvalidInputError("patient_name must not be empty")

        conflict = self.find_conflict(slot)
        if conflict is not None:
            raise BookingConflictError(
                f"Slot {slot} overlaps '{conflict.title}' ({conflict.time_range()})"
            )

        appointment = Appointment(
            id=self._id_factory(),
            title=therapy_display_name(therapy_type),
            start=slot.start,
            end=slot.end,
            therapy_type=therapy_type,
            patient_name=patient_name,
            notes=notes,
            status=AppointmentStatus.SCHEDULED,
            practitioner_name=practitioner_name,
        )
        self._state.add_appointment(appointment)

        logger.info("Booked %s for %s at %s", appointment.title, patient_name, slot)
        return appointment

    def find_conflict(self, slot: TimeRange) -> Optional[Appointment]:
        """Return the first active appointment overlapping ``slot``, if any."""
        for appointment in self._state.appointments:
            if appointment.is_active and appointment.time_range().overlaps(slot):
                return appointment
        return None

    def get(self, appointment_id: str) -> Appointment:
        for appointment in self._state.appointments:
            if appointment.id == appointment_id:
                return appointment
        raise AppointmentNotFoundError(f"No appointment with id '{appointment_id}'")

    def set_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment:
        """Change an appointment's status and persist the calendar."""
        updated = replace(self.get(appointment_id), status=AppointmentStatus(status))
        self._state.update_appointment(updated)

        logger.info("Appointment %s is now %s", appointment_id, updated.status.value)
        return updated

    def approve(self, appointment_id: str) -> Appointment:
        return self.set_status(appointment_id, AppointmentStatus.CONFIRMED)

    def decline(self, appointment_id: str) -> Appointment:
        return self.set_status(appointment_id, AppointmentStatus.CANCELLED)
