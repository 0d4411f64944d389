"""
Demo calendar used to seed an empty appointment store.
"""

from typing import List

from pendulum import DateTime

from ..domain.models import Appointment, AppointmentStatus, TherapyType, User, UserRole


def _at(now: DateTime, days: int, hour: int, minute: int = 0) -> DateTime:
    return now.add(days=days).set(hour=hour, minute=minute, second=0, microsecond=0)


def patient_demo_appointments(now: DateTime, user: User) -> List[Appointment]:
    """Two upcoming sessions for the logged-in patient."""
    patient_name = user.display_name
    return [
        Appointment(
            id="1",
            title=TherapyType.PANCHAKARMA.display_name,
            start=_at(now, 2, 10),
            end=_at(now, 2, 12),
            therapy_type=TherapyType.PANCHAKARMA.value,
            patient_name=patient_name,
            notes="Initial detox session",
            status=AppointmentStatus.CONFIRMED,
        ),
        Appointment(
            id="2",
            title="Follow-up Consultation",
            start=_at(now, 5, 14),
            end=_at(now, 5, 15),
            therapy_type=TherapyType.CONSULTATION.value,
            patient_name=patient_name,
            notes="",
            status=AppointmentStatus.SCHEDULED,
        ),
    ]


def practitioner_demo_appointments(now: DateTime, user: User) -> List[Appointment]:
    """A few days of bookings from several patients."""
    entries = [
        ("1", "Panchakarma", "Sarah Johnson", TherapyType.PANCHAKARMA, (1, 10, 0), (1, 12, 0),
         "Initial detox session, check allergies", AppointmentStatus.SCHEDULED),
        ("2", "Consultation", "Mike Chen", TherapyType.CONSULTATION, (1, 14, 0), (1, 15, 0),
         "Follow-up for digestive issues", AppointmentStatus.CONFIRMED),
        ("3", "Abhyanga", "Emma Wilson", TherapyType.ABHYANGA, (2, 9, 0), (2, 10, 30),
         "Stress relief session", AppointmentStatus.SCHEDULED),
        ("4", "Shirodhara", "David Kim", TherapyType.SHIRODHARA, (3, 11, 0), (3, 12, 15),
         "Anxiety management", AppointmentStatus.SCHEDULED),
    ]

    return [
        Appointment(
            id=appointment_id,
            title=f"{label} - {patient}",
            start=_at(now, *start),
            end=_at(now, *end),
            therapy_type=therapy.value,
            patient_name=patient,
            notes=notes,
            status=status,
            practitioner_name=user.full_name,
        )
        for appointment_id, label, patient, therapy, start, end, notes, status in entries
    ]


def demo_appointments_for(user: User, now: DateTime) -> List[Appointment]:
    """Pick the demo calendar matching the user's role."""
    builders = {
        UserRole.PATIENT: patient_demo_appointments,
        UserRole.PRACTITIONER: practitioner_demo_appointments,
    }
    return builders[user.role](now, user)
