"""
Domain models for appointments, time ranges and suggested slots.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

import pendulum
from pendulum import DateTime

from .exceptions import InvalidInputError


def ensure_datetime(value: datetime, name: str = "timestamp") -> DateTime:
    """
    Coerce an aware ``datetime`` into a pendulum ``DateTime``.

    Naive datetimes are rejected since "local clock" only has a meaning
    once a timezone is attached.
    """
    if not isinstance(value, datetime):
        raise InvalidInputError(f"{name} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise InvalidInputError(f"{name} must be timezone-aware, got naive {value.isoformat()}")
    if isinstance(value, DateTime):
        return value
    return pendulum.instance(value)


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range ``[start, end)``.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidInputError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another (touching ends do not count)."""
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


class AppointmentStatus(str, Enum):
    """Lifecycle states of an appointment."""
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class TherapyType(str, Enum):
    """Therapies offered by the clinic."""
    CONSULTATION = "consultation"
    PANCHAKARMA = "panchakarma"
    ABHYANGA = "abhyanga"
    SHIRODHARA = "shirodhara"
    NASYA = "nasya"
    BASTI = "basti"

    @property
    def display_name(self) -> str:
        return THERAPY_NAMES[self]


THERAPY_NAMES = {
    TherapyType.CONSULTATION: "Initial Consultation",
    TherapyType.PANCHAKARMA: "Panchakarma Therapy",
    TherapyType.ABHYANGA: "Abhyanga Massage",
    TherapyType.SHIRODHARA: "Shirodhara",
    TherapyType.NASYA: "Nasya Treatment",
    TherapyType.BASTI: "Basti Therapy",
}


def therapy_display_name(therapy_type: str) -> str:
    """Human-readable therapy name; unknown keys are shown as given."""
    try:
        return TherapyType(therapy_type).display_name
    except ValueError:
        return therapy_type


class UserRole(str, Enum):
    """Who is using the application. Drives which dashboard is composed."""
    PATIENT = "patient"
    PRACTITIONER = "practitioner"


@dataclass(frozen=True)
class User:
    """An authenticated user of the clinic application."""
    id: str
    username: str
    role: UserRole
    full_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.username


@dataclass
class Appointment:
    """
    A booked session in the clinic calendar.

    Only ``start`` and ``end`` matter to the suggestion engine; the rest is
    descriptive data for the dashboards.
    """
    id: str
    title: str
    start: DateTime
    end: DateTime
    therapy_type: str = TherapyType.CONSULTATION.value
    patient_name: str = ""
    notes: str = ""
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    practitioner_name: Optional[str] = None

    def __post_init__(self):
        self.start = ensure_datetime(self.start, "start")
        self.end = ensure_datetime(self.end, "end")
        if self.start >= self.end:
            raise InvalidInputError(
                f"Appointment {self.id}: start {self.start} must be before end {self.end}"
            )
        self.status = AppointmentStatus(self.status)

    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)

    @property
    def is_active(self) -> bool:
        """Cancelled appointments no longer block the calendar."""
        return self.status != AppointmentStatus.CANCELLED


@dataclass
class WorkingHours:
    """
    Bookable grid of the clinic.

    Candidate start hours run from ``start_hour`` up to but excluding
    ``end_hour``; hours inside ``[optimal_start_hour, optimal_end_hour]``
    are preferred.
    """
    start_hour: int = 8
    end_hour: int = 20
    exclude_weekdays: List[int] = field(default_factory=lambda: [6])  # 0=Monday, 6=Sunday
    optimal_start_hour: int = 9
    optimal_end_hour: int = 17

    def is_working_day(self, dt: DateTime) -> bool:
        """Check if a given datetime falls on a working day."""
        return dt.day_of_week not in self.exclude_weekdays

    def is_optimal_hour(self, hour: int) -> bool:
        return self.optimal_start_hour <= hour <= self.optimal_end_hour

    def candidate_hours(self) -> range:
        return range(self.start_hour, self.end_hour)


@dataclass(frozen=True)
class SuggestedSlot:
    """
    A ranked open slot produced by the suggestion engine.
    """
    start: DateTime
    end: DateTime
    confidence: float
    reason: str

    def time_range(self) -> TimeRange:
        """The ``{start, end}`` pair handed to the booking flow."""
        return TimeRange(start=self.start, end=self.end)

    @property
    def confidence_percent(self) -> int:
        return round(self.confidence * 100)

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: ddd, MMM D | h:mm A - h:mm A
        """
        date_str = self.start.format("ddd, MMM D")
        time_str = f"{self.start.format('h:mm A')} - {self.end.format('h:mm A')}"

        return f"{date_str} | {time_str}"
