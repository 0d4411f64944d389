"""
Tests for role-specific dashboards.
"""

import pytest

from clinicslots.domain.exceptions import AuthorizationError
from clinicslots.domain.models import AppointmentStatus, TimeRange
from clinicslots.services.dashboards import PatientDashboard, PractitionerDashboard, build_dashboard

from conftest import PATIENT, PRACTITIONER, at, make_appointment


@pytest.fixture
def calendar(state):
    """Mixed calendar around FIXED_NOW (Monday 2024-11-25 09:00)."""
    entries = [
        make_appointment("1", "2024-11-24 10:00", "2024-11-24 11:00", patient_name="Sarah Johnson"),
        make_appointment("2", "2024-11-25 14:00", "2024-11-25 15:00", patient_name="Sarah Johnson"),
        make_appointment("3", "2024-11-25 11:00", "2024-11-25 12:00", patient_name="Mike Chen",
                         status=AppointmentStatus.CONFIRMED),
        make_appointment("4", "2024-11-27 10:00", "2024-11-27 12:00", patient_name="Sarah Johnson"),
        make_appointment("5", "2024-11-28 09:00", "2024-11-28 10:30", patient_name="Sarah Johnson"),
        make_appointment("6", "2024-11-29 09:00", "2024-11-29 10:00", patient_name="Sarah Johnson"),
        make_appointment("7", "2024-12-03 09:00", "2024-12-03 10:00", patient_name="Emma Wilson"),
    ]
    state.replace_appointments(entries)
    return entries


def _dashboard(user, state, suggestion_service, booking_service):
    return build_dashboard(
        user=user,
        state=state,
        suggestion_service=suggestion_service,
        booking_service=booking_service,
    )


class TestDispatch:

    def test_patient_gets_patient_dashboard(self, state, suggestion_service, booking_service):
        assert isinstance(_dashboard(PATIENT, state, suggestion_service, booking_service), PatientDashboard)

    def test_practitioner_gets_practitioner_dashboard(self, state, suggestion_service, booking_service):
        board = _dashboard(PRACTITIONER, state, suggestion_service, booking_service)
        assert isinstance(board, PractitionerDashboard)

    def test_wrong_role_cannot_build_other_dashboard(self, state, suggestion_service, booking_service):
        with pytest.raises(AuthorizationError):
            PractitionerDashboard(
                user=PATIENT,
                state=state,
                suggestion_service=suggestion_service,
                booking_service=booking_service,
            )


class TestPatientDashboard:

    def test_upcoming_appointments(self, calendar, state, suggestion_service, booking_service):
        board = _dashboard(PATIENT, state, suggestion_service, booking_service)

        upcoming = board.upcoming_appointments()

        assert [a.id for a in upcoming] == ["2", "4", "5"]

    def test_only_own_appointments_are_visible(self, calendar, state, suggestion_service, booking_service):
        board = _dashboard(PATIENT, state, suggestion_service, booking_service)

        assert {a.patient_name for a in board.visible_appointments()} == {"Sarah Johnson"}

    def test_book_uses_patient_name(self, state, suggestion_service, booking_service):
        board = _dashboard(PATIENT, state, suggestion_service, booking_service)
        slot = board.suggestions(60)[0]

        appointment = board.book(slot.time_range(), "shirodhara")

        assert appointment.patient_name == "Sarah Johnson"
        assert appointment.title == "Shirodhara"

    def test_suggestions_avoid_other_patients(self, calendar, state, suggestion_service, booking_service):
        board = _dashboard(PATIENT, state, suggestion_service, booking_service)
        mike = TimeRange(start=at("2024-11-25 11:00"), end=at("2024-11-25 12:00"))

        assert all(not s.time_range().overlaps(mike) for s in board.suggestions(60))


class TestPractitionerDashboard:

    def test_appointments_today(self, calendar, state, suggestion_service, booking_service):
        board = _dashboard(PRACTITIONER, state, suggestion_service, booking_service)

        assert [a.id for a in board.appointments_on()] == ["3", "2"]

    def test_appointments_on_selected_date(self, calendar, state, suggestion_service, booking_service):
        board = _dashboard(PRACTITIONER, state, suggestion_service, booking_service)

        assert [a.id for a in board.appointments_on(at("2024-11-27 00:00").date())] == ["4"]

    def test_pending_appointments(self, calendar, state, suggestion_service, booking_service):
        board = _dashboard(PRACTITIONER, state, suggestion_service, booking_service)

        assert [a.id for a in board.pending_appointments()] == ["2", "4", "5", "6", "7"]

    def test_pending_list_can_be_capped(self, calendar, state, suggestion_service, booking_service):
        board = _dashboard(PRACTITIONER, state, suggestion_service, booking_service)

        assert [a.id for a in board.pending_appointments(limit=3)] == ["2", "4", "5"]
        assert board.stats().pending == 5

    def test_stats(self, calendar, state, suggestion_service, booking_service):
        board = _dashboard(PRACTITIONER, state, suggestion_service, booking_service)

        stats = board.stats()

        assert stats.today == 2
        assert stats.pending == 5
        assert stats.this_week == 5  # Monday to Sunday of the current week

    def test_approve_and_decline(self, calendar, state, suggestion_service, booking_service):
        board = _dashboard(PRACTITIONER, state, suggestion_service, booking_service)

        board.approve("2")
        board.decline("4")

        assert [a.id for a in board.pending_appointments()] == ["5", "6", "7"]
        assert board.stats().pending == 3
