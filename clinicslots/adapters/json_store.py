"""
JSON file persistence for appointments and the logged-in session.

These adapters stand in for browser storage: state is loaded once on start
and written back whenever it changes.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pendulum
from pendulum import DateTime

from ..domain.exceptions import InvalidInputError, StorageError
from ..domain.models import Appointment, User, UserRole

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise StorageError(f"Invalid JSON in {path}: {exc}") from exc
    except OSError as exc:
        raise StorageError(f"Could not read {path}: {exc}") from exc


def _write_json(path: Path, payload: Any) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
        tmp_path.replace(path)
    except OSError as exc:
        raise StorageError(f"Could not write {path}: {exc}") from exc


class JsonAppointmentStore:
    """
    Stores the clinic calendar as a JSON list of appointment objects.
    """

    def __init__(self, path: Path, timezone: str = "Europe/Berlin"):
        self.path = path
        self.timezone = timezone

    def load(self) -> List[Appointment]:
        """
        Load all appointments. A missing file means an empty calendar.

        Entries that cannot be parsed are skipped with a warning.

        Raises:
            StorageError: If the file is not valid JSON or not a list
        """
        if not self.path.exists():
            return []

        data = _read_json(self.path)
        if not isinstance(data, list):
            raise StorageError(f"{self.path} must contain a JSON list of appointments.")

        appointments: List[Appointment] = []
        for entry in data:
            try:
                appointments.append(self._from_dict(entry))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping invalid appointment entry in %s: %s", self.path, exc)

        logger.debug("Loaded %d appointment(s) from %s", len(appointments), self.path)
        return appointments

    def save(self, appointments: Sequence[Appointment]) -> None:
        _write_json(self.path, [self._to_dict(appointment) for appointment in appointments])
        logger.debug("Saved %d appointment(s) to %s", len(appointments), self.path)

    def _parse_datetime(self, raw: str) -> DateTime:
        parsed = pendulum.parse(raw, tz=self.timezone)
        if not isinstance(parsed, DateTime):
            raise InvalidInputError(f"Expected a date-time, got {raw!r}")
        return parsed.in_timezone(self.timezone)

    def _from_dict(self, entry: Dict[str, Any]) -> Appointment:
        return Appointment(
            id=str(entry["id"]),
            title=entry["title"],
            start=self._parse_datetime(entry["start"]),
            end=self._parse_datetime(entry["end"]),
            therapy_type=entry.get("therapyType", "consultation"),
            patient_name=entry.get("patientName", ""),
            notes=entry.get("notes", ""),
            status=entry.get("status", "scheduled"),
            practitioner_name=entry.get("practitionerName"),
        )

    @staticmethod
    def _to_dict(appointment: Appointment) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": appointment.id,
            "title": appointment.title,
            "start": appointment.start.to_iso8601_string(),
            "end": appointment.end.to_iso8601_string(),
            "therapyType": appointment.therapy_type,
            "patientName": appointment.patient_name,
            "notes": appointment.notes,
            "status": appointment.status.value,
        }
        if appointment.practitioner_name is not None:
            payload["practitionerName"] = appointment.practitioner_name
        return payload


class JsonSessionStore:
    """
    Remembers the logged-in user between invocations.
    """

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> Optional[User]:
        """
        Return the saved user, or None.

        A corrupt session file is discarded rather than failing startup.
        """
        if not self.path.exists():
            return None

        try:
            data = _read_json(self.path)
            return User(
                id=str(data["id"]),
                username=data["username"],
                role=UserRole(data["role"]),
                full_name=data.get("fullName"),
            )
        except (StorageError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Error parsing saved session %s, discarding it: %s", self.path, exc)
            self.clear()
            return None

    def save(self, user: User) -> None:
        _write_json(
            self.path,
            {
                "id": user.id,
                "username": user.username,
                "role": user.role.value,
                "fullName": user.full_name,
            },
        )

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not remove {self.path}: {exc}") from exc
