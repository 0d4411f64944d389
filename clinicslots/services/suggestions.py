"""
Application service for slot suggestions.

Feeds the current calendar and the clinic clock into the domain-level
``SuggestionEngine``. Refreshing suggestions is simply calling ``suggest``
again.
"""

from __future__ import annotations

from typing import Callable, List, Optional

import pendulum
from pendulum import DateTime

from ..domain.models import SuggestedSlot, ensure_datetime
from ..domain.suggestion_engine import SuggestionEngine
from .state import ClinicState

Clock = Callable[[], DateTime]


class SuggestionService:
    """
    Orchestrates appointment lookup and slot suggestion.
    """

    def __init__(
        self,
        state: ClinicState,
        engine: SuggestionEngine,
        timezone: str = "Europe/Berlin",
        clock: Optional[Clock] = None,
    ) -> None:
        self._state = state
        self._engine = engine
        self._timezone = timezone
        self._clock = clock or (lambda: pendulum.now(timezone))

    def now(self) -> DateTime:
        """Current instant on the clinic's local clock."""
        return ensure_datetime(self._clock(), "now").in_timezone(self._timezone)

    def suggest(
        self,
        session_duration_minutes: int,
        now: Optional[DateTime] = None,
    ) -> List[SuggestedSlot]:
        """
        Suggest slots against all active appointments.

        Cancelled appointments are ignored so a declined booking frees its slot.
        """
        reference = self.now() if now is None else ensure_datetime(now, "now").in_timezone(self._timezone)
        active = [appointment for appointment in self._state.appointments if appointment.is_active]

        return self._engine.suggest(
            existing_appointments=active,
            session_duration_minutes=session_duration_minutes,
            now=reference,
        )
