"""
Core business logic for suggesting open appointment slots.

Pure domain logic: no I/O and no clock access. The caller supplies ``now``.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Protocol, Tuple

from pendulum import DateTime

from .exceptions import InvalidInputError
from .models import SuggestedSlot, TimeRange, WorkingHours, ensure_datetime

logger = logging.getLogger(__name__)


class HasTimeSpan(Protocol):
    """Anything with a start and an end, e.g. an Appointment."""
    start: DateTime
    end: DateTime


class SuggestionEngine:
    """
    Suggests open slots for a new session over the coming days.

    Algorithm:
    1. Walk day by day from ``now`` through the search window, skipping off days
    2. Generate candidate starts on a fixed grid inside working hours
    3. Drop candidates in the past or overlapping an existing appointment
    4. Score survivors (time of day, today/tomorrow) until the collect limit
    5. Sort by confidence, then start time, and return the best few
    """

    BASE_CONFIDENCE = 0.8
    OPTIMAL_BONUS = 0.1
    TODAY_BONUS = 0.1
    TOMORROW_BONUS = 0.05

    REASON_DEFAULT = "Available slot"
    REASON_OPTIMAL = "Optimal time slot"
    REASON_TODAY = "Available today"
    REASON_TOMORROW = "Available tomorrow"

    def __init__(
        self,
        working_hours: Optional[WorkingHours] = None,
        window_days: int = 7,
        slot_step_minutes: int = 30,
        collect_limit: Optional[int] = 5,
        max_suggestions: int = 3,
    ):
        if window_days <= 0:
            raise InvalidInputError("window_days must be greater than zero")
        if not 0 < slot_step_minutes <= 60:
            raise InvalidInputError("slot_step_minutes must be between 1 and 60")
        if collect_limit is not None and collect_limit <= 0:
            raise InvalidInputError("collect_limit must be greater than zero")
        if max_suggestions <= 0:
            raise InvalidInputError("max_suggestions must be greater than zero")

        self.working_hours = working_hours or WorkingHours()
        self.window_days = window_days
        self.slot_step_minutes = slot_step_minutes
        self.collect_limit = collect_limit
        self.max_suggestions = max_suggestions

    def suggest(
        self,
        existing_appointments: Iterable[HasTimeSpan],
        session_duration_minutes: int,
        now: DateTime,
    ) -> List[SuggestedSlot]:
        """
        Rank open slots for a session of the given length.

        Args:
            existing_appointments: Booked intervals; only start/end are read
            session_duration_minutes: Length of the session to place
            now: Reference instant; its timezone is the local clock

        Returns:
            Up to ``max_suggestions`` slots, best first

        Raises:
            InvalidInputError: On a non-positive duration or malformed timestamps
        """
        if (
            isinstance(session_duration_minutes, bool)
            or not isinstance(session_duration_minutes, int)
            or session_duration_minutes <= 0
        ):
            raise InvalidInputError(
                f"session_duration_minutes must be a positive integer, got {session_duration_minutes!r}"
            )
        now = ensure_datetime(now, "now")
        busy = [self._as_time_range(item) for item in existing_appointments]

        collected: List[SuggestedSlot] = []

        for slot_start in self._candidate_starts(now):
            if slot_start < now:
                continue

            candidate = TimeRange(
                start=slot_start,
                end=slot_start.add(minutes=session_duration_minutes),
            )
            if self._has_conflict(candidate, busy):
                continue

            confidence, reason = self._score(slot_start, now)
            collected.append(
                SuggestedSlot(
                    start=candidate.start,
                    end=candidate.end,
                    confidence=confidence,
                    reason=reason,
                )
            )

            # Later candidates are never looked at once the limit is hit,
            # even if they would score higher.
            if self.collect_limit is not None and len(collected) >= self.collect_limit:
                break

        ranked = sorted(collected, key=lambda slot: (-slot.confidence, slot.start))

        logger.debug(
            "Collected %d candidate(s) for a %d-minute session, returning %d",
            len(collected),
            session_duration_minutes,
            min(len(ranked), self.max_suggestions),
        )

        return ranked[: self.max_suggestions]

    def _candidate_starts(self, now: DateTime) -> Iterator[DateTime]:
        """Yield grid start times for every working day in the search window."""
        window_end = now.add(days=self.window_days)
        day = now

        while day < window_end:
            if self.working_hours.is_working_day(day):
                for hour in self.working_hours.candidate_hours():
                    for minute in range(0, 60, self.slot_step_minutes):
                        yield day.set(hour=hour, minute=minute, second=0, microsecond=0)

            day = day.add(days=1)

    @staticmethod
    def _has_conflict(candidate: TimeRange, busy: List[TimeRange]) -> bool:
        return any(candidate.overlaps(booked) for booked in busy)

    def _score(self, slot_start: DateTime, now: DateTime) -> Tuple[float, str]:
        """
        Score a surviving candidate.

        Bonuses add up; the today/tomorrow label wins over the optimal one.
        """
        confidence = self.BASE_CONFIDENCE
        reason = self.REASON_DEFAULT

        if self.working_hours.is_optimal_hour(slot_start.hour):
            confidence += self.OPTIMAL_BONUS
            reason = self.REASON_OPTIMAL

        slot_day = slot_start.date()
        if slot_day == now.date():
            confidence += self.TODAY_BONUS
            reason = self.REASON_TODAY
        elif slot_day == now.add(days=1).date():
            confidence += self.TOMORROW_BONUS
            reason = self.REASON_TOMORROW

        # Rounding drops float noise such as 0.9000000000000001
        return round(min(confidence, 1.0), 2), reason

    @staticmethod
    def _as_time_range(item: HasTimeSpan) -> TimeRange:
        try:
            start, end = item.start, item.end
        except AttributeError as exc:
            raise InvalidInputError(f"Appointment without start/end: {item!r}") from exc

        return TimeRange(
            start=ensure_datetime(start, "appointment start"),
            end=ensure_datetime(end, "appointment end"),
        )
