from __future__ import annotations

from datetime import datetime, time, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import CivilClock, parse_time_of_day
from ..core.constants import UPCOMING_PERIOD_HOURS
from .model import TimetablePeriod
from .repository import TimetableRepository


class PeriodMatcher:
    """Finds the timetable slot that is live at a given instant.

    "No match" is the normal answer outside teaching hours and is returned as None.
    """

    def __init__(self, periods: TimetableRepository, clock: CivilClock):
        self._periods = periods
        self._clock = clock

    @staticmethod
    def match(periods: Iterable[TimetablePeriod], day_of_week: int, time_of_day: str | time) -> Optional[TimetablePeriod]:
        at = parse_time_of_day(time_of_day) if isinstance(time_of_day, str) else time_of_day
        candidates = [p for p in periods if p.covers(day_of_week, at)]
        if not candidates:
            return None
        # Overlapping slots are not prevented by the schema; lowest period number wins.
        return min(candidates, key=lambda p: p.period_number)

    def current_period(
        self,
        *,
        class_id: int,
        teacher_id: Optional[int] = None,
        now: datetime | None = None,
    ) -> Optional[TimetablePeriod]:
        now = now or self._clock.now()
        day = self._clock.day_of_week(now)
        periods = self._periods.list_for_class_day(class_id=class_id, day_of_week=day, teacher_id=teacher_id)
        return self.match(periods, day, self._clock.time_of_day(now))

    def current_for_teacher(self, *, teacher_id: int, now: datetime | None = None) -> list[TimetablePeriod]:
        """The live slot of each class the teacher is teaching right now."""

        now = now or self._clock.now()
        day = self._clock.day_of_week(now)
        by_class: dict[int, list[TimetablePeriod]] = {}
        for p in self._periods.list_for_teacher_day(teacher_id=teacher_id, day_of_week=day):
            by_class.setdefault(p.class_id, []).append(p)

        out: list[TimetablePeriod] = []
        for class_periods in by_class.values():
            live = self.match(class_periods, day, self._clock.time_of_day(now))
            if live:
                out.append(live)
        return out

    def upcoming_period(
        self,
        *,
        class_id: int,
        teacher_id: int,
        now: datetime | None = None,
        within_hours: int = UPCOMING_PERIOD_HOURS,
    ) -> Optional[TimetablePeriod]:
        now = now or self._clock.now()
        day = self._clock.day_of_week(now)
        start = parse_time_of_day(self._clock.time_of_day(now))
        horizon = now + timedelta(hours=within_hours)
        # The look-ahead stops at midnight; slots belong to a single weekday.
        limit = horizon.time() if horizon.date() == now.date() else time(23, 59, 59)

        upcoming = [
            p
            for p in self._periods.list_for_class_day(class_id=class_id, day_of_week=day, teacher_id=teacher_id)
            if not p.is_break and start < p.start_time <= limit
        ]
        return min(upcoming, key=lambda p: p.start_time) if upcoming else None
