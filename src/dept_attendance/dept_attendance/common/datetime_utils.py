from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator

from ..core.constants import DEFAULT_TIME_OFFSET_MINUTES, DEFAULT_TIMEZONE_OFFSET_MINUTES
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_time_of_day(value: str) -> time:
    """Parse 'HH:MM' (or 'HH:MM:SS') into time."""
    v = (value or "").strip()
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid time (HH:MM): {value!r}")


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


@dataclass(frozen=True)
class CivilClock:
    """Current civil time in the department's fixed-offset timezone.

    `extra_minutes` shifts the clock for demos and manual testing.
    """

    utc_offset_minutes: int = DEFAULT_TIMEZONE_OFFSET_MINUTES
    extra_minutes: int = DEFAULT_TIME_OFFSET_MINUTES

    def now(self) -> datetime:
        utc_now = datetime.now(timezone.utc).replace(tzinfo=None)
        return self.from_utc(utc_now)

    def from_utc(self, utc_now: datetime) -> datetime:
        return utc_now + timedelta(minutes=self.utc_offset_minutes + self.extra_minutes)

    def today(self, now: datetime | None = None) -> date:
        return (now or self.now()).date()

    def day_of_week(self, now: datetime | None = None) -> int:
        """1 = Monday ... 7 = Sunday."""
        return (now or self.now()).isoweekday()

    def time_of_day(self, now: datetime | None = None) -> str:
        return (now or self.now()).strftime("%H:%M")


def day_of_week_for(d: date) -> int:
    return d.isoweekday()


def week_window(reference: date) -> tuple[date, date]:
    # isoweekday() puts Sunday at 7, so a Sunday stays in the week that began on the prior Monday.
    start = reference - timedelta(days=reference.isoweekday() - 1)
    return start, start + timedelta(days=6)


def month_window(reference: date) -> tuple[date, date]:
    start = reference.replace(day=1)
    return start, next_month_start(reference) - timedelta(days=1)


def next_month_start(reference: date) -> date:
    if reference.month == 12:
        return date(reference.year + 1, 1, 1)
    return date(reference.year, reference.month + 1, 1)


def previous_month_start(reference: date) -> date:
    if reference.month == 1:
        return date(reference.year - 1, 12, 1)
    return date(reference.year, reference.month - 1, 1)


def iter_dates(start: date, end: date) -> Iterator[date]:
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
