from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import PeriodInput, TimetablePeriod


class TimetableRepository(Protocol):
    def get(self, period_id: int) -> Optional[TimetablePeriod]:
        raise NotImplementedError

    def list_for_class_day(
        self,
        *,
        class_id: int,
        day_of_week: int,
        teacher_id: Optional[int] = None,
    ) -> Sequence[TimetablePeriod]:
        """Slots of a class on one weekday (breaks included), by period number."""

        raise NotImplementedError

    def list_for_teacher_day(self, *, teacher_id: int, day_of_week: int) -> Sequence[TimetablePeriod]:
        """Non-break slots taught by the teacher on one weekday, across classes."""

        raise NotImplementedError

    def list_for_teacher_class(self, *, teacher_id: int, class_id: int) -> Sequence[TimetablePeriod]:
        """Non-break slots of the teacher in one class, by day then period number."""

        raise NotImplementedError

    def list_for_teacher(self, *, teacher_id: int) -> Sequence[TimetablePeriod]:
        raise NotImplementedError

    def list_for_class(self, *, class_id: int) -> Sequence[TimetablePeriod]:
        raise NotImplementedError

    def teaches_class(self, *, teacher_id: int, class_id: int) -> bool:
        raise NotImplementedError

    def upsert(self, data: PeriodInput) -> int:
        """Create or update the slot keyed by (class, day, period number).

        Returns period id.
        """

        raise NotImplementedError

    def delete(self, *, period_id: int) -> Optional[int]:
        """Delete one slot; its attendance rows go with it (FK cascade).

        Returns how many attendance rows were removed, or None if the slot did not exist.
        """

        raise NotImplementedError

    def delete_for_class(self, *, class_id: int) -> tuple[int, int]:
        """Delete every slot of a class. Returns (periods, attendance rows) removed."""

        raise NotImplementedError
