from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import HistoryEntry, ReportEntry


class AttendanceRepository(Protocol):
    # -------- Live marking --------
    def upsert_for_period(
        self,
        *,
        student_id: int,
        class_id: int,
        period_id: int,
        on_date: date,
        status: AttendanceStatus,
        marked_by: int,
    ) -> None:
        """Insert or overwrite the (student, date, period) row.

        Raises ConflictError when the period no longer exists.
        """

        raise NotImplementedError

    def statuses_for_period(self, *, class_id: int, period_id: int, on_date: date) -> dict[int, AttendanceStatus]:
        """student_id -> status for one slot on one date."""

        raise NotImplementedError

    def count_for_period(self, *, class_id: int, period_id: int, on_date: date) -> int:
        raise NotImplementedError

    # -------- Historical edits --------
    def exists_for_student_date(self, *, student_id: int, on_date: date) -> bool:
        raise NotImplementedError

    def update_status_for_student_date(self, *, student_id: int, on_date: date, status: AttendanceStatus) -> int:
        raise NotImplementedError

    def insert_manual(
        self,
        *,
        student_id: int,
        class_id: int,
        on_date: date,
        status: AttendanceStatus,
        marked_by: int,
    ) -> int:
        """Insert a period-less row. Returns attendance id."""

        raise NotImplementedError

    def delete_for_student_date(self, *, student_id: int, on_date: date) -> int:
        raise NotImplementedError

    def delete_for_class_dates(self, *, class_id: int, dates: Sequence[date]) -> int:
        raise NotImplementedError

    # -------- Read models --------
    def list_history(self, *, class_id: int, start: date, end: date) -> Sequence[HistoryEntry]:
        """Records of the class's students between start and end (inclusive)."""

        raise NotImplementedError

    def list_for_report(self, *, class_id: int, since: Optional[date] = None) -> Sequence[ReportEntry]:
        raise NotImplementedError

    def list_for_student(self, *, student_id: int) -> Sequence[ReportEntry]:
        raise NotImplementedError
