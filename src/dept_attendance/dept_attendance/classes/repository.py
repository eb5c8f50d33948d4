from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ClassInfo, Student


class ClassRepository(Protocol):
    def get_class(self, class_id: int) -> Optional[ClassInfo]:
        raise NotImplementedError

    def find_by_name(self, class_name: str) -> Optional[ClassInfo]:
        raise NotImplementedError

    def list_all(self) -> Sequence[ClassInfo]:
        """All classes ordered by year, section."""

        raise NotImplementedError

    def list_for_teacher(self, teacher_id: int) -> Sequence[ClassInfo]:
        """Classes in which the teacher has at least one non-break period."""

        raise NotImplementedError

    def list_students(self, class_id: int) -> Sequence[Student]:
        """Students of a class ordered by roll number."""

        raise NotImplementedError

    def get_student_by_user(self, user_id: int) -> Optional[Student]:
        raise NotImplementedError

    def count_students(self) -> int:
        raise NotImplementedError
