from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ClassInfo:
    """Domain entity: a class (year + section), e.g. '3rd Year IT-A'."""

    class_id: int
    class_name: str
    year: int
    section: str
    total_students: int = 0


@dataclass(frozen=True)
class Student:
    student_id: int
    class_id: int
    roll_no: int
    student_name: str
    user_id: Optional[int] = None
