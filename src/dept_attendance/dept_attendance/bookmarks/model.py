from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Bookmark:
    """A labelled day for a class (festival, exam, holiday)."""

    bookmark_id: int
    on_date: date
    class_id: int
    title: str
    description: Optional[str] = None
    marked_by: Optional[int] = None
    marked_by_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.bookmark_id,
            "date": self.on_date.strftime("%Y-%m-%d"),
            "class_id": self.class_id,
            "title": self.title,
            "description": self.description,
            "marked_by": self.marked_by,
            "marked_by_name": self.marked_by_name,
        }
