from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Bookmark


class BookmarkRepository(Protocol):
    def list_for_class(
        self,
        *,
        class_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Bookmark]:
        """Bookmarks ordered by date; both bounds inclusive when given."""

        raise NotImplementedError

    def get(self, bookmark_id: int) -> Optional[Bookmark]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        class_id: int,
        on_date: date,
        title: str,
        description: Optional[str],
        marked_by: int,
    ) -> Bookmark:
        """One bookmark per (date, class); saving again overwrites it."""

        raise NotImplementedError

    def delete(self, bookmark_id: int) -> bool:
        raise NotImplementedError
