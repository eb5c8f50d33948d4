from __future__ import annotations

import logging
from typing import Any, Optional

from ..attendance.service import require_class_access
from ..classes.repository import ClassRepository
from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty, require_positive_int
from ..core.exceptions import NotFoundError, ValidationError
from ..timetable.repository import TimetableRepository
from ..users.model import RequestContext
from .model import Bookmark
from .repository import BookmarkRepository

logger = logging.getLogger(__name__)


class BookmarkService:
    def __init__(self, bookmarks: BookmarkRepository, classes: ClassRepository, periods: TimetableRepository):
        self._bookmarks = bookmarks
        self._classes = classes
        self._periods = periods

    def list_for_class(
        self,
        ctx: RequestContext,
        *,
        class_id: Any,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> list[Bookmark]:
        class_info = require_class_access(ctx, class_id=class_id, classes=self._classes, periods=self._periods)
        start = parse_iso_date(start_date) if start_date else None
        end = parse_iso_date(end_date) if end_date else None
        if start and end and start > end:
            raise ValidationError("Start date must not be after end date")
        return list(self._bookmarks.list_for_class(class_id=class_info.class_id, start=start, end=end))

    def save(self, ctx: RequestContext, payload: dict) -> Bookmark:
        class_info = require_class_access(
            ctx,
            class_id=payload.get("classId", payload.get("class_id")),
            classes=self._classes,
            periods=self._periods,
        )
        on_date = parse_iso_date(str(payload.get("date") or ""))
        title = require_non_empty(str(payload.get("title") or ""), "Title")
        description = str(payload.get("description") or "").strip() or None

        bookmark = self._bookmarks.upsert(
            class_id=class_info.class_id,
            on_date=on_date,
            title=title,
            description=description,
            marked_by=ctx.user_id,
        )
        logger.info("Bookmarked %s for %s: %s", on_date, class_info.class_name, title)
        return bookmark

    def delete(self, ctx: RequestContext, *, bookmark_id: Any) -> None:
        bookmark = self._bookmarks.get(require_positive_int(bookmark_id, "Bookmark"))
        if not bookmark:
            raise NotFoundError("Bookmark not found")
        require_class_access(ctx, class_id=bookmark.class_id, classes=self._classes, periods=self._periods)
        self._bookmarks.delete(bookmark.bookmark_id)
        logger.info("Deleted bookmark %s (%s)", bookmark.bookmark_id, bookmark.on_date)
