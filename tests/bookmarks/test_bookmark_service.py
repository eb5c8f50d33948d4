import pytest

from src.dept_attendance.dept_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError

from tests.fakes import CLASS_ID, OTHER_TEACHER, TEACHER


def test_save_upserts_one_bookmark_per_day(container, world):
    svc = container.bookmark_service
    first = svc.save(TEACHER, {"classId": CLASS_ID, "date": "2025-01-14", "title": "Pongal"})
    second = svc.save(TEACHER, {"classId": CLASS_ID, "date": "2025-01-14", "title": "Pongal holiday", "description": "No classes"})

    assert first.bookmark_id == second.bookmark_id
    assert len(world.bookmarks.bookmarks) == 1
    assert second.title == "Pongal holiday" and second.description == "No classes"


def test_list_filters_by_range(container):
    svc = container.bookmark_service
    for d in ("2025-01-02", "2025-01-14", "2025-02-01"):
        svc.save(TEACHER, {"classId": CLASS_ID, "date": d, "title": d})

    all_marks = svc.list_for_class(TEACHER, class_id=CLASS_ID)
    january = svc.list_for_class(TEACHER, class_id=CLASS_ID, start_date="2025-01-01", end_date="2025-01-31")

    assert len(all_marks) == 3
    assert [b.title for b in january] == ["2025-01-02", "2025-01-14"]


def test_title_is_required(container):
    with pytest.raises(ValidationError):
        container.bookmark_service.save(TEACHER, {"classId": CLASS_ID, "date": "2025-01-14", "title": "  "})


def test_delete(container, world):
    svc = container.bookmark_service
    b = svc.save(TEACHER, {"classId": CLASS_ID, "date": "2025-01-14", "title": "Exam"})

    svc.delete(TEACHER, bookmark_id=b.bookmark_id)

    assert world.bookmarks.bookmarks == {}
    with pytest.raises(NotFoundError):
        svc.delete(TEACHER, bookmark_id=b.bookmark_id)


def test_unassigned_teacher_cannot_bookmark(container, world):
    world.timetable.delete(period_id=103)
    with pytest.raises(AuthorizationError):
        container.bookmark_service.save(OTHER_TEACHER, {"classId": CLASS_ID, "date": "2025-01-14", "title": "x"})
