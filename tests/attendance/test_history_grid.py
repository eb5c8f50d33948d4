from datetime import date, datetime

import pytest

from src.dept_attendance.dept_attendance.core.enums import AttendanceStatus
from src.dept_attendance.dept_attendance.core.exceptions import AuthorizationError, ValidationError

from tests.fakes import CLASS_ID, OTHER_TEACHER, TEACHER


def test_week_grid_has_period_cells_on_teaching_days_and_general_elsewhere(container):
    grid = container.history_builder.build(TEACHER, class_id=CLASS_ID, view="week", reference_date=date(2025, 1, 8))

    assert (grid.start_date, grid.end_date) == (date(2025, 1, 6), date(2025, 1, 12))
    assert [c.day for c in grid.dates] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert [c.day_num for c in grid.dates] == [6, 7, 8, 9, 10, 11, 12]

    alice = grid.grid[1]
    assert alice["2025-01-06"] == {101: None}
    assert alice["2025-01-08"] == {104: None}
    for d in ("2025-01-07", "2025-01-09", "2025-01-10", "2025-01-11", "2025-01-12"):
        assert alice[d] == {"general": None}


def test_mark_then_history_scenario(container, fixed_now):
    container.attendance_service.mark_attendance(
        TEACHER, student_id=1, class_id=CLASS_ID, status="P", on_date=fixed_now.date(), now=fixed_now
    )

    grid = container.history_builder.build(TEACHER, class_id=CLASS_ID, view="week", reference_date=fixed_now.date())

    assert grid.grid[1]["2025-01-06"] == {101: AttendanceStatus.PRESENT}
    assert grid.grid[1]["2025-01-06"][101] == "P"


def test_records_without_own_cell_fall_back_to_general(container, world):
    world.add_record(2, date(2025, 1, 6), "A", period_id=103)  # other teacher's period
    world.add_record(3, date(2025, 1, 7), "P")  # manual entry on a day without periods

    grid = container.history_builder.build(TEACHER, class_id=CLASS_ID, view="week", reference_date=date(2025, 1, 6))

    assert grid.grid[2]["2025-01-06"] == {101: None, "general": AttendanceStatus.ABSENT}
    assert grid.grid[3]["2025-01-07"] == {"general": AttendanceStatus.PRESENT}


def test_week_navigation_and_sunday_wraps_back(container):
    grid = container.history_builder.build(TEACHER, class_id=CLASS_ID, view="week", reference_date=date(2025, 1, 12))

    assert grid.start_date == date(2025, 1, 6)
    assert (grid.prev_date, grid.next_date) == (date(2024, 12, 30), date(2025, 1, 13))


def test_month_view_spans_the_calendar_month(container):
    grid = container.history_builder.build(TEACHER, class_id=CLASS_ID, view="month", reference_date=date(2025, 1, 20))

    assert (grid.start_date, grid.end_date) == (date(2025, 1, 1), date(2025, 1, 31))
    assert len(grid.dates) == 31
    assert (grid.prev_date, grid.next_date) == (date(2024, 12, 1), date(2025, 2, 1))


def test_grid_includes_bookmarks_in_window(container, world):
    world.bookmarks.upsert(class_id=CLASS_ID, on_date=date(2025, 1, 7), title="Pongal", description=None, marked_by=2)
    world.bookmarks.upsert(class_id=CLASS_ID, on_date=date(2025, 2, 7), title="Later", description=None, marked_by=2)

    grid = container.history_builder.build(TEACHER, class_id=CLASS_ID, view="week", reference_date=date(2025, 1, 6))

    assert [b.title for b in grid.bookmarks] == ["Pongal"]


def test_unknown_view_and_unassigned_teacher_are_rejected(container, world):
    with pytest.raises(ValidationError):
        container.history_builder.build(TEACHER, class_id=CLASS_ID, view="year", reference_date=date(2025, 1, 6))

    world.timetable.delete(period_id=103)
    with pytest.raises(AuthorizationError):
        container.history_builder.build(OTHER_TEACHER, class_id=CLASS_ID, view="week", reference_date=date(2025, 1, 6))


def test_empty_class_gives_empty_grid(container, world):
    world.classes.students = [s for s in world.classes.students if s.class_id != 3]

    grid = container.history_builder.build(TEACHER, class_id=CLASS_ID, view="week", reference_date=date(2025, 1, 6))

    assert grid.students == [] and grid.grid == {}
    assert len(grid.dates) == 7
