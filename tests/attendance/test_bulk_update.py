from datetime import date

import pytest

from src.dept_attendance.dept_attendance.attendance.service import parse_bulk_changes
from src.dept_attendance.dept_attendance.core.enums import AttendanceStatus, Role
from src.dept_attendance.dept_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.dept_attendance.dept_attendance.users.model import RequestContext

from tests.fakes import CLASS_ID, TEACHER

DAY = date(2025, 1, 6)


def _statuses(world, student_id):
    return sorted(
        (r.period_id or 0, r.status.value)
        for r in world.attendance.records.values()
        if r.student_id == student_id and r.on_date == DAY
    )


def test_bulk_inserts_period_less_row_when_none_exists(container, world):
    changes = parse_bulk_changes([{"studentId": 1, "date": "2025-01-06", "status": "P"}])

    assert container.attendance_service.bulk_update(TEACHER, class_id=CLASS_ID, changes=changes) == 1

    [record] = world.attendance.records.values()
    assert record.period_id is None
    assert record.class_id == CLASS_ID
    assert record.marked_by == TEACHER.user_id


def test_bulk_updates_every_row_of_the_day(container, world):
    world.add_record(2, DAY, "P", period_id=101)
    world.add_record(2, DAY, "P", period_id=103)

    changes = parse_bulk_changes([{"studentId": 2, "date": "2025-01-06", "status": "A"}])
    container.attendance_service.bulk_update(TEACHER, class_id=CLASS_ID, changes=changes)

    assert _statuses(world, 2) == [(101, "A"), (103, "A")]


def test_bulk_empty_status_deletes_and_report_drops_it(container, world, fixed_now):
    world.add_record(3, DAY, "A", period_id=101)
    world.add_record(4, DAY, "P", period_id=101)

    changes = parse_bulk_changes(
        [
            {"studentId": 3, "date": "2025-01-06", "status": ""},
            {"studentId": 4, "date": "2025-01-06", "status": "A"},
        ]
    )
    assert container.attendance_service.bulk_update(TEACHER, class_id=CLASS_ID, changes=changes) == 2
    assert _statuses(world, 3) == []

    report = container.report_aggregator.build(TEACHER, class_id=CLASS_ID, window="week", now=fixed_now)
    rows = {r.student_id: r for r in report.rows}
    assert rows[3].total_days == 0 and rows[3].percentage is None
    assert (rows[4].present_days, rows[4].absent_days) == (0, 1)


def test_bulk_requires_a_teaching_assignment(container, world):
    stranger = RequestContext(user_id=99, name="Guest", role=Role.TEACHER)
    changes = parse_bulk_changes([{"studentId": 1, "date": "2025-01-06", "status": "P"}])

    with pytest.raises(AuthorizationError):
        container.attendance_service.bulk_update(stranger, class_id=CLASS_ID, changes=changes)
    assert world.attendance.records == {}


def test_bulk_rejects_students_of_other_classes(container, world):
    changes = parse_bulk_changes(
        [
            {"studentId": 1, "date": "2025-01-06", "status": "P"},
            {"studentId": 5, "date": "2025-01-06", "status": "P"},
        ]
    )

    with pytest.raises(NotFoundError):
        container.attendance_service.bulk_update(TEACHER, class_id=CLASS_ID, changes=changes)
    assert world.attendance.records == {}


def test_parse_bulk_changes_validates_input():
    [change] = parse_bulk_changes([{"studentId": "2", "date": "2025-01-06", "status": "a"}])
    assert change.status == AttendanceStatus.ABSENT

    with pytest.raises(ValidationError):
        parse_bulk_changes([{"studentId": 2, "date": "2025-13-01", "status": "P"}])
    with pytest.raises(ValidationError):
        parse_bulk_changes([{"studentId": 2, "date": "2025-01-06", "status": "X"}])


def test_purge_class_dates_by_name_keeps_other_days(container, world):
    world.add_record(1, DAY, "P", period_id=101)
    world.add_record(2, DAY, "A")
    world.add_record(1, date(2025, 1, 8), "P", period_id=104)

    class_info, removed = container.attendance_service.purge_class_dates(class_ref="3rd Year IT-A", dates=[DAY])

    assert class_info.class_id == CLASS_ID
    assert removed == 2
    assert [r.on_date for r in world.attendance.records.values()] == [date(2025, 1, 8)]


def test_purge_class_dates_rejects_unknown_class(container):
    with pytest.raises(NotFoundError):
        container.attendance_service.purge_class_dates(class_ref="99", dates=[DAY])
    with pytest.raises(ValidationError):
        container.attendance_service.purge_class_dates(class_ref=str(CLASS_ID), dates=[])
