from datetime import date, timedelta

import pytest

from src.dept_attendance.dept_attendance.attendance.report import attendance_percentage, parse_window
from src.dept_attendance.dept_attendance.core.enums import ReportWindow
from src.dept_attendance.dept_attendance.core.exceptions import ValidationError

from tests.fakes import CLASS_ID, TEACHER


def test_week_report_counts_recent_records_only(container, world, fixed_now):
    today = fixed_now.date()
    for i, status in enumerate(["P", "P", "P", "A", "A"]):
        world.add_record(1, today - timedelta(days=i), status, period_id=101)
    for i in range(10):
        world.add_record(1, today - timedelta(days=20 + i), "P", period_id=101)

    report = container.report_aggregator.build(TEACHER, class_id=CLASS_ID, window="week", now=fixed_now)
    alice = report.rows[0]

    assert (alice.present_days, alice.absent_days, alice.total_days) == (3, 2, 5)
    assert alice.percentage == 60.0


def test_full_report_counts_everything_for_the_teacher(container, world, fixed_now):
    world.add_record(1, date(2024, 6, 3), "P", period_id=101)
    world.add_record(1, date(2024, 6, 4), "A")  # manual entry counts too
    world.add_record(1, date(2024, 6, 3), "A", period_id=103)  # other teacher's period

    report = container.report_aggregator.build(TEACHER, class_id=CLASS_ID, window="full", now=fixed_now)
    alice = report.rows[0]

    assert (alice.present_days, alice.absent_days) == (1, 1)
    assert alice.percentage == 50.0


def test_month_window_is_thirty_days(container, world, fixed_now):
    today = fixed_now.date()
    world.add_record(2, today - timedelta(days=30), "P", period_id=101)
    world.add_record(2, today - timedelta(days=31), "P", period_id=101)

    report = container.report_aggregator.build(TEACHER, class_id=CLASS_ID, window="month", now=fixed_now)

    assert {r.student_id: r.present_days for r in report.rows}[2] == 1


def test_students_without_records_have_no_percentage(container, fixed_now):
    report = container.report_aggregator.build(TEACHER, class_id=CLASS_ID, window="week", now=fixed_now)

    assert [r.roll_no for r in report.rows] == [1, 2, 3, 4]
    assert all(r.total_days == 0 and r.percentage is None for r in report.rows)


def test_unknown_window_is_rejected(container, fixed_now):
    with pytest.raises(ValidationError):
        container.report_aggregator.build(TEACHER, class_id=CLASS_ID, window="year", now=fixed_now)


def test_percentage_rounds_to_two_places():
    assert attendance_percentage(2, 3) == 66.67
    assert attendance_percentage(0, 0) is None


def test_missing_window_means_week():
    assert parse_window(None) is ReportWindow.WEEK
    assert parse_window("") is ReportWindow.WEEK
    assert parse_window(" Full ") is ReportWindow.FULL
