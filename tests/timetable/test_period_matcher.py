from datetime import datetime, time

from src.dept_attendance.dept_attendance.common.datetime_utils import CivilClock
from src.dept_attendance.dept_attendance.timetable.matcher import PeriodMatcher

from tests.fakes import CLASS_ID, OTHER_TEACHER_ID, TEACHER_ID, InMemoryTimetable, period


def _matcher(timetable=None):
    return PeriodMatcher(timetable or InMemoryTimetable(), CivilClock())


def test_match_inside_window_on_same_day():
    p = period(1, 1, 1, (9, 0), (10, 0))

    assert PeriodMatcher.match([p], 1, "09:30") == p
    assert PeriodMatcher.match([p], 1, "09:00") == p
    assert PeriodMatcher.match([p], 1, "10:00") == p


def test_no_match_outside_window_or_other_day():
    p = period(1, 1, 1, (9, 0), (10, 0))

    assert PeriodMatcher.match([p], 1, "10:01") is None
    assert PeriodMatcher.match([p], 1, "08:59") is None
    assert PeriodMatcher.match([p], 2, "09:30") is None


def test_breaks_never_match():
    b = period(2, 1, 2, (10, 0), (10, 15), is_break=True)

    assert PeriodMatcher.match([b], 1, time(10, 5)) is None


def test_overlap_prefers_lowest_period_number():
    later = period(7, 1, 3, (9, 0), (10, 0))
    earlier = period(8, 1, 2, (9, 30), (10, 30))

    assert PeriodMatcher.match([later, earlier], 1, "09:45") == earlier


def test_current_period_filters_by_teacher(world, fixed_now):
    m = _matcher(world.timetable)

    assert m.current_period(class_id=CLASS_ID, teacher_id=TEACHER_ID, now=fixed_now).period_id == 101
    assert m.current_period(class_id=CLASS_ID, teacher_id=OTHER_TEACHER_ID, now=fixed_now) is None


def test_current_period_none_on_sunday(world):
    m = _matcher(world.timetable)

    assert m.current_period(class_id=CLASS_ID, now=datetime(2025, 1, 12, 9, 30)) is None


def test_upcoming_period_within_two_hours(world):
    m = _matcher(world.timetable)
    at = datetime(2025, 1, 6, 8, 15)

    upcoming = m.upcoming_period(class_id=CLASS_ID, teacher_id=TEACHER_ID, now=at)
    assert upcoming is not None and upcoming.period_id == 101

    too_early = datetime(2025, 1, 6, 6, 0)
    assert m.upcoming_period(class_id=CLASS_ID, teacher_id=TEACHER_ID, now=too_early) is None


def test_current_for_teacher_returns_one_slot_per_class(world, fixed_now):
    world.timetable.periods[201] = period(201, 1, 1, (9, 0), (10, 0), class_id=2)

    live = _matcher(world.timetable).current_for_teacher(teacher_id=TEACHER_ID, now=fixed_now)

    assert sorted(p.class_id for p in live) == [2, CLASS_ID]
