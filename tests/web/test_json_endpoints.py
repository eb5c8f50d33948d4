from __future__ import annotations

from datetime import datetime

import pytest

from src.dept_attendance.dept_attendance.common.datetime_utils import CivilClock
from src.dept_attendance.dept_attendance.main import create_app

from tests.fakes import ADMIN_ID, CLASS_ID, STUDENT_USER_ID, TEACHER_ID


class FrozenClock(CivilClock):
    """Clock pinned to Monday 09:30 local time."""

    def now(self) -> datetime:
        return datetime(2025, 1, 6, 9, 30)


@pytest.fixture
def app(world, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    world.clock = FrozenClock()
    return create_app(world.container())


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, user_id: int, role: str, name: str = "User"):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role
        sess["name"] = name


def test_login_redirects_by_role(client):
    resp = client.post("/login", data={"username": "teacher1", "password": "password"})

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/teacher/dashboard")


def test_login_failure_stays_on_form(client):
    resp = client.post("/", data={"username": "teacher1", "password": "nope"})

    assert resp.status_code == 200
    assert b"Invalid username or password" in resp.data


def test_mark_attendance_json(client, world):
    _login(client, TEACHER_ID, "teacher")

    resp = client.post(
        "/teacher/mark-attendance",
        json={"studentId": 1, "classId": CLASS_ID, "status": "P", "date": "2025-01-06"},
    )

    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "periodId": 101}
    assert len(world.attendance.records) == 1


def test_mark_attendance_rejects_bad_status(client):
    _login(client, TEACHER_ID, "teacher")

    resp = client.post("/teacher/mark-attendance", json={"studentId": 1, "classId": CLASS_ID, "status": "Z"})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_bulk_update_forbidden_for_unassigned_teacher(client):
    _login(client, 77, "teacher")

    resp = client.post(
        "/api/attendance/bulk-update",
        json={"classId": CLASS_ID, "changes": [{"studentId": 1, "date": "2025-01-06", "status": "P"}]},
    )

    assert resp.status_code == 403


def test_bulk_update_reports_count(client):
    _login(client, TEACHER_ID, "teacher")

    resp = client.post(
        "/api/attendance/bulk-update",
        json={
            "classId": CLASS_ID,
            "changes": [
                {"studentId": 1, "date": "2025-01-03", "status": "P"},
                {"studentId": 2, "date": "2025-01-03", "status": "A"},
            ],
        },
    )

    body = resp.get_json()
    assert body["success"] is True and body["updatedCount"] == 2


def test_api_requires_login(client):
    resp = client.get(f"/api/bookmarks/{CLASS_ID}")

    assert resp.status_code == 401


def test_admin_timetable_api(client, world):
    _login(client, ADMIN_ID, "admin")
    world.add_record(1, datetime(2025, 1, 6).date(), "P", period_id=101)

    timetable = client.get(f"/api/timetable/{CLASS_ID}").get_json()
    assert [d["day_of_week"] for d in timetable["timetable"]] == [1, 2, 3, 4, 5, 6, 7]

    deleted = client.delete("/api/timetable/period/101").get_json()
    assert deleted["deletedAttendanceRecords"] == 1

    missing = client.delete("/api/timetable/period/101")
    assert missing.status_code == 404


def test_admin_api_forbidden_for_teacher(client):
    _login(client, TEACHER_ID, "teacher")

    resp = client.post("/api/timetable/period", json={})

    assert resp.status_code == 403


def test_pages_render(client):
    _login(client, TEACHER_ID, "teacher", "Teacher One")

    for url in (
        "/teacher/dashboard",
        "/teacher/timetable",
        f"/teacher/class/{CLASS_ID}/attendance",
        f"/teacher/attendance/{CLASS_ID}/history?view=month&date=2025-01-06",
        f"/teacher/reports/{CLASS_ID}?period=week",
    ):
        assert client.get(url).status_code == 200, url


def test_student_dashboard_redirects_other_roles(client):
    _login(client, STUDENT_USER_ID, "student", "Alice")
    assert client.get("/student/dashboard").status_code == 200

    _login(client, ADMIN_ID, "admin")
    resp = client.get("/student/dashboard")
    assert resp.status_code == 302 and resp.headers["Location"].endswith("/admin/dashboard")


def test_report_page_defaults_to_the_last_week(client, world):
    _login(client, TEACHER_ID, "teacher")
    world.add_record(1, datetime(2024, 6, 3).date(), "P", period_id=101)

    default = client.get(f"/teacher/reports/{CLASS_ID}")
    full = client.get(f"/teacher/reports/{CLASS_ID}?period=full")

    assert b"- week report" in default.data
    assert b"<td>1</td><td>0</td><td>1</td>" not in default.data
    assert b"<td>1</td><td>0</td><td>1</td>" in full.data


def test_page_routes_redirect_on_unexpected_errors(client, world, monkeypatch, caplog):
    _login(client, TEACHER_ID, "teacher")

    def broken(*args, **kwargs):
        raise RuntimeError("driver glitch")

    monkeypatch.setattr(world.classes, "get_class", broken)

    for url in (f"/teacher/attendance/{CLASS_ID}/history", f"/teacher/reports/{CLASS_ID}"):
        resp = client.get(url)
        assert resp.status_code == 302, url
        assert resp.headers["Location"].endswith("/teacher/dashboard")

    with client.session_transaction() as sess:
        assert ("danger", "Something went wrong, please try again") in sess["_flashes"]
    assert "Unhandled error while rendering a page" in caplog.text
