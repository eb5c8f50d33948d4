import pytest

from src.dept_attendance.dept_attendance.core.enums import Role
from src.dept_attendance.dept_attendance.core.exceptions import AuthenticationError


def test_authenticate_returns_request_context(container):
    ctx = container.auth_service.authenticate("teacher1", "password")

    assert (ctx.user_id, ctx.role, ctx.name) == (2, Role.TEACHER, "Teacher One")


@pytest.mark.parametrize("username, password", [("teacher1", "wrong"), ("nobody", "password"), ("", "password")])
def test_bad_credentials_are_rejected(container, username, password):
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate(username, password)
