from __future__ import annotations

import logging

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError, ValidationError
from .model import RequestContext
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> RequestContext:
        try:
            username = require_non_empty(username, "Username")
        except ValidationError:
            raise AuthenticationError("Invalid username or password")

        user = self._users.get_by_username(username)
        if not user:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Failed login for %s", username)
            raise AuthenticationError("Invalid username or password")

        logger.info("User %s logged in as %s", user.username, user.role.value)
        return RequestContext(user_id=user.user_id, name=user.name, role=user.role)
