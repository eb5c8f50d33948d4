from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


@dataclass(frozen=True)
class User:
    """Domain entity: a login account (HOD, teacher or student).

    Plain data object; no DB access here.
    """

    user_id: int
    username: str
    password_hash: str
    role: Role
    name: str
    register_id: Optional[str] = None


@dataclass(frozen=True)
class RequestContext:
    """The authenticated caller of one request.

    Built from the Flask session by the controllers and handed to services,
    so services never read ambient session state.
    """

    user_id: int
    name: str
    role: Role

    def require(self, role: Role) -> None:
        if self.role != role:
            raise AuthorizationError("You do not have permission for this action")
