"""Explicit per-caller user context.

Every ledger and ranker call receives a ``UserSession``; there is no
module-level "current user".
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Header

from eventfeed.errors import NotAuthenticated


@dataclass(frozen=True)
class UserSession:
    user_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    def require_user(self) -> str:
        """Return the user id or raise ``NotAuthenticated``."""
        if not self.user_id:
            raise NotAuthenticated()
        return self.user_id


ANONYMOUS = UserSession()


def get_session(x_user_id: Optional[str] = Header(None)) -> UserSession:
    """FastAPI dependency: build the session from the ``X-User-Id`` header."""
    if x_user_id is None or not x_user_id.strip():
        return ANONYMOUS
    return UserSession(user_id=x_user_id.strip())
