"""Authenticated identity as seen by the client."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(slots=True)
class Session:
    user_id: str
    email: Optional[str] = None
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None

    @classmethod
    def from_auth(cls, auth_session: Any) -> Optional["Session"]:
        """Project a supabase auth session (or ``None``) onto the client's view of it."""
        user = getattr(auth_session, "user", None) if auth_session is not None else None
        if user is None:
            return None
        return cls(
            user_id=str(user.id),
            email=getattr(user, "email", None),
            access_token=getattr(auth_session, "access_token", None),
            refresh_token=getattr(auth_session, "refresh_token", None),
            expires_at=getattr(auth_session, "expires_at", None),
        )
