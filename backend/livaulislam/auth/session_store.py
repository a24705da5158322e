"""Session/profile store: the single owner of the signed-in identity.

Views read ``session``, ``profile`` and ``loading`` and change them only
through the operations below. ``start()`` resolves any persisted session and
subscribes to the auth event stream; ``close()`` unsubscribes.
"""
from __future__ import annotations

import re
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

import httpx
from loguru import logger
from supabase import AuthError as SupabaseAuthError
from supabase import Client

from ..db.repositories.profile_repo_supabase import EDITABLE_FIELDS, ProfileRepositorySupabase
from ..domain.profile import Profile
from ..domain.session import Session
from ..errors import (
    AuthError,
    InvalidCredentials,
    NetworkError,
    NotAuthenticated,
    UsernameTaken,
    UserNotFound,
    ValidationError,
)
from ..integrations.session_storage import FileSessionStorage

USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]+$")
MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6

Listener = Callable[["SessionStore"], None]


@dataclass(slots=True)
class SignUpResult:
    user_id: str
    email: Optional[str]
    session: Optional[Session]

    @property
    def confirmation_required(self) -> bool:
        return self.session is None


def validate_username(username: str) -> str:
    username = (username or "").strip()
    if not username:
        raise ValidationError("Username and display name are required")
    if not USERNAME_RE.match(username):
        raise ValidationError("Username can only contain letters, numbers, and underscores")
    if len(username) < MIN_USERNAME_LENGTH:
        raise ValidationError(f"Username must be at least {MIN_USERNAME_LENGTH} characters long")
    return username


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SessionStore:
    def __init__(
        self,
        client: Client,
        profiles: ProfileRepositorySupabase,
        storage: FileSessionStorage | None = None,
    ) -> None:
        self._client = client
        self._profiles = profiles
        self._storage = storage
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._subscription: Any = None
        self.session: Optional[Session] = None
        self.profile: Optional[Profile] = None
        self.loading = True
        self._signing_out = False

    # lifecycle

    def start(self) -> None:
        if self._subscription is not None:
            return
        try:
            auth_session = self._client.auth.get_session()
        except (SupabaseAuthError, httpx.HTTPError) as e:
            logger.error("restoring session failed: {}", e)
            auth_session = None
        self._apply(Session.from_auth(auth_session))
        self._subscription = self._client.auth.on_auth_state_change(self._on_auth_event)
        logger.info("session store started (signed in: {})", self.is_authenticated)

    def close(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.unsubscribe()
            logger.info("session store closed")

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # state

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.session.user_id if self.session else None

    def require_session(self) -> Session:
        session = self.session
        if session is None:
            raise NotAuthenticated("Sign in required")
        return session

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(self)

    def _on_auth_event(self, event: Any, auth_session: Any) -> None:
        logger.info("auth event: {}", getattr(event, "value", event))
        self._apply(Session.from_auth(auth_session))

    def _apply(self, session: Optional[Session]) -> None:
        profile = self._fetch_profile(session.user_id) if session else None
        with self._lock:
            self.session = session
            self.profile = profile
            self.loading = self._signing_out
        self._notify()

    def _fetch_profile(self, user_id: str) -> Optional[Profile]:
        try:
            return self._profiles.get(user_id)
        except NetworkError as e:
            logger.error("Error fetching profile: {}", e.message)
            return None

    def refresh_profile(self) -> Optional[Profile]:
        session = self.require_session()
        profile = self._fetch_profile(session.user_id)
        with self._lock:
            self.profile = profile
        self._notify()
        return profile

    # operations

    def sign_up(self, email: str, password: str, username: str, display_name: str) -> SignUpResult:
        if not email or not password:
            raise ValidationError("Email and password are required")
        username = validate_username(username)
        if not (display_name or "").strip():
            raise ValidationError("Username and display name are required")

        if self._profiles.username_taken(username):
            raise UsernameTaken("Username already exists")

        handle = username.lower()
        try:
            res = self._client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": {"username": handle, "display_name": display_name}},
                }
            )
        except SupabaseAuthError as e:
            raise AuthError(getattr(e, "message", str(e))) from e
        except httpx.HTTPError as e:
            raise NetworkError(f"sign up failed: {e}") from e

        user = res.user
        if user is None:
            raise AuthError("Sign up did not return a user")
        self._ensure_profile(str(user.id), handle, display_name)
        session = Session.from_auth(res.session)
        if session is not None:
            # the sign-in event may have fired before the profile row existed
            self._apply(session)
        logger.info("signed up {}", handle)
        return SignUpResult(user_id=str(user.id), email=user.email, session=session)

    def _ensure_profile(self, user_id: str, username: str, display_name: str) -> None:
        # A server trigger normally creates the row; the upsert is a no-op when it did.
        row = {
            "id": user_id,
            "username": username,
            "display_name": display_name,
            "bio": "",
            "avatar_url": "",
            "website": "",
            "twitter": "",
            "linkedin": "",
            "location": "",
        }
        try:
            self._profiles.upsert(row, ignore_duplicates=True)
        except NetworkError as e:
            logger.error("Profile creation failed: {}", e.message)

    def sign_in(self, identifier: str, password: str) -> Session:
        identifier = (identifier or "").strip()
        if not identifier or not password:
            raise ValidationError("Email/Username and password are required")

        email = identifier
        if "@" not in identifier:
            profile = self._profiles.get_by_username(identifier)
            if profile is None:
                raise UserNotFound(f"No account found for {identifier}")
            email = self._profiles.email_for(profile.id)
            if not email:
                raise UserNotFound(f"No account found for {identifier}")

        try:
            res = self._client.auth.sign_in_with_password({"email": email, "password": password})
        except SupabaseAuthError as e:
            raise InvalidCredentials(getattr(e, "message", None) or "Invalid login credentials") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"sign in failed: {e}") from e

        session = Session.from_auth(res.session)
        if session is None:
            raise InvalidCredentials("Invalid login credentials")
        if self._subscription is None:
            self._apply(session)
        logger.info("signed in {}", session.user_id)
        return session

    def sign_out(self) -> None:
        with self._lock:
            self._signing_out = True
            self.loading = True
            self.session = None
            self.profile = None
        self._notify()

        failure: Optional[Exception] = None
        try:
            self._client.auth.sign_out()
        except (SupabaseAuthError, httpx.HTTPError) as e:
            logger.error("Supabase sign out error: {}", e)
            failure = e
        finally:
            if self._storage is not None:
                self._storage.clear()
            with self._lock:
                self._signing_out = False
                self.loading = False
            self._notify()

        if failure is not None:
            raise NetworkError(f"sign out failed: {failure}") from failure
        logger.info("Sign out completed successfully")

    def update_profile(self, **partial: Any) -> Profile:
        session = self.require_session()
        current = self.profile
        new_username = partial.pop("username", None)
        if new_username is not None and (current is None or new_username != current.username):
            raise ValidationError("Username cannot be changed")
        unknown = set(partial) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown profile fields: {', '.join(sorted(unknown))}")

        fields = {k: v for k, v in partial.items() if v is not None}
        if "twitter" in fields:
            fields["twitter"] = fields["twitter"].replace("@", "")
        if "website" in fields:
            fields["website"] = fields["website"].strip()
        fields["updated_at"] = _now()

        profile = self._profiles.update(session.user_id, fields)
        if profile is None:
            raise NetworkError("profile update returned no row")
        with self._lock:
            self.profile = profile
        self._notify()
        return profile

    def change_password(self, new_password: str, confirm_password: str) -> None:
        self.require_session()
        if new_password != confirm_password:
            raise ValidationError("New passwords do not match")
        if len(new_password or "") < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        try:
            self._client.auth.update_user({"password": new_password})
        except SupabaseAuthError as e:
            raise AuthError(getattr(e, "message", str(e))) from e
        except httpx.HTTPError as e:
            raise NetworkError(f"password update failed: {e}") from e
