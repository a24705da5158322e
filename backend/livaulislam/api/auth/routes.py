"""Auth blueprint: session state, sign up, sign in, sign out and password change."""
from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint, request

from ...errors import ok
from ...state import client_state
from .schemas import PasswordChangeIn, SessionOut, SignInIn, SignUpIn, SignUpOut


bp = Blueprint("auth", __name__)


def _session_payload():
    store = client_state().store
    session, profile = store.session, store.profile
    return SessionOut(
        authenticated=session is not None,
        loading=store.loading,
        user_id=session.user_id if session else None,
        email=session.email if session else None,
        profile=asdict(profile) if profile else None,
    ).model_dump()


@bp.get("/session")
def get_session():
    return ok(_session_payload())


@bp.post("/signup")
def sign_up():
    payload = SignUpIn.model_validate_json(request.data)
    result = client_state().store.sign_up(
        payload.email, payload.password, payload.username, payload.display_name
    )
    out = SignUpOut(
        user_id=result.user_id,
        email=result.email,
        confirmation_required=result.confirmation_required,
    )
    return ok(out.model_dump(), 201)


@bp.post("/signin")
def sign_in():
    payload = SignInIn.model_validate_json(request.data)
    client_state().store.sign_in(payload.identifier, payload.password)
    return ok(_session_payload())


@bp.post("/signout")
def sign_out():
    client_state().store.sign_out()
    return ok(_session_payload())


@bp.post("/password")
def change_password():
    payload = PasswordChangeIn.model_validate_json(request.data)
    client_state().store.change_password(payload.new_password, payload.confirm_password)
    return ok({"updated": True})
