"""Profiles blueprint: public profile page, follow toggle, own profile edits."""
from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint, request

from ...errors import NotFoundError, ok
from ...state import client_state, profile_service
from ..articles.schemas import ToggleOut
from .schemas import ProfileOut, ProfilePageOut, ProfileUpdateIn


bp = Blueprint("profiles", __name__)


@bp.patch("/me")
def update_me():
    payload = ProfileUpdateIn.model_validate_json(request.data)
    profile = client_state().store.update_profile(**payload.model_dump(exclude_none=True))
    return ok(ProfileOut.model_validate(asdict(profile)).model_dump())


@bp.get("/<username>")
def get_profile(username: str):
    page = profile_service().get_profile_page(username, request.args.get("tab", "published"))
    if page is None:
        raise NotFoundError("Profile not found")
    return ok(ProfilePageOut.model_validate(asdict(page)).model_dump())


@bp.post("/<username>/follow")
def toggle_follow(username: str):
    result = profile_service().toggle_follow_username(username)
    return ok(ToggleOut.model_validate(asdict(result)).model_dump())
