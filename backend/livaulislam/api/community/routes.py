"""Community blueprint."""
from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint

from ...errors import ok
from ...state import community_service, profile_service
from ..articles.schemas import ToggleOut


bp = Blueprint("community", __name__)


@bp.get("")
def overview():
    data = asdict(community_service().overview())
    data["following"] = sorted(data["following"])
    return ok(data)


@bp.post("/follow/<user_id>")
def toggle_follow(user_id: str):
    result = profile_service().toggle_follow(user_id)
    return ok(ToggleOut.model_validate(asdict(result)).model_dump())
