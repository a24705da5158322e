"""Health check endpoints."""
from __future__ import annotations

from flask import Blueprint

from ...errors import ok
from ...integrations.supabase_client import supabase_ext
from ...state import client_state


bp = Blueprint("health", __name__)


@bp.get("/")
def alive():
    return ok({"status": "ok"})


@bp.get("/supabase")
def supabase_status():
    store = client_state().store
    return ok({
        "anon_initialized": supabase_ext.anon is not None,
        "service_initialized": supabase_ext.service is not None,
        "session_loading": store.loading,
        "signed_in": store.is_authenticated,
    })
