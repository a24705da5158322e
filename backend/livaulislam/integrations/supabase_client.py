"""Supabase client initialization as a Flask extension."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import Flask, current_app
from supabase import Client, ClientOptions, create_client

from ..config import ConfigError
from .session_storage import FileSessionStorage


@dataclass
class _SBClients:
    anon: Optional[Client] = None
    service: Optional[Client] = None
    storage: Optional[FileSessionStorage] = None


class SupabaseExt:
    """Holds one anon client per app (auth + RLS-scoped queries) and an optional service client."""

    def init_app(self, app: Flask, client: Client | None = None) -> None:
        url = app.config.get("SUPABASE_URL")
        anon_key = app.config.get("SUPABASE_ANON_KEY")
        service_key = app.config.get("SUPABASE_SERVICE_ROLE_KEY")

        clients = _SBClients(storage=FileSessionStorage(app.config["SESSION_FILE"]))
        if client is not None:
            clients.anon = client
        elif url and anon_key:
            clients.anon = create_client(url, anon_key, options=ClientOptions(storage=clients.storage))
        else:
            raise ConfigError("Supabase client requires SUPABASE_URL and SUPABASE_ANON_KEY")
        if url and service_key and client is None:
            clients.service = create_client(url, service_key)
        app.extensions["supabase"] = clients

    @staticmethod
    def _clients() -> _SBClients:
        return current_app.extensions["supabase"]

    @property
    def anon(self) -> Client:
        return self._clients().anon

    @property
    def service(self) -> Optional[Client]:
        return self._clients().service


supabase_ext = SupabaseExt()
