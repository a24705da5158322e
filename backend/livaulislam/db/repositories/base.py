"""Shared helpers for Supabase-backed repositories."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from postgrest import APIError
from supabase import Client

from ...errors import NetworkError


def quote(value: str) -> str:
    """Quote a value for use inside a PostgREST ``or`` filter."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so ``ilike`` behaves as a case-insensitive equality."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SupabaseRepository:
    """Base repository providing helper methods for Supabase operations."""

    table_name: str = ""

    def __init__(self, client: Client) -> None:
        self.client = client

    @property
    def table(self):
        return self.client.table(self.table_name)

    def _execute(self, query, action: str):
        try:
            return query.execute()
        except APIError as e:
            raise NetworkError(f"{action} failed: {e.message or e}") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"{action} failed: {e}") from e

    def _rows(self, query, action: str) -> List[Dict[str, Any]]:
        res = self._execute(query, action)
        return list(res.data or []) if res is not None else []

    def _first(self, query, action: str) -> Optional[Dict[str, Any]]:
        rows = self._rows(query, action)
        return rows[0] if rows else None

    def _count(self, query, action: str) -> int:
        res = self._execute(query, action)
        return int(res.count or 0) if res is not None else 0

    def _rpc(self, fn: str, params: Dict[str, Any] | None = None):
        res = self._execute(self.client.rpc(fn, params or {}), f"rpc {fn}")
        return res.data if res is not None else None
