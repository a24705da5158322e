"""File-backed storage for the persisted Supabase auth session."""
from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Dict, Optional

from loguru import logger
from supabase_auth import SyncSupportedStorage


class FileSessionStorage(SyncSupportedStorage):
    """Key/value JSON file the auth client reads on startup and writes on every token change."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.is_file():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8")) or {}
        except (OSError, json.JSONDecodeError):
            logger.warning("session file {} unreadable, starting without a session", self.path)
            return {}

    def _write(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(items), encoding="utf-8")

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            items = self._read()
            items[key] = value
            self._write(items)

    def remove_item(self, key: str) -> None:
        with self._lock:
            items = self._read()
            if items.pop(key, None) is not None:
                self._write(items)

    def clear(self) -> None:
        with self._lock:
            if self.path.exists():
                self.path.unlink()
