"""Application configuration objects."""
from __future__ import annotations

import os
from dataclasses import dataclass


class ConfigError(RuntimeError):
    """Raised at startup when required configuration is missing."""


@dataclass
class BaseConfig:
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me")

    # Supabase
    SUPABASE_URL: str | None = os.getenv("SUPABASE_URL") or None
    SUPABASE_ANON_KEY: str | None = os.getenv("SUPABASE_ANON_KEY") or None
    SUPABASE_SERVICE_ROLE_KEY: str | None = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or None

    # Persisted auth session (survives restarts, cleared on sign-out)
    SESSION_FILE: str = os.getenv("SESSION_FILE", ".livaulislam/session.json")

    # HTTP
    FRONTEND_ORIGIN: str = os.getenv("FRONTEND_ORIGIN", "http://localhost:5173")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Writing studio
    WORDS_PER_MINUTE: int = int(os.getenv("WORDS_PER_MINUTE", 200))
    MAX_TAGS: int = int(os.getenv("MAX_TAGS", 5))

    def validate(self) -> None:
        missing = [
            name for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")
