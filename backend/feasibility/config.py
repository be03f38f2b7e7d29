"""Process-level settings for the HTTP surface.

The engines never read these: every engine result is a function of its
explicit arguments only.  Values come from the environment (optionally
a ``.env`` file loaded by ``main.py``).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """Snapshot of the environment taken at startup."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=list)
    default_advisory_fee: float = 0.0


def load_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings(
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        debug=_env_bool("DEBUG"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=_env_list(
            "CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000",
        ),
        default_advisory_fee=float(os.getenv("DEFAULT_ADVISORY_FEE", "0")),
    )


@lru_cache
def get_settings() -> Settings:
    """Cached settings; FastAPI dependency (overridable in tests)."""
    return load_settings()
