"""
Runtime configuration for File Vault
====================================

Simple settings module that reads from environment variables (only here),
and exposes `load_settings()` for the rest of the codebase.
Avoid reading env vars anywhere else; import from this module instead.

Settings are read when `load_settings()` is called, not at import time, so
tests can monkeypatch the environment and build a fresh app.

Credentials
-----------
- USERS_JSON_PATH  : path to the JSON credential file (required to start)
- FILES_PATH       : default root directory for users without their own

HTTP
----
- HTTP_HOST        : bind host (default "127.0.0.1")
- HTTP_PORT        : bind port (default 8000)

Serving
-------
- FILES_CHUNK_SIZE : bytes per streamed chunk; default 65536, clamped to [1 KiB, 4 MiB]
- FILES_LOG_LEVEL  : root log level name (default "INFO")
"""

import os
from typing import Optional

MIN_CHUNK_SIZE = 1024
MAX_CHUNK_SIZE = 4 * 1024 * 1024


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


def _get_optional(name: str) -> Optional[str]:
    raw = os.getenv(name, "").strip()
    return raw or None


class _Settings:
    def __init__(self) -> None:
        # -------- Credentials --------
        self.USERS_JSON_PATH: Optional[str] = _get_optional("USERS_JSON_PATH")
        self.FILES_PATH: Optional[str] = _get_optional("FILES_PATH")

        # -------- HTTP --------
        self.HTTP_HOST: str = os.getenv("HTTP_HOST", "127.0.0.1").strip()
        self.HTTP_PORT: int = _get_int("HTTP_PORT", 8000)

        # -------- Serving --------
        self.CHUNK_SIZE: int = max(
            MIN_CHUNK_SIZE, min(MAX_CHUNK_SIZE, _get_int("FILES_CHUNK_SIZE", 64 * 1024))
        )
        self.LOG_LEVEL: str = os.getenv("FILES_LOG_LEVEL", "INFO").strip().upper()


def load_settings() -> _Settings:
    """Return a settings object built from the current environment."""
    return _Settings()
