"""
Environment-driven settings.

Every value has a default so the API can start with only DATABASE_URL set.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://127.0.0.1:5173")

_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return raw.lower() not in _FALSE_VALUES


def _env_path(name: str) -> Path | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    return Path(raw).expanduser()


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    load_data: bool = True
    # None means "use the sample file bundled with the recipes package".
    data_file: Path | None = None
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"


def settings_from_env() -> Settings:
    """
    - RECIPES_LOAD_DATA: "0"/"false"/"no"/"off" disables the startup load
    - RECIPES_DATA_FILE: path to the JSON document to ingest
    - CORS_ORIGINS: comma-separated list of allowed browser origins
    - LOG_LEVEL: root log level name (default: INFO)
    """
    return Settings(
        load_data=_env_bool("RECIPES_LOAD_DATA", True),
        data_file=_env_path("RECIPES_DATA_FILE"),
        cors_origins=_env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
        log_level=os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
