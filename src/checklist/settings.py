from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List

DEFAULT_ITEM_NAME = "my first todo (https://www.google.com)"


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'memory' (default) or 'sqlite'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/checklist.db'
    - STORAGE_KEY: key the serialized list is stored under. Default 'todos'
    - DEFAULT_ITEM_NAME: name of the seed item used when nothing is stored yet
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - APP_ENV: 'development' (default, console logs) or 'production' (JSON logs)
    - LOG_LEVEL: standard level name, 'INFO' by default
    """

    persistence_backend: str = "memory"
    sqlite_db_path: str = "./data/checklist.db"
    storage_key: str = "todos"
    default_item_name: str = DEFAULT_ITEM_NAME
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    app_env: str = "development"
    log_level: str = "INFO"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def _parse_level(value: str) -> str:
    level = value.strip().upper()
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        return "INFO"
    return level


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "memory").strip().lower()
    if backend not in {"memory", "sqlite"}:
        # Fallback to memory if unsupported
        backend = "memory"

    app_env = _get_env("APP_ENV", "development").strip().lower()
    if app_env not in {"development", "production"}:
        app_env = "development"

    return Settings(
        persistence_backend=backend,
        sqlite_db_path=_get_env("SQLITE_DB_PATH", "./data/checklist.db").strip(),
        storage_key=_get_env("STORAGE_KEY", "todos").strip(),
        default_item_name=_get_env("DEFAULT_ITEM_NAME", DEFAULT_ITEM_NAME),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        app_env=app_env,
        log_level=_parse_level(_get_env("LOG_LEVEL", "INFO")),
    )
