# src/todays_focus/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Components receive settings by injection; get_settings() is only used by the
  entry point.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "FOCUS"

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_weekday(name: str, default: int) -> int:
    """Accept 0-6 (Monday=0) or a weekday name."""
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw in WEEKDAYS:
        return WEEKDAYS.index(raw)
    try:
        n = int(raw)
    except ValueError:
        return default
    return n if 0 <= n <= 6 else default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    storage_key: str

    # ---- Reminders ----
    nag_delay_minutes: int
    notify_interval_seconds: float

    # ---- Display defaults ----
    first_weekday: int
    show_completed: bool
    default_category: str
    default_priority: str

    # ---- Connector flags ----
    console_enabled: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "todays-focus")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/focus"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "focus.sqlite3")
        storage_key = _env(_k("STORAGE_KEY"), "todos").strip() or "todos"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            db_path=db_path,
            storage_key=storage_key,
            nag_delay_minutes=max(0, _env_int(_k("NAG_DELAY_MINUTES"), 10)),
            notify_interval_seconds=max(0.5, _env_float(_k("NOTIFY_INTERVAL_SECONDS"), 5.0)),
            first_weekday=_env_weekday(_k("FIRST_WEEKDAY"), 0),
            show_completed=_env_bool(_k("SHOW_COMPLETED"), True),
            default_category=_env(_k("DEFAULT_CATEGORY"), "Yours"),
            default_priority=_env(_k("DEFAULT_PRIORITY"), "Medium"),
            console_enabled=_env_bool(_k("CONSOLE_ENABLED"), True),
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Process-wide settings, read once (loads a local .env first if present)."""
    global _SETTINGS
    if _SETTINGS is None:
        load_dotenv(override=False)
        _SETTINGS = Settings.from_env()
    return _SETTINGS
