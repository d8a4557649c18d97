# src/taskmate/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets, nothing required at import time.
- Time zone is explicit: "today", day offsets and hour rows are computed in it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timezone, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

ENV_PREFIX = "TASKMATE"

logger = logging.getLogger(__name__)

load_dotenv(override=False)


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


def _env_int(name: str, default: int, minimum: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


# Where the host zone is looked up when TASKMATE_TIMEZONE is empty.
LOCALTIME_PATH = Path("/etc/localtime")
TIMEZONE_FILE = Path("/etc/timezone")


def _zone(key: str) -> ZoneInfo | None:
    key = key.strip().lstrip(":")
    if "zoneinfo/" in key:
        # TZ=/usr/share/zoneinfo/Europe/Berlin style
        key = key.rsplit("zoneinfo/", 1)[1]
    if not key:
        return None
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None


def host_timezone() -> tzinfo:
    """
    The host's IANA zone, from $TZ, the /etc/localtime symlink or
    /etc/timezone (in that order). Never a fixed offset: an unresolvable
    host gives UTC.
    """
    candidates = [os.getenv("TZ", "")]
    if LOCALTIME_PATH.is_symlink():
        candidates.append(str(LOCALTIME_PATH.resolve()))
    if TIMEZONE_FILE.is_file():
        candidates.append(TIMEZONE_FILE.read_text(encoding="utf-8"))

    for raw in candidates:
        zone = _zone(raw)
        if zone is not None:
            return zone

    logger.warning("Cannot resolve host time zone; using UTC (set %s)", _k("TIMEZONE"))
    return timezone.utc


def resolve_timezone(name: str | None) -> tzinfo:
    """IANA zone by name; empty or unknown -> the host's zone (see host_timezone)."""
    name = (name or "").strip()
    if name:
        zone = _zone(name)
        if zone is not None:
            return zone
        logger.warning("Unknown time zone %r, falling back to host zone", name)
    return host_timezone()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- REST API ----
    host: str
    port: int
    debug: bool
    cors_origin: str

    # ---- Client ----
    api_base_url: str
    request_timeout_seconds: float
    timezone: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path

    @property
    def tz(self) -> tzinfo:
        return resolve_timezone(self.timezone)

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskmate").strip() or "taskmate"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        host = _env(_k("HOST"), "127.0.0.1").strip() or "127.0.0.1"
        port = _env_int(_k("PORT"), 5000, minimum=1)
        debug = _env_bool(_k("DEBUG"), False)
        cors_origin = _env(_k("CORS_ORIGIN"), "*").strip() or "*"

        # Default the client at our own server.
        api_base_url = _env(_k("API_BASE_URL"), f"http://{host}:{port}/api").strip()
        request_timeout_seconds = _env_float(_k("REQUEST_TIMEOUT_SECONDS"), 10.0)
        tz_name = _env(_k("TIMEZONE"), "").strip()

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskmate"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            host=host,
            port=port,
            debug=debug,
            cors_origin=cors_origin,
            api_base_url=api_base_url,
            request_timeout_seconds=request_timeout_seconds,
            timezone=tz_name,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
