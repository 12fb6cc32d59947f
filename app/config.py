"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _get_date_env(name: str) -> date | None:
    """
    Read an ISO-8601 date; unparsable values are ignored with a warning.
    """

    raw_value = _get_optional_str_env(name)
    if raw_value is None:
        return None
    try:
        return date.fromisoformat(raw_value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an ISO date", name, raw_value)
        return None


@dataclass(frozen=True)
class ReportSettings:
    """
    Runtime parameters of the report battery.

    ``as_of`` replaces the database clock for elapsed-day metrics; ``None``
    means "today" at report time.
    """

    as_of: date | None = None
    top_products_limit: int = 10
    retention_max_order_number: int = 5
    manager_min_team_size: int = 2
    max_workers: int = 1


@dataclass(frozen=True)
class SourceSettings:
    """
    Row source connection settings.
    """

    database_url: str | None = None


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@lru_cache(maxsize=1)
def get_report_settings() -> ReportSettings:
    """
    Return cached report settings from environment variables.
    """

    return ReportSettings(
        as_of=_get_date_env("ANALYTICS_AS_OF_DATE"),
        top_products_limit=max(1, _get_int_env("ANALYTICS_TOP_PRODUCTS_LIMIT", 10)),
        retention_max_order_number=max(1, _get_int_env("ANALYTICS_RETENTION_MAX_ORDER_NUMBER", 5)),
        manager_min_team_size=max(1, _get_int_env("ANALYTICS_MANAGER_MIN_TEAM_SIZE", 2)),
        max_workers=max(1, _get_int_env("ANALYTICS_MAX_WORKERS", 1)),
    )


@lru_cache(maxsize=1)
def get_source_settings() -> SourceSettings:
    """
    Return cached row source settings.
    """

    return SourceSettings(database_url=_get_optional_str_env("ANALYTICS_DATABASE_URL"))


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings(level=_get_str_env("LOG_LEVEL", "INFO").upper())
