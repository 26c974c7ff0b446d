"""Runtime settings read from the environment.

CLI options take precedence; these values are the fallbacks.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace

from dbpane.core.errors import UsageError

DEFAULT_PREVIEW_ROWS = 100
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _env_str(name: str) -> str | None:
    raw = os.getenv(name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def _env_rows(name: str, default: int) -> int:
    """Return a non-negative int from env, falling back on bad values."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


@dataclass(frozen=True)
class Settings:
    """
    db-pane settings.

    Attributes:
        url: SQLAlchemy URL of the database to open (DBPANE_URL).
        profile: Databricks CLI profile (DBPANE_PROFILE).
        warehouse_id: Databricks SQL warehouse for previews (DBPANE_WAREHOUSE_ID).
        preview_rows: Default preview row limit (DBPANE_PREVIEW_ROWS).
        log_level: Logging level name (DBPANE_LOG_LEVEL).
    """

    url: str | None = None
    profile: str | None = None
    warehouse_id: str | None = None
    preview_rows: int = DEFAULT_PREVIEW_ROWS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> Settings:
        level = (_env_str("DBPANE_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
        return cls(
            url=_env_str("DBPANE_URL"),
            profile=_env_str("DBPANE_PROFILE"),
            warehouse_id=_env_str("DBPANE_WAREHOUSE_ID"),
            preview_rows=_env_rows("DBPANE_PREVIEW_ROWS", DEFAULT_PREVIEW_ROWS),
            log_level=level if level in _LOG_LEVELS else DEFAULT_LOG_LEVEL,
        )

    def with_log_level(self, level: str | None) -> Settings:
        """
        Return a copy with `level` as log level (None keeps the current one).

        Raises:
            UsageError: If `level` is not a known logging level name.
        """
        if level is None:
            return self
        name = level.strip().upper()
        if name not in _LOG_LEVELS:
            raise UsageError(f"Unknown log level '{level}'.")
        return replace(self, log_level=name)

    @property
    def log_level_value(self) -> int:
        if self.log_level not in _LOG_LEVELS:
            return logging.WARNING
        return getattr(logging, self.log_level)
