"""Databricks client construction.

Resolves a profile through the SDK's unified authentication
(~/.databrickscfg or DATABRICKS_* environment variables) and normalizes the
workspace host before the client is built.
"""

from __future__ import annotations

import re

from databricks.sdk import WorkspaceClient
from databricks.sdk.core import Config

from dbpane.core.errors import AuthError


def _format_auth_error(message: str, profile: str | None) -> str:
    """Turn an SDK config error into a message with a re-login hint."""
    if re.search(r"databricks auth login", message):
        cmd = "databricks auth login"
        if profile:
            cmd = f"{cmd} --profile {profile}"
        return (
            "Databricks authentication failed. Your credentials are no longer valid.\n"
            f"Re-authenticate with:\n  $ {cmd}"
        )
    return f"Databricks authentication failed: {message}"


def sanitize_host(host: str | None) -> str | None:
    """Drop query strings (e.g. `?o=123`) and trailing slashes from a host URL."""
    if not host:
        return host
    return host.split("?", 1)[0].rstrip("/")


def get_client(profile: str | None = None) -> WorkspaceClient:
    """
    Return a WorkspaceClient for `profile` (or the default configuration).

    Raises:
        AuthError: If the SDK cannot resolve a usable configuration.
    """
    try:
        cfg = Config(profile=profile) if profile else Config()
    except ValueError as exc:
        raise AuthError(_format_auth_error(str(exc), profile)) from exc
    cfg.host = sanitize_host(cfg.host)
    return WorkspaceClient(config=cfg)
