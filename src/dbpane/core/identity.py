"""Stable identity strings for a connection.

The host key deduplicates connections in an observer; the display name labels
them. Both are pure functions of the probed capabilities.
"""

from __future__ import annotations

from typing import Iterable

from dbpane.core.models import ConnectionCapabilities


def _present(values: Iterable[str | None]) -> list[str]:
    return [v for v in values if v]


def host_key(capabilities: ConnectionCapabilities) -> str:
    """Return `user_database_server` with absent parts (and a server equal to the database) left out."""
    server = capabilities.server_name
    if server == capabilities.database_name:
        server = None
    return "_".join(
        _present([capabilities.username, capabilities.database_name, server])
    )


def display_name(capabilities: ConnectionCapabilities) -> str:
    """
    Return the label shown for a connection.

    A configured source name wins. Otherwise the database name, followed by
    `user@server` unless that equals the database name (serverless backends).
    """
    if capabilities.source_name:
        return capabilities.source_name

    name = capabilities.database_name
    server_label = "@".join(_present([capabilities.username, capabilities.server_name]))

    if server_label != name:
        return " - ".join(_present([name, server_label]))
    return name or ""
