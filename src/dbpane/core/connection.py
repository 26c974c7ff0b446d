"""Connection contract and capability probing.

The core never talks to a driver directly. Everything it needs from an opened
connection goes through the `Connection` protocol below; concrete adapters
live in `dbpane.core.adapters`.
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from dbpane.core.models import (
    ColumnRow,
    ConnectionCapabilities,
    ConnectionInfo,
    QueryResult,
    TableRow,
)

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """Interface for introspection and preview calls on an opened connection."""

    def info(self) -> ConnectionInfo:
        """Return the raw connection attributes."""
        ...

    def table_types(self) -> Sequence[str]:
        """Return the table-type labels the backend reports."""
        ...

    def catalogs(self) -> Sequence[str]:
        """Return catalog names (raise IntrospectionUnavailable if unsupported)."""
        ...

    def schemas(self, catalog: str | None = None) -> Sequence[str]:
        """Return schema names, optionally scoped to a catalog."""
        ...

    def tables(
        self,
        name: str | None = None,
        catalog: str | None = None,
        schema: str | None = None,
        table_type: str | None = None,
    ) -> Sequence[TableRow]:
        """Return tables/views matching the filters."""
        ...

    def columns(
        self,
        name: str,
        catalog: str | None = None,
        schema: str | None = None,
    ) -> Sequence[ColumnRow]:
        """Return the columns of one object."""
        ...

    def execute_query(self, sql: str, row_limit: int) -> QueryResult:
        """Run a query and return at most `row_limit` rows."""
        ...

    def quote_identifier(self, value: str) -> str:
        """Quote an identifier according to the backend's rules."""
        ...

    def disconnect(self) -> None:
        """Close the underlying connection."""
        ...


def probe_capabilities(connection: Connection) -> ConnectionCapabilities:
    """
    Read table types and connection attributes into `ConnectionCapabilities`.

    Args:
        connection: Opened connection to probe.

    Returns:
        A fresh capabilities snapshot (nothing is cached).
    """
    info = connection.info()
    table_types = tuple(t for t in connection.table_types() if t)
    logger.debug(
        "Probed %s: schema=%s catalog=%s table_types=%s",
        info.dbms_name,
        info.supports_schema,
        info.supports_catalogs,
        table_types,
    )
    return ConnectionCapabilities(
        table_types=table_types,
        supports_schema=bool(info.supports_schema),
        supports_catalog=bool(info.supports_catalogs),
        product_name=info.dbms_name or "",
        username=info.username,
        database_name=info.dbname,
        server_name=info.servername,
        source_name=info.sourcename,
    )
