"""Object preview.

Resolves a qualified object reference, asks the dialect registry for a
row-limited SELECT and hands it to the connection. Row capping during fetch
is the connection's job.
"""

from __future__ import annotations

import logging

from dbpane.core.connection import Connection
from dbpane.core.dialects import preview_query, validate_row_limit
from dbpane.core.models import PreviewRequest, QueryResult
from dbpane.core.selectors import ObjectSelector, check_optional_string

logger = logging.getLogger(__name__)


def qualified_name(
    connection: Connection,
    name: str,
    catalog: str | None = None,
    schema: str | None = None,
) -> str:
    """
    Prefix `name` with quoted schema and catalog segments when given.

    The object name itself is quoted only when a schema is present.
    """
    if schema is not None:
        name = (
            f"{connection.quote_identifier(schema)}.{connection.quote_identifier(name)}"
        )
    if catalog is not None:
        name = f"{connection.quote_identifier(catalog)}.{name}"
    return name


def _product_name(connection: Connection) -> str:
    # `product_name` is local; info() may query the backend
    product = getattr(connection, "product_name", None)
    if product:
        return product
    return connection.info().dbms_name


def build_preview(
    connection: Connection,
    row_limit,
    selector: ObjectSelector,
    catalog: str | None = None,
    schema: str | None = None,
) -> PreviewRequest:
    """Validate inputs and resolve the preview target (no query is run)."""
    limit = validate_row_limit(row_limit)
    check_optional_string(catalog, "catalog")
    check_optional_string(schema, "schema")
    name = selector.name
    return PreviewRequest(
        qualified_name=qualified_name(connection, name, catalog, schema),
        row_limit=limit,
    )


def preview_object(
    connection: Connection,
    row_limit,
    selector: ObjectSelector,
    catalog: str | None = None,
    schema: str | None = None,
) -> QueryResult:
    """
    Return at most `row_limit` rows of the selected object.

    Raises:
        UsageError: For a bad row limit or selector (before any I/O).
    """
    request = build_preview(connection, row_limit, selector, catalog, schema)
    sql = preview_query(
        _product_name(connection), request.qualified_name, request.row_limit
    )
    logger.debug("Preview query: %s", sql)
    return connection.execute_query(sql, request.row_limit)
