from __future__ import annotations

import logging

from dbpane.core.connection import Connection
from dbpane.core.errors import IntrospectionUnavailable
from dbpane.core.models import ColumnDescriptor, ObjectDescriptor
from dbpane.core.selectors import ObjectSelector, check_optional_string

logger = logging.getLogger(__name__)


def _probe(what: str, fn, *args) -> list[str]:
    """Run a catalog/schema probe; a failure means "feature absent"."""
    try:
        return [str(v) for v in fn(*args) if v is not None]
    except IntrospectionUnavailable as exc:
        logger.debug("No %s on this connection: %s", what, exc)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Listing %s failed, treating as unsupported: %s", what, exc)
    return []


def list_catalogs(connection: Connection) -> list[str]:
    """Return catalog names, or [] when the backend has none."""
    return _probe("catalogs", connection.catalogs)


def list_schemas(connection: Connection, catalog: str | None = None) -> list[str]:
    """Return schema names (scoped to `catalog` if given), or [] when absent."""
    return _probe("schemas", connection.schemas, catalog)


def list_objects(
    connection: Connection,
    catalog: str | None = None,
    schema: str | None = None,
    name: str | None = None,
    type: str | None = None,
) -> list[ObjectDescriptor]:
    """
    List the objects at the first hierarchy level not pinned by a filter.

    - No catalog and the backend has catalogs: return the catalogs.
    - No schema and the backend has schemas: return the schemas.
    - Otherwise: return tables/views filtered by name/catalog/schema/type.

    `name` and `type` only apply at the table level. Lookup failures degrade
    to an empty list.
    """
    check_optional_string(catalog, "catalog")
    check_optional_string(schema, "schema")
    check_optional_string(name, "name")
    check_optional_string(type, "type")

    if catalog is None:
        catalogs = list_catalogs(connection)
        if catalogs:
            return [ObjectDescriptor(name=c, type="catalog") for c in catalogs]

    if schema is None:
        schemas = list_schemas(connection, catalog)
        if schemas:
            return [ObjectDescriptor(name=s, type="schema") for s in schemas]

    try:
        rows = connection.tables(
            name=name, catalog=catalog, schema=schema, table_type=type
        )
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "Table lookup failed (catalog=%s schema=%s name=%s type=%s): %s",
            catalog,
            schema,
            name,
            type,
            exc,
        )
        return []

    return [
        ObjectDescriptor(name=r.table_name, type=(r.table_type or "").lower())
        for r in rows
    ]


def list_columns(
    connection: Connection,
    selector: ObjectSelector,
    catalog: str | None = None,
    schema: str | None = None,
) -> list[ColumnDescriptor]:
    """
    List the columns of the object picked by `selector`.

    Raises:
        UsageError: If the selector does not name exactly one object, or
            catalog/schema are not strings. Raised before any I/O.
    """
    check_optional_string(catalog, "catalog")
    check_optional_string(schema, "schema")
    name = selector.name

    try:
        rows = connection.columns(name, catalog=catalog, schema=schema)
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "Column lookup failed for %s (catalog=%s schema=%s): %s",
            name,
            catalog,
            schema,
            exc,
        )
        return []

    return [ColumnDescriptor(name=r.name, type=r.type) for r in rows]
