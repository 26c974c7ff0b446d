"""Object-type hierarchy construction.

Every backend exposes tables. Anything the backend reports with "view" in its
type label (VIEW, MATERIALIZED VIEW, ...) is added next to tables, then the
map is nested under `schema` and `catalog` when the backend has them.
"""

from __future__ import annotations

from dbpane.core.connection import Connection, probe_capabilities
from dbpane.core.models import (
    DATA,
    VIEW_ICON,
    Children,
    ConnectionCapabilities,
    ObjectTypeNode,
)


def view_like_types(table_types) -> list[str]:
    """Return the lowercased, de-duplicated type labels containing "view"."""
    seen: list[str] = []
    for raw in table_types:
        label = str(raw).lower()
        if "view" in label and label not in seen:
            seen.append(label)
    return seen


def build_hierarchy(capabilities: ConnectionCapabilities) -> Children:
    """
    Build the object-type tree for a backend.

    Args:
        capabilities: Probed connection capabilities.

    Returns:
        A `Children` mapping: `{catalog: ...}`, `{schema: ...}` or the flat
        `{table, view-like...}` map, depending on what the backend supports.
    """
    objects = Children.of(
        ObjectTypeNode(name="table", contains=DATA),
        *(
            ObjectTypeNode(name=label, contains=DATA, icon=VIEW_ICON)
            for label in view_like_types(capabilities.table_types)
        ),
    )

    if capabilities.supports_schema:
        objects = Children.of(ObjectTypeNode(name="schema", contains=objects))

    if capabilities.supports_catalog:
        objects = Children.of(ObjectTypeNode(name="catalog", contains=objects))

    return objects


def list_object_types(connection: Connection) -> Children:
    """Probe a connection and return its object-type tree."""
    return build_hierarchy(probe_capabilities(connection))
