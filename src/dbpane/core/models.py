"""Core domain models for connection metadata.

These models describe what a connection exposes (capabilities, object types,
objects, columns, preview results) in a simple, immutable form. They are
intentionally free of driver types and UI/CLI concerns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

VIEW_ICON = "connections/objects/view.png"


class Data:
    """Leaf marker: the object type holds rows, not sub-objects."""

    _instance: Data | None = None

    def __new__(cls) -> Data:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DATA"


DATA = Data()


@dataclass(frozen=True)
class ObjectTypeNode:
    """
    One object type in the connection hierarchy.

    Attributes:
        name: Object type name (also its key in the parent mapping).
        contains: Either `DATA` for leaves or a `Children` mapping.
        icon: Optional icon hint path for the UI.
    """

    name: str
    contains: Data | Children = DATA
    icon: str | None = None

    @property
    def is_leaf(self) -> bool:
        return isinstance(self.contains, Data)

    def to_dict(self) -> dict[str, Any]:
        """Render as a host-neutral nested dict (`{"contains": "data", ...}`)."""
        if isinstance(self.contains, Data):
            out: dict[str, Any] = {"contains": "data"}
        else:
            out = {"contains": self.contains.to_dict()}
        if self.icon:
            out["icon"] = self.icon
        return out


@dataclass(frozen=True)
class Children(Mapping[str, ObjectTypeNode]):
    """Mapping of child object-type name to node."""

    nodes: dict[str, ObjectTypeNode] = field(default_factory=dict)

    @classmethod
    def of(cls, *nodes: ObjectTypeNode) -> Children:
        """Build a mapping keyed by each node's name, preserving order."""
        return cls({node.name: node for node in nodes})

    def __getitem__(self, key: str) -> ObjectTypeNode:
        return self.nodes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def leaves(self) -> list[ObjectTypeNode]:
        """Return every leaf node, depth first."""
        found: list[ObjectTypeNode] = []
        for node in self.nodes.values():
            if isinstance(node.contains, Children):
                found.extend(node.contains.leaves())
            else:
                found.append(node)
        return found

    def to_dict(self) -> dict[str, Any]:
        return {name: node.to_dict() for name, node in self.nodes.items()}


@dataclass(frozen=True)
class ConnectionInfo:
    """Raw attributes reported by an opened connection."""

    dbms_name: str
    supports_schema: bool = False
    supports_catalogs: bool = False
    username: str | None = None
    dbname: str | None = None
    servername: str | None = None
    sourcename: str | None = None


@dataclass(frozen=True)
class ConnectionCapabilities:
    """
    What a backend exposes, as probed from a live connection.

    Attributes:
        table_types: Raw type labels (e.g. "TABLE", "VIEW", "MATERIALIZED VIEW").
        supports_schema: Whether the backend has a schema concept.
        supports_catalog: Whether the backend has a catalog concept.
        product_name: Backend identifier used for dialect dispatch.
        username: Connected user, if known.
        database_name: Database name, if known.
        server_name: Server/host name, if known.
        source_name: Configured data source name (DSN/profile), if any.
    """

    table_types: tuple[str, ...] = ()
    supports_schema: bool = False
    supports_catalog: bool = False
    product_name: str = ""
    username: str | None = None
    database_name: str | None = None
    server_name: str | None = None
    source_name: str | None = None


@dataclass(frozen=True)
class ObjectDescriptor:
    """One concrete catalog, schema, table or view."""

    name: str
    type: str


@dataclass(frozen=True)
class ColumnDescriptor:
    """One column (field) of a table or view."""

    name: str
    type: str


@dataclass(frozen=True)
class PreviewRequest:
    """A resolved preview: the qualified object reference and its row cap."""

    qualified_name: str
    row_limit: int


@dataclass(frozen=True)
class TableRow:
    """Table/view row as reported by a connection's table lookup."""

    table_name: str
    table_type: str
    table_schema: str | None = None
    table_catalog: str | None = None


@dataclass(frozen=True)
class ColumnRow:
    """Column row as reported by a connection's column lookup."""

    name: str
    type: str


@dataclass(frozen=True)
class QueryResult:
    """Tabular result of a preview query."""

    columns: tuple[str, ...] = ()
    rows: tuple[tuple[Any, ...], ...] = ()

    def __len__(self) -> int:
        return len(self.rows)

    def records(self) -> list[dict[str, Any]]:
        """Return rows as dicts keyed by column name."""
        return [dict(zip(self.columns, row)) for row in self.rows]
