"""Connection lifecycle notifications for an external observer.

An observer (an IDE connections pane, the CLI browser, ...) is told when a
connection opens, changes or closes. On open it receives callbacks bound to
the connection so it can re-enter the listers and previewer later, in any
order and nested.

The observer is an explicit dependency of `ConnectionEvents`. A process-wide
observer can also be registered; with neither, every notification is a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Protocol

import typer

from dbpane.core.catalog import list_columns, list_objects
from dbpane.core.connection import Connection, probe_capabilities
from dbpane.core.hierarchy import list_object_types
from dbpane.core.identity import display_name, host_key
from dbpane.core.models import Children, ColumnDescriptor, ObjectDescriptor, QueryResult
from dbpane.core.preview import preview_object
from dbpane.core.selectors import parse_object_filters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectionCallbacks:
    """Re-entrant callbacks bound to one connection."""

    disconnect: Callable[[], None]
    list_object_types: Callable[[], Children]
    list_objects: Callable[..., list[ObjectDescriptor]]
    list_columns: Callable[..., list[ColumnDescriptor]]
    preview_object: Callable[..., QueryResult]


@dataclass(frozen=True)
class ConnectionAction:
    """A named action the observer can offer for a connection."""

    callback: Callable[[], Any]
    icon: str = ""


@dataclass(frozen=True)
class ConnectionOpened:
    type: str
    display_name: str
    host: str
    icon: str
    connect_code: str | None
    callbacks: ConnectionCallbacks
    actions: Mapping[str, ConnectionAction] = field(default_factory=dict)
    connection: Any = None


@dataclass(frozen=True)
class ConnectionUpdated:
    type: str
    host: str
    hint: str | None = None


@dataclass(frozen=True)
class ConnectionClosed:
    type: str
    host: str


ObserverEvent = ConnectionOpened | ConnectionUpdated | ConnectionClosed


class ConnectionObserver(Protocol):
    """Interface an observer implements to receive lifecycle events."""

    def connection_opened(self, event: ConnectionOpened) -> None:
        ...

    def connection_updated(self, event: ConnectionUpdated) -> None:
        ...

    def connection_closed(self, event: ConnectionClosed) -> None:
        ...


_observer: ConnectionObserver | None = None


def register_observer(observer: ConnectionObserver | None) -> None:
    """Install the process-wide observer (None removes it)."""
    global _observer
    _observer = observer


def registered_observer() -> ConnectionObserver | None:
    """Return the process-wide observer, if any."""
    return _observer


def clear_observer() -> None:
    """Remove the process-wide observer."""
    register_observer(None)


def bind_callbacks(connection: Connection) -> ConnectionCallbacks:
    """Bind the listers, previewer and disconnect to `connection`."""

    def _list_objects(**filters: Any) -> list[ObjectDescriptor]:
        return list_objects(connection, **filters)

    def _list_columns(**filters: Any) -> list[ColumnDescriptor]:
        selector, catalog, schema = parse_object_filters(filters)
        return list_columns(connection, selector, catalog=catalog, schema=schema)

    def _preview_object(row_limit, **filters: Any) -> QueryResult:
        selector, catalog, schema = parse_object_filters(filters)
        return preview_object(
            connection, row_limit, selector, catalog=catalog, schema=schema
        )

    return ConnectionCallbacks(
        disconnect=connection.disconnect,
        list_object_types=lambda: list_object_types(connection),
        list_objects=_list_objects,
        list_columns=_list_columns,
        preview_object=_preview_object,
    )


def connection_icon(connection: Connection) -> str:
    """Return an icon path for the connection ("" when there is none)."""
    return str(getattr(connection, "icon", "") or "")


def _present(value: str | None) -> bool:
    return value is not None and len(value) > 0


def starter_sql(connection: Connection, var_name: str | None = None) -> tuple[str, int]:
    """
    Build a starter SQL document for a connection.

    Returns:
        (contents, cursor_column). The document selects from the first table
        the connection reports, or `SELECT 1` when there is none.
    """
    header = f"-- !preview conn={var_name or ''}"
    tables = list(connection.tables())
    if not tables:
        return "\n".join([header, "", "SELECT 1", ""]), 6

    first = tables[0]
    name = connection.quote_identifier(first.table_name)
    if _present(first.table_schema):
        name = f"{connection.quote_identifier(first.table_schema)}.{name}"
    if _present(first.table_catalog):
        name = f"{connection.quote_identifier(first.table_catalog)}.{name}"
    return "\n".join([header, "", f"SELECT * FROM {name}", ""]), 14


def connection_actions(
    connection: Connection,
    observer: Any = None,
    var_name: str | None = None,
) -> dict[str, ConnectionAction]:
    """
    Return the actions offered for a connection.

    - `SQL` opens a starter SQL document, when the observer can create
      documents (`document_new`).
    - `Help` opens the connection's help page, when it has one.
    """
    actions: dict[str, ConnectionAction] = {}

    document_new = getattr(observer, "document_new", None)
    if callable(document_new):

        def _new_sql_document() -> Any:
            contents, column = starter_sql(connection, var_name)
            return document_new("sql", contents, row=2, column=column)

        actions["SQL"] = ConnectionAction(callback=_new_sql_document)

    help_url = getattr(connection, "help_url", None)
    if help_url:
        actions["Help"] = ConnectionAction(callback=lambda: typer.launch(help_url))

    return actions


class ConnectionEvents:
    """Emit connection lifecycle events to an observer.

    Emission never raises into the caller's connection lifecycle: failures
    while building an event or inside the observer are logged and dropped.
    """

    def __init__(self, observer: ConnectionObserver | None = None):
        """
        Create an emitter.

        Args:
            observer: Observer to notify. When None, the process-wide
                      observer (if registered) is used at emit time.
        """
        self._observer = observer

    @property
    def observer(self) -> ConnectionObserver | None:
        return self._observer if self._observer is not None else registered_observer()

    def _emit(
        self,
        method: str,
        build: Callable[[ConnectionObserver], ObserverEvent],
    ) -> ObserverEvent | None:
        observer = self.observer
        if observer is None:
            return None
        try:
            event = build(observer)
            getattr(observer, method)(event)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Observer %s failed: %s", method, exc, exc_info=True)
            return None
        return event

    def opened(
        self,
        connection: Connection,
        code: str | None = None,
        var_name: str | None = None,
    ) -> ConnectionOpened | None:
        """Notify that `connection` was opened with `code`."""

        def _build(observer: ConnectionObserver) -> ConnectionOpened:
            capabilities = probe_capabilities(connection)
            logger.info(
                "Connection opened: %s (%s)",
                display_name(capabilities),
                capabilities.product_name,
            )
            return ConnectionOpened(
                type=capabilities.product_name,
                display_name=display_name(capabilities),
                host=host_key(capabilities),
                icon=connection_icon(connection),
                connect_code=code,
                callbacks=bind_callbacks(connection),
                actions=connection_actions(connection, observer, var_name),
                connection=connection,
            )

        return self._emit("connection_opened", _build)

    def updated(
        self, connection: Connection, hint: str | None = None
    ) -> ConnectionUpdated | None:
        """Notify that a schema-changing operation ran on `connection`."""

        def _build(_observer: ConnectionObserver) -> ConnectionUpdated:
            capabilities = probe_capabilities(connection)
            return ConnectionUpdated(
                type=capabilities.product_name,
                host=host_key(capabilities),
                hint=hint,
            )

        return self._emit("connection_updated", _build)

    def closed(self, connection: Connection) -> ConnectionClosed | None:
        """Notify that `connection` was closed."""

        def _build(_observer: ConnectionObserver) -> ConnectionClosed:
            capabilities = probe_capabilities(connection)
            logger.info("Connection closed: %s", host_key(capabilities))
            return ConnectionClosed(
                type=capabilities.product_name, host=host_key(capabilities)
            )

        return self._emit("connection_closed", _build)
