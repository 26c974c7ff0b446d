"""Console observer: reports connection lifecycle events in the terminal."""

from __future__ import annotations

from dbpane.cli.common.output import out
from dbpane.core.events import ConnectionClosed, ConnectionOpened, ConnectionUpdated


class ConsoleObserver:
    """Observer that prints events and keeps the last opened connection's callbacks."""

    def __init__(self) -> None:
        self.opened: ConnectionOpened | None = None
        self.documents: list[str] = []

    def connection_opened(self, event: ConnectionOpened) -> None:
        self.opened = event
        out.success(f"Connected: {event.display_name or event.host or event.type}")
        out.kv({"Type": event.type, "Host": event.host or "-"})

    def connection_updated(self, event: ConnectionUpdated) -> None:
        out.info(f"Connection updated: {event.host} ({event.hint or 'no hint'})")

    def connection_closed(self, event: ConnectionClosed) -> None:
        if self.opened is not None and self.opened.host == event.host:
            self.opened = None
        out.info(f"Disconnected: {event.host or event.type}")

    def document_new(self, doc_type: str, contents: str, row: int = 0, column: int = 0) -> None:
        """Show a new document instead of opening an editor."""
        self.documents.append(contents)
        out.header(f"New {doc_type.upper()} document")
        out.plain(contents)
