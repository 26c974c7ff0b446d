"""Application context management for the CLI."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from dbpane.cli.common.exits import die
from dbpane.core.adapters.sqlalchemy_engine import SqlAlchemyConnection
from dbpane.core.adapters.unitycatalog import UnityCatalogConnection
from dbpane.core.auth import get_client
from dbpane.core.config import Settings
from dbpane.core.connection import Connection
from dbpane.core.errors import AuthError


@dataclass
class PaneAppContext:
    """Context holding the opened connection and how it was opened."""

    connection: Connection
    connect_code: str
    settings: Settings


def build_db_context(
    url: str | None,
    *,
    source_name: str | None = None,
    settings: Settings | None = None,
) -> PaneAppContext:
    """Open a SQLAlchemy engine for `url` (or DBPANE_URL) and build the context."""
    settings = settings or Settings.from_env()
    url = url or settings.url
    if not url:
        die("Missing database URL. Pass --url or set DBPANE_URL.", code=2)
    try:
        shown = make_url(url).render_as_string(hide_password=True)
        connection = SqlAlchemyConnection.from_url(url, source_name=source_name)
    except (ArgumentError, ValueError) as exc:
        die(f"Invalid database URL: {exc}", code=2)
    except ImportError as exc:
        die(f"Database driver is not installed: {exc}", code=1)
    return PaneAppContext(
        connection=connection,
        connect_code=f"dbpane db --url '{shown}'",
        settings=settings,
    )


def build_uc_context(
    profile: str | None,
    warehouse_id: str | None,
    *,
    settings: Settings | None = None,
) -> PaneAppContext:
    """Build the context for Unity Catalog commands."""
    settings = settings or Settings.from_env()
    profile = profile or settings.profile
    warehouse_id = warehouse_id or settings.warehouse_id
    try:
        client = get_client(profile)
    except AuthError as exc:
        die(str(exc), code=1)
    code = "dbpane uc" + (f" --profile {profile}" if profile else "")
    return PaneAppContext(
        connection=UnityCatalogConnection(
            client, warehouse_id=warehouse_id, profile=profile
        ),
        connect_code=code,
        settings=settings,
    )
