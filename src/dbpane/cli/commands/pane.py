"""Connection-pane commands shared by every backend sub-app."""

from __future__ import annotations

from contextlib import contextmanager

import typer

from dbpane.cli.common.context import PaneAppContext
from dbpane.cli.common.exits import USAGE_EXIT_CODE, exit_from_exc, warn_exit
from dbpane.cli.common.options import (
    AliasOpt,
    CatalogOpt,
    RowsOpt,
    SchemaOpt,
    TableOpt,
    ViewOpt,
)
from dbpane.cli.common.output import out
from dbpane.cli.common.selector_builder import build_object_selector
from dbpane.cli.observer import ConsoleObserver
from dbpane.cli.tui import browse
from dbpane.core.catalog import list_columns, list_objects
from dbpane.core.connection import probe_capabilities
from dbpane.core.errors import UsageError
from dbpane.core.events import ConnectionEvents, bind_callbacks, starter_sql
from dbpane.core.hierarchy import build_hierarchy
from dbpane.core.identity import display_name, host_key
from dbpane.core.preview import preview_object
from dbpane.core.selectors import ObjectSelector


@contextmanager
def _exit_on_error(action: str):
    """Turn usage errors into exit code 2 and any other failure into exit code 1."""
    try:
        yield
    except (typer.Exit, typer.Abort):
        raise
    except UsageError as exc:
        exit_from_exc(exc, message=str(exc), code=USAGE_EXIT_CODE)
    except Exception as exc:  # noqa: BLE001
        exit_from_exc(exc, message=f"{action} failed: {exc}", code=1)


def _selector_or_exit(
    table: str | None, view: str | None, aliases: list[str]
) -> ObjectSelector:
    with _exit_on_error("Object selection"):
        return build_object_selector(table=table, view=view, aliases=aliases)


def info(ctx: typer.Context):
    """Show the connection identity and what the backend supports."""
    appctx: PaneAppContext = ctx.obj
    with _exit_on_error("Probe"), out.status("Probing connection..."):
        caps = probe_capabilities(appctx.connection)

    out.header("Connection")
    out.kv(
        {
            "Type": caps.product_name,
            "Display name": display_name(caps) or "-",
            "Host key": host_key(caps) or "-",
            "Catalogs": "yes" if caps.supports_catalog else "no",
            "Schemas": "yes" if caps.supports_schema else "no",
            "Table types": ", ".join(caps.table_types) or "-",
        }
    )


def types_cmd(ctx: typer.Context):
    """Show the object-type hierarchy."""
    appctx: PaneAppContext = ctx.obj
    with _exit_on_error("Probe"), out.status("Probing connection..."):
        tree = build_hierarchy(probe_capabilities(appctx.connection))
    out.hierarchy_tree(tree)


def objects(
    ctx: typer.Context,
    catalog: str | None = CatalogOpt,
    schema: str | None = SchemaOpt,
    name: str | None = typer.Option(None, "--name", help="Exact object name"),
    type_: str | None = typer.Option(
        None, "--type", help="Backend table type (e.g. TABLE, VIEW)"
    ),
):
    """List catalogs, schemas, or tables/views under the given filters."""
    appctx: PaneAppContext = ctx.obj
    with _exit_on_error("Listing"), out.status("Loading objects..."):
        found = list_objects(
            appctx.connection, catalog=catalog, schema=schema, name=name, type=type_
        )

    if not found:
        warn_exit("No objects found.")

    out.objects_table(found, title="Objects")


def columns(
    ctx: typer.Context,
    table: str | None = TableOpt,
    view: str | None = ViewOpt,
    alias: list[str] = AliasOpt,
    catalog: str | None = CatalogOpt,
    schema: str | None = SchemaOpt,
):
    """List the columns of one table or view."""
    appctx: PaneAppContext = ctx.obj
    selector = _selector_or_exit(table, view, alias)

    with _exit_on_error("Listing"), out.status("Loading columns..."):
        found = list_columns(appctx.connection, selector, catalog=catalog, schema=schema)

    if not found:
        warn_exit("No columns found.")

    out.columns_table(found, title=selector.name)


def preview(
    ctx: typer.Context,
    table: str | None = TableOpt,
    view: str | None = ViewOpt,
    alias: list[str] = AliasOpt,
    catalog: str | None = CatalogOpt,
    schema: str | None = SchemaOpt,
    rows: int | None = RowsOpt,
):
    """Show the first rows of one table or view."""
    appctx: PaneAppContext = ctx.obj
    selector = _selector_or_exit(table, view, alias)
    row_limit = appctx.settings.preview_rows if rows is None else rows

    with _exit_on_error("Preview"), out.status("Running preview..."):
        result = preview_object(
            appctx.connection, row_limit, selector, catalog=catalog, schema=schema
        )

    out.result_table(result, title=f"{selector.name} ({len(result)} rows)")


def sql(
    ctx: typer.Context,
    var_name: str = typer.Option("con", "--var", help="Connection variable name"),
):
    """Print a starter SQL document for the connection."""
    appctx: PaneAppContext = ctx.obj
    with _exit_on_error("Table lookup"), out.status("Loading tables..."):
        contents, _ = starter_sql(appctx.connection, var_name)
    out.plain(contents)


def browse_cmd(
    ctx: typer.Context,
    rows: int | None = RowsOpt,
):
    """Browse the hierarchy interactively."""
    appctx: PaneAppContext = ctx.obj
    row_limit = appctx.settings.preview_rows if rows is None else rows
    observer = ConsoleObserver()
    events = ConnectionEvents(observer)

    event = events.opened(appctx.connection, code=appctx.connect_code)
    callbacks = event.callbacks if event else bind_callbacks(appctx.connection)
    actions = dict(event.actions) if event else {}
    try:
        with _exit_on_error("Browse"):
            browse(callbacks, row_limit=row_limit, actions=actions)
    finally:
        events.closed(appctx.connection)


def register_pane_commands(app: typer.Typer) -> None:
    """Attach the shared commands to a backend sub-app."""
    app.command("info")(info)
    app.command("types")(types_cmd)
    app.command("objects")(objects)
    app.command("columns")(columns)
    app.command("preview")(preview)
    app.command("sql")(sql)
    app.command("browse")(browse_cmd)
