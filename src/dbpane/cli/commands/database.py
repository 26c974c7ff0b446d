"""Commands for databases reachable through a SQLAlchemy URL."""

from __future__ import annotations

import typer

from dbpane.cli.commands.pane import register_pane_commands
from dbpane.cli.common.context import build_db_context
from dbpane.cli.common.options import SourceNameOpt, UrlOpt

db_app = typer.Typer(
    help="Browse a database through a SQLAlchemy URL.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@db_app.callback()
def _init(
    ctx: typer.Context,
    url: str | None = UrlOpt,
    source_name: str | None = SourceNameOpt,
):
    """Open the database connection for the subcommand."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    ctx.obj = build_db_context(url, source_name=source_name)
    ctx.call_on_close(ctx.obj.connection.disconnect)


register_pane_commands(db_app)
