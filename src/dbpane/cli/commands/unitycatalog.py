"""Commands for Databricks Unity Catalog."""

from __future__ import annotations

import typer

from dbpane.cli.commands.pane import register_pane_commands
from dbpane.cli.common.context import build_uc_context
from dbpane.cli.common.options import ProfileOpt, WarehouseOpt

uc_app = typer.Typer(
    help="Browse Databricks Unity Catalog.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@uc_app.callback()
def _init(
    ctx: typer.Context,
    profile: str | None = ProfileOpt,
    warehouse: str | None = WarehouseOpt,
):
    """Initialize Unity Catalog context."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    ctx.obj = build_uc_context(profile, warehouse)


register_pane_commands(uc_app)
