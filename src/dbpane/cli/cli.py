"""CLI application for browsing database connections."""

import typer

from dbpane.cli.commands.database import db_app
from dbpane.cli.commands.unitycatalog import uc_app
from dbpane.cli.common.options import LogLevelOpt
from dbpane.cli.common.output import configure_logging
from dbpane.core.config import Settings
from dbpane.core.errors import UsageError

app = typer.Typer(
    help="dbpane - browse catalogs, schemas, tables and columns of a connection",
    no_args_is_help=True,
)


@app.callback()
def _main(log_level: str | None = LogLevelOpt):
    """Configure logging for every subcommand."""
    try:
        settings = Settings.from_env().with_log_level(log_level)
    except UsageError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc
    configure_logging(settings.log_level_value)


app.add_typer(db_app, name="db")
app.add_typer(uc_app, name="uc")


if __name__ == "__main__":
    app()
