"""Common CLI options."""

import typer

LogLevelOpt = typer.Option(
    None,
    "--log-level",
    help="Logging level (DEBUG, INFO, WARNING, ERROR; default: DBPANE_LOG_LEVEL or WARNING)",
)

UrlOpt = typer.Option(
    None,
    "--url",
    "-u",
    envvar="DBPANE_URL",
    help="SQLAlchemy database URL (e.g. sqlite:///app.db)",
)

SourceNameOpt = typer.Option(
    None,
    "--source-name",
    help="Display name for the connection (like an ODBC DSN)",
)

ProfileOpt = typer.Option(
    None,
    "--profile",
    "-p",
    envvar="DBPANE_PROFILE",
    help="Databricks CLI profile (from ~/.databrickscfg)",
)

WarehouseOpt = typer.Option(
    None,
    "--warehouse",
    "-w",
    envvar="DBPANE_WAREHOUSE_ID",
    help="Databricks SQL warehouse id used for previews",
)

CatalogOpt = typer.Option(None, "--catalog", help="Catalog name")

SchemaOpt = typer.Option(None, "--schema", help="Schema name")

TableOpt = typer.Option(None, "--table", help="Table name")

ViewOpt = typer.Option(None, "--view", help="View name")

AliasOpt = typer.Option(
    [],
    "--alias",
    help="View-like object as type=name (e.g. 'materialized view=mv_sales'). Reusable.",
    show_default=False,
)

RowsOpt = typer.Option(
    None,
    "--rows",
    "-n",
    help="Maximum number of rows to preview (default: DBPANE_PREVIEW_ROWS or 100)",
)
