from __future__ import annotations

import logging

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine, Inspector
from sqlalchemy.exc import SQLAlchemyError

from dbpane.core.errors import IntrospectionUnavailable, ObjectLookupFailure
from dbpane.core.models import ColumnRow, ConnectionInfo, QueryResult, TableRow

logger = logging.getLogger(__name__)

# SQLAlchemy dialect name -> product name used for dialect dispatch
_PRODUCT_NAMES = {
    "mssql": "Microsoft SQL Server",
    "oracle": "Oracle",
    "postgresql": "PostgreSQL",
    "sqlite": "SQLite",
    "mysql": "MySQL",
    "mariadb": "MariaDB",
    "teradata": "Teradata",
    "teradatasql": "Teradata",
}

TABLE = "TABLE"
VIEW = "VIEW"
MATERIALIZED_VIEW = "MATERIALIZED VIEW"


class SqlAlchemyConnection:
    """Adapter exposing a SQLAlchemy engine through the connection contract.

    SQLAlchemy reflects schemas but has no catalog level, so catalog probes
    report the feature as unavailable.
    """

    help_url = "https://docs.sqlalchemy.org/"

    def __init__(self, engine: Engine, source_name: str | None = None) -> None:
        self.engine = engine
        self.source_name = source_name

    @classmethod
    def from_url(cls, url: str, source_name: str | None = None) -> SqlAlchemyConnection:
        """Create an engine for `url` and wrap it."""
        return cls(create_engine(url), source_name=source_name)

    @property
    def product_name(self) -> str:
        dialect = self.engine.dialect.name
        return _PRODUCT_NAMES.get(dialect, dialect)

    def _inspector(self) -> Inspector:
        # a fresh inspector per call: reflection results are not cached
        return inspect(self.engine)

    def info(self) -> ConnectionInfo:
        url = self.engine.url
        return ConnectionInfo(
            dbms_name=self.product_name,
            supports_schema=True,
            supports_catalogs=False,
            username=url.username,
            dbname=url.database,
            servername=url.host,
            sourcename=self.source_name,
        )

    @staticmethod
    def _materialized_views(inspector: Inspector, schema: str | None) -> list[str] | None:
        """Return materialized view names, or None if the dialect has none."""
        getter = getattr(inspector, "get_materialized_view_names", None)
        if getter is None:
            return None
        try:
            return list(getter(schema=schema))
        except NotImplementedError:
            return None

    def table_types(self) -> list[str]:
        types = [TABLE, VIEW]
        try:
            if self._materialized_views(self._inspector(), None) is not None:
                types.append(MATERIALIZED_VIEW)
        except SQLAlchemyError as exc:
            logger.debug("Materialized view probe failed: %s", exc)
        return types

    def catalogs(self) -> list[str]:
        raise IntrospectionUnavailable(
            f"{self.product_name} connections have no catalog level."
        )

    def schemas(self, catalog: str | None = None) -> list[str]:
        try:
            return list(self._inspector().get_schema_names())
        except SQLAlchemyError as exc:
            raise IntrospectionUnavailable(f"Cannot list schemas: {exc}") from exc

    def tables(
        self,
        name: str | None = None,
        catalog: str | None = None,
        schema: str | None = None,
        table_type: str | None = None,
    ) -> list[TableRow]:
        want = table_type.upper() if table_type else None
        try:
            inspector = self._inspector()
            found: list[tuple[str, str]] = [
                (t, TABLE) for t in inspector.get_table_names(schema=schema)
            ]
            found += [(v, VIEW) for v in inspector.get_view_names(schema=schema)]
            found += [
                (m, MATERIALIZED_VIEW)
                for m in self._materialized_views(inspector, schema) or []
            ]
            schema_name = schema if schema is not None else inspector.default_schema_name
        except SQLAlchemyError as exc:
            raise ObjectLookupFailure(f"Cannot list tables: {exc}") from exc

        return [
            TableRow(table_name=obj, table_type=kind, table_schema=schema_name)
            for obj, kind in found
            if (name is None or obj == name) and (want is None or kind == want)
        ]

    def columns(
        self,
        name: str,
        catalog: str | None = None,
        schema: str | None = None,
    ) -> list[ColumnRow]:
        try:
            fields = self._inspector().get_columns(name, schema=schema)
        except SQLAlchemyError as exc:
            raise ObjectLookupFailure(f"Cannot list columns of {name}: {exc}") from exc
        return [ColumnRow(name=f["name"], type=str(f["type"])) for f in fields]

    def execute_query(self, sql: str, row_limit: int) -> QueryResult:
        with self.engine.connect() as conn:
            result = conn.execute(text(sql))
            columns = tuple(result.keys())
            rows = result.fetchmany(row_limit) if row_limit > 0 else []
        return QueryResult(columns=columns, rows=tuple(tuple(r) for r in rows))

    def quote_identifier(self, value: str) -> str:
        return self.engine.dialect.identifier_preparer.quote_identifier(value)

    def disconnect(self) -> None:
        self.engine.dispose()
