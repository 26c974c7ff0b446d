from __future__ import annotations

import logging
from typing import Iterator

from databricks.sdk import WorkspaceClient
from databricks.sdk.errors import NotFound, PermissionDenied
from databricks.sdk.service.catalog import TableType
from databricks.sdk.service.sql import StatementState

from dbpane.core.errors import (
    CollaboratorFailure,
    IntrospectionUnavailable,
    ObjectLookupFailure,
    UsageError,
)
from dbpane.core.models import ColumnRow, ConnectionInfo, QueryResult, TableRow

logger = logging.getLogger(__name__)

TABLE = "TABLE"


def _enum_value(value) -> str | None:
    """Return the string form of an SDK enum (or plain string) value."""
    if value is None:
        return None
    return str(getattr(value, "value", value))


def _table_label(kind: str | None) -> str:
    """Keep view-like types; report every other storage kind as `TABLE`."""
    if kind and "VIEW" in kind.upper():
        return kind
    return TABLE


class UnityCatalogConnection:
    """Adapter exposing Databricks Unity Catalog through the connection contract.

    Metadata comes from the Unity Catalog APIs; previews run on a SQL
    warehouse through the Statement Execution API. Storage kinds such as
    MANAGED, EXTERNAL or STREAMING_TABLE are all reported as `TABLE`;
    view-like kinds keep their own label.
    """

    product_name = "Databricks"
    help_url = "https://docs.databricks.com/en/data-governance/unity-catalog/index.html"

    def __init__(
        self,
        client: WorkspaceClient,
        warehouse_id: str | None = None,
        profile: str | None = None,
        wait_timeout: str = "30s",
    ) -> None:
        self.client = client
        self.warehouse_id = warehouse_id
        self.profile = profile
        self.wait_timeout = wait_timeout
        self._username: str | None = None

    def current_username(self) -> str | None:
        """Return the current principal's user name (looked up once)."""
        if self._username is None:
            me = self.client.current_user.me()
            self._username = getattr(me, "user_name", None) or None
        return self._username

    def _server_name(self) -> str | None:
        host = getattr(getattr(self.client, "config", None), "host", None)
        if not host:
            return None
        return host.split("://", 1)[-1].split("?", 1)[0].rstrip("/")

    def info(self) -> ConnectionInfo:
        return ConnectionInfo(
            dbms_name=self.product_name,
            supports_schema=True,
            supports_catalogs=True,
            username=self.current_username(),
            dbname=None,
            servername=self._server_name(),
            sourcename=self.profile,
        )

    def table_types(self) -> list[str]:
        types = [TABLE]
        for t in TableType:
            label = _table_label(t.value)
            if label not in types:
                types.append(label)
        return types

    def catalogs(self) -> list[str]:
        try:
            return [c.name for c in self.client.catalogs.list() if getattr(c, "name", None)]
        except (NotFound, PermissionDenied) as exc:
            raise IntrospectionUnavailable(f"Cannot list catalogs: {exc}") from exc

    def schemas(self, catalog: str | None = None) -> list[str]:
        if catalog is None:
            raise IntrospectionUnavailable("Unity Catalog schemas are listed per catalog.")
        try:
            return [
                s.name
                for s in self.client.schemas.list(catalog_name=catalog)
                if getattr(s, "name", None)
            ]
        except (NotFound, PermissionDenied) as exc:
            raise IntrospectionUnavailable(
                f"Cannot list schemas in catalog '{catalog}': {exc}"
            ) from exc

    def _scopes(
        self, catalog: str | None, schema: str | None
    ) -> Iterator[tuple[str, str]]:
        """Yield (catalog, schema) pairs to scan, walking unset levels."""
        catalogs = [catalog] if catalog is not None else self.catalogs()
        for c in catalogs:
            schemas = [schema] if schema is not None else self.schemas(c)
            for s in schemas:
                yield c, s

    def tables(
        self,
        name: str | None = None,
        catalog: str | None = None,
        schema: str | None = None,
        table_type: str | None = None,
    ) -> list[TableRow]:
        want = table_type.upper() if table_type else None
        out: list[TableRow] = []
        try:
            for c, s in self._scopes(catalog, schema):
                for t in self.client.tables.list(catalog_name=c, schema_name=s):
                    table_name = getattr(t, "name", None)
                    if not table_name or (name is not None and table_name != name):
                        continue
                    kind = _table_label(_enum_value(getattr(t, "table_type", None)))
                    if want is not None and kind.upper() != want:
                        continue
                    out.append(
                        TableRow(
                            table_name=table_name,
                            table_type=kind,
                            table_schema=getattr(t, "schema_name", None) or s,
                            table_catalog=getattr(t, "catalog_name", None) or c,
                        )
                    )
        except (NotFound, PermissionDenied, IntrospectionUnavailable) as exc:
            raise ObjectLookupFailure(f"Cannot list tables: {exc}") from exc
        return out

    def columns(
        self,
        name: str,
        catalog: str | None = None,
        schema: str | None = None,
    ) -> list[ColumnRow]:
        if catalog is None or schema is None:
            raise ObjectLookupFailure(
                f"Unity Catalog needs catalog and schema to resolve '{name}'."
            )
        full_name = f"{catalog}.{schema}.{name}"
        try:
            info = self.client.tables.get(full_name=full_name)
        except (NotFound, PermissionDenied) as exc:
            raise ObjectLookupFailure(f"Cannot describe '{full_name}': {exc}") from exc

        return [
            ColumnRow(
                name=c.name,
                type=getattr(c, "type_text", None)
                or _enum_value(getattr(c, "type_name", None))
                or "",
            )
            for c in (getattr(info, "columns", None) or [])
        ]

    def execute_query(self, sql: str, row_limit: int) -> QueryResult:
        if not self.warehouse_id:
            raise UsageError("A SQL warehouse id is required to preview Databricks objects.")

        logger.debug("Executing on warehouse %s: %s", self.warehouse_id, sql)
        resp = self.client.statement_execution.execute_statement(
            statement=sql,
            warehouse_id=self.warehouse_id,
            row_limit=row_limit if row_limit > 0 else None,
            wait_timeout=self.wait_timeout,
        )

        status = getattr(resp, "status", None)
        state = getattr(status, "state", None)
        if state != StatementState.SUCCEEDED:
            error = getattr(status, "error", None)
            detail = getattr(error, "message", None) or _enum_value(state) or "no status"
            raise CollaboratorFailure(f"Preview query did not succeed: {detail}")

        manifest_schema = getattr(getattr(resp, "manifest", None), "schema", None)
        columns = tuple(c.name for c in (getattr(manifest_schema, "columns", None) or []))
        data = getattr(getattr(resp, "result", None), "data_array", None) or []
        rows = tuple(tuple(r) for r in data[:row_limit])
        return QueryResult(columns=columns, rows=rows)

    def quote_identifier(self, value: str) -> str:
        return "`" + value.replace("`", "``") + "`"

    def disconnect(self) -> None:
        """Nothing to close: the SDK client keeps no open session."""
        return None
