from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

from dbpane.core.events import clear_observer  # noqa: E402
from dbpane.core.models import (  # noqa: E402
    ColumnRow,
    ConnectionInfo,
    QueryResult,
    TableRow,
)


class FakeConnection:
    """In-memory connection; any probe can be set to an exception to raise it."""

    def __init__(
        self,
        *,
        info: ConnectionInfo | None = None,
        table_types=("TABLE", "VIEW"),
        catalogs=(),
        schemas=(),
        tables=(),
        columns=None,
        result: QueryResult | None = None,
    ):
        self._info = info or ConnectionInfo(dbms_name="PostgreSQL", supports_schema=True)
        self._table_types = table_types
        self._catalogs = catalogs
        self._schemas = schemas
        self._tables = tables
        self._columns = columns or {}
        self._result = result or QueryResult(columns=("id",), rows=((1,), (2,)))
        self.calls: list[tuple] = []
        self.disconnected = False

    @staticmethod
    def _maybe_raise(value):
        if isinstance(value, Exception):
            raise value
        return value

    def info(self) -> ConnectionInfo:
        return self._maybe_raise(self._info)

    def table_types(self):
        return list(self._maybe_raise(self._table_types))

    def catalogs(self):
        self.calls.append(("catalogs",))
        return list(self._maybe_raise(self._catalogs))

    def schemas(self, catalog=None):
        self.calls.append(("schemas", catalog))
        return list(self._maybe_raise(self._schemas))

    def tables(self, name=None, catalog=None, schema=None, table_type=None):
        self.calls.append(("tables", name, catalog, schema, table_type))
        rows = self._maybe_raise(self._tables)
        return [
            r
            for r in rows
            if (name is None or r.table_name == name)
            and (table_type is None or r.table_type == table_type)
        ]

    def columns(self, name, catalog=None, schema=None):
        self.calls.append(("columns", name, catalog, schema))
        found = self._maybe_raise(self._columns.get(name, []))
        return list(found)

    def execute_query(self, sql, row_limit):
        self.calls.append(("execute_query", sql, row_limit))
        result = self._maybe_raise(self._result)
        return QueryResult(columns=result.columns, rows=result.rows[:row_limit])

    def quote_identifier(self, value):
        return '"' + value.replace('"', '""') + '"'

    def disconnect(self):
        self.disconnected = True


@pytest.fixture
def fake_connection():
    """Factory for FakeConnection instances."""
    return FakeConnection


@pytest.fixture
def sales_tables():
    return [
        TableRow(table_name="orders", table_type="TABLE", table_schema="sales"),
        TableRow(table_name="order_summary", table_type="VIEW", table_schema="sales"),
        TableRow(
            table_name="daily_totals",
            table_type="MATERIALIZED VIEW",
            table_schema="sales",
        ),
    ]


@pytest.fixture
def order_columns():
    return {
        "orders": [
            ColumnRow(name="id", type="integer"),
            ColumnRow(name="amount", type="numeric(10,2)"),
        ]
    }


@pytest.fixture(autouse=True)
def _no_registered_observer():
    clear_observer()
    yield
    clear_observer()
