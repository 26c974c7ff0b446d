from types import SimpleNamespace

import pytest
from databricks.sdk.errors import NotFound, PermissionDenied
from databricks.sdk.service.catalog import TableType
from databricks.sdk.service.sql import StatementState

from dbpane.core.adapters.unitycatalog import UnityCatalogConnection
from dbpane.core.catalog import list_columns, list_objects
from dbpane.core.connection import probe_capabilities
from dbpane.core.errors import (
    CollaboratorFailure,
    IntrospectionUnavailable,
    ObjectLookupFailure,
    UsageError,
)
from dbpane.core.hierarchy import list_object_types
from dbpane.core.identity import display_name, host_key
from dbpane.core.models import VIEW_ICON, ObjectDescriptor
from dbpane.core.preview import preview_object
from dbpane.core.selectors import ObjectSelector


class _Tables:
    def __init__(self):
        self.listed: list[tuple[str, str]] = []

    def list(self, catalog_name: str, schema_name: str):
        self.listed.append((catalog_name, schema_name))
        if schema_name == "secret":
            raise PermissionDenied("no access")
        return [
            SimpleNamespace(
                name="orders",
                table_type=TableType.MANAGED,
                catalog_name=catalog_name,
                schema_name=schema_name,
            ),
            SimpleNamespace(
                name="order_summary",
                table_type=TableType.VIEW,
                catalog_name=catalog_name,
                schema_name=schema_name,
            ),
            SimpleNamespace(
                name="raw_events",
                table_type=TableType.EXTERNAL,
                catalog_name=catalog_name,
                schema_name=schema_name,
            ),
        ]

    def get(self, full_name: str):
        if full_name != "main.sales.orders":
            raise NotFound(f"{full_name} does not exist")
        return SimpleNamespace(
            columns=[
                SimpleNamespace(name="id", type_text="bigint"),
                SimpleNamespace(name="amount", type_text="decimal(10,2)"),
            ]
        )


class _Statements:
    def __init__(self, state=StatementState.SUCCEEDED):
        self.state = state
        self.calls: list[dict] = []

    def execute_statement(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(
            status=SimpleNamespace(
                state=self.state, error=SimpleNamespace(message="warehouse stopped")
            ),
            manifest=SimpleNamespace(
                schema=SimpleNamespace(columns=[SimpleNamespace(name="id")])
            ),
            result=SimpleNamespace(data_array=[["1"], ["2"], ["3"]]),
        )


def _client(statements=None):
    return SimpleNamespace(
        config=SimpleNamespace(host="https://adb-123.azuredatabricks.net/"),
        current_user=SimpleNamespace(me=lambda: SimpleNamespace(user_name="me@example.com")),
        catalogs=SimpleNamespace(list=lambda: [SimpleNamespace(name="main"), SimpleNamespace(name="dev")]),
        schemas=SimpleNamespace(
            list=lambda catalog_name: [SimpleNamespace(name="sales"), SimpleNamespace(name="default")]
        ),
        tables=_Tables(),
        statement_execution=statements or _Statements(),
    )


def test_identity_uses_user_host_and_profile():
    caps = probe_capabilities(UnityCatalogConnection(_client(), profile="DEV"))

    assert caps.product_name == "Databricks"
    assert caps.supports_catalog is True and caps.supports_schema is True
    assert host_key(caps) == "me@example.com_adb-123.azuredatabricks.net"
    assert display_name(caps) == "DEV"


def test_display_name_without_profile():
    caps = probe_capabilities(UnityCatalogConnection(_client()))

    assert display_name(caps) == "me@example.com@adb-123.azuredatabricks.net"


def test_hierarchy_nests_catalog_and_schema():
    tree = list_object_types(UnityCatalogConnection(_client()))

    schema_level = tree["catalog"].contains["schema"].contains
    assert "table" in schema_level
    assert schema_level["view"].icon == VIEW_ICON


def test_listing_walks_catalog_schema_tables():
    conn = UnityCatalogConnection(_client())

    assert list_objects(conn)[0] == ObjectDescriptor(name="main", type="catalog")
    assert list_objects(conn, catalog="main")[0] == ObjectDescriptor(name="sales", type="schema")
    assert list_objects(conn, catalog="main", schema="sales") == [
        ObjectDescriptor(name="orders", type="table"),
        ObjectDescriptor(name="order_summary", type="view"),
        ObjectDescriptor(name="raw_events", type="table"),
    ]


def test_listed_object_types_are_hierarchy_leaves():
    conn = UnityCatalogConnection(_client())

    leaves = {leaf.name for leaf in list_object_types(conn).leaves()}
    listed = list_objects(conn, catalog="main", schema="sales")

    assert listed
    assert {obj.type for obj in listed} <= leaves
    assert "managed" not in leaves


def test_table_types_fold_storage_kinds_into_table():
    types = UnityCatalogConnection(_client()).table_types()

    assert types[0] == "TABLE"
    assert "VIEW" in types
    assert all(t == "TABLE" or "VIEW" in t for t in types)
    assert len(types) == len(set(types))


def test_table_type_filter_matches_managed_and_external_tables():
    conn = UnityCatalogConnection(_client())

    rows = conn.tables(catalog="main", schema="sales", table_type="TABLE")

    assert [r.table_name for r in rows] == ["orders", "raw_events"]
    assert {r.table_type for r in rows} == {"TABLE"}


def test_tables_filters_by_type_case_insensitively():
    conn = UnityCatalogConnection(_client())

    rows = conn.tables(catalog="main", schema="sales", table_type="view")

    assert [r.table_name for r in rows] == ["order_summary"]
    assert rows[0].table_catalog == "main"


def test_tables_walks_unset_levels():
    client = _client()

    rows = UnityCatalogConnection(client).tables(name="orders")

    assert len(rows) == 4
    assert ("dev", "default") in client.tables.listed


def test_tables_permission_error_becomes_lookup_failure():
    conn = UnityCatalogConnection(_client())

    with pytest.raises(ObjectLookupFailure):
        conn.tables(catalog="main", schema="secret")
    assert list_objects(conn, catalog="main", schema="secret") == []


def test_schemas_need_a_catalog():
    with pytest.raises(IntrospectionUnavailable):
        UnityCatalogConnection(_client()).schemas()


def test_columns_come_from_table_info():
    conn = UnityCatalogConnection(_client())

    found = list_columns(conn, ObjectSelector(table="orders"), catalog="main", schema="sales")

    assert [(c.name, c.type) for c in found] == [("id", "bigint"), ("amount", "decimal(10,2)")]
    assert list_columns(conn, ObjectSelector(table="gone"), catalog="main", schema="sales") == []
    assert list_columns(conn, ObjectSelector(table="orders")) == []


def test_preview_runs_on_warehouse():
    statements = _Statements()
    conn = UnityCatalogConnection(_client(statements), warehouse_id="wh-1")

    result = preview_object(conn, 2, ObjectSelector(table="orders"), catalog="main", schema="sales")

    assert statements.calls[0]["statement"] == "SELECT * FROM `main`.`sales`.`orders` LIMIT 2"
    assert statements.calls[0]["warehouse_id"] == "wh-1"
    assert result.columns == ("id",)
    assert result.rows == (("1",), ("2",))


def test_preview_without_warehouse_fails_before_any_request():
    requests: list[str] = []
    statements = _Statements()
    client = _client(statements)
    client.current_user = SimpleNamespace(me=lambda: requests.append("me"))
    conn = UnityCatalogConnection(client)

    with pytest.raises(UsageError, match="warehouse"):
        preview_object(conn, 5, ObjectSelector(table="orders"), catalog="main", schema="sales")

    assert requests == []
    assert client.tables.listed == []
    assert statements.calls == []


def test_failed_statement_raises_collaborator_failure():
    conn = UnityCatalogConnection(
        _client(_Statements(state=StatementState.FAILED)), warehouse_id="wh-1"
    )

    with pytest.raises(CollaboratorFailure, match="warehouse stopped"):
        conn.execute_query("SELECT 1", 10)


def test_quote_identifier_escapes_backticks():
    assert UnityCatalogConnection(_client()).quote_identifier("a`b") == "`a``b`"
