import logging

import pytest

from dbpane.core.catalog import list_catalogs, list_columns, list_objects, list_schemas
from dbpane.core.errors import IntrospectionUnavailable, ObjectLookupFailure, UsageError
from dbpane.core.models import ColumnDescriptor, ObjectDescriptor, TableRow
from dbpane.core.selectors import ObjectSelector


def test_catalogs_are_listed_first_and_ignore_name_and_type(fake_connection):
    conn = fake_connection(catalogs=["a", "b"], schemas=["s"])

    found = list_objects(conn, name="orders", type="TABLE")

    assert found == [
        ObjectDescriptor(name="a", type="catalog"),
        ObjectDescriptor(name="b", type="catalog"),
    ]
    assert [c[0] for c in conn.calls] == ["catalogs"]


def test_schemas_listed_when_catalog_pinned(fake_connection):
    conn = fake_connection(catalogs=["a"], schemas=["public", "sales"])

    found = list_objects(conn, catalog="a")

    assert found == [
        ObjectDescriptor(name="public", type="schema"),
        ObjectDescriptor(name="sales", type="schema"),
    ]
    assert ("schemas", "a") in conn.calls


def test_tables_listed_with_lowercased_types(fake_connection, sales_tables):
    conn = fake_connection(schemas=["sales"], tables=sales_tables)

    found = list_objects(conn, schema="sales")

    assert found == [
        ObjectDescriptor(name="orders", type="table"),
        ObjectDescriptor(name="order_summary", type="view"),
        ObjectDescriptor(name="daily_totals", type="materialized view"),
    ]
    assert conn.calls[-1] == ("tables", None, None, "sales", None)


def test_name_and_type_filters_are_forwarded(fake_connection, sales_tables):
    conn = fake_connection(tables=sales_tables)

    found = list_objects(conn, schema="sales", name="orders", type="TABLE")

    assert found == [ObjectDescriptor(name="orders", type="table")]
    assert conn.calls[-1] == ("tables", "orders", None, "sales", "TABLE")


def test_unsupported_catalogs_fall_through_to_schemas(fake_connection):
    conn = fake_connection(
        catalogs=IntrospectionUnavailable("no catalogs"), schemas=["main"]
    )

    assert list_objects(conn) == [ObjectDescriptor(name="main", type="schema")]


def test_failing_probes_fall_through_to_tables(fake_connection, caplog):
    conn = fake_connection(
        catalogs=RuntimeError("driver exploded"),
        schemas=RuntimeError("driver exploded again"),
        tables=[TableRow(table_name="t", table_type="TABLE")],
    )

    with caplog.at_level(logging.WARNING, logger="dbpane.core.catalog"):
        found = list_objects(conn)

    assert found == [ObjectDescriptor(name="t", type="table")]
    assert "treating as unsupported" in caplog.text


def test_table_lookup_failure_yields_empty_list(fake_connection):
    conn = fake_connection(tables=ObjectLookupFailure("boom"))

    assert list_objects(conn, schema="missing") == []


def test_probe_helpers_drop_none_values(fake_connection):
    conn = fake_connection(catalogs=["a", None], schemas=[None, "s"])

    assert list_catalogs(conn) == ["a"]
    assert list_schemas(conn, "a") == ["s"]


@pytest.mark.parametrize("kwargs", [{"catalog": 1}, {"schema": ["a"]}, {"name": 3.0}, {"type": b"TABLE"}])
def test_list_objects_rejects_non_string_filters(fake_connection, kwargs):
    conn = fake_connection()

    with pytest.raises(UsageError):
        list_objects(conn, **kwargs)

    assert conn.calls == []


def test_list_columns_returns_descriptors(fake_connection, order_columns):
    conn = fake_connection(columns=order_columns)

    found = list_columns(conn, ObjectSelector(table="orders"), schema="sales")

    assert found == [
        ColumnDescriptor(name="id", type="integer"),
        ColumnDescriptor(name="amount", type="numeric(10,2)"),
    ]
    assert conn.calls == [("columns", "orders", None, "sales")]


def test_list_columns_accepts_view_like_alias(fake_connection):
    conn = fake_connection(columns={"mv": []})

    list_columns(conn, ObjectSelector(aliases={"materialized view": "mv"}))

    assert conn.calls == [("columns", "mv", None, None)]


@pytest.mark.parametrize(
    "selector",
    [
        ObjectSelector(),
        ObjectSelector(table="a", view="b"),
        ObjectSelector(view="b", aliases={"materialized view": "c"}),
    ],
)
def test_list_columns_rejects_non_exclusive_selector_before_io(fake_connection, selector):
    conn = fake_connection()

    with pytest.raises(UsageError, match="Exclusive selector"):
        list_columns(conn, selector)

    assert conn.calls == []


def test_list_columns_lookup_failure_yields_empty_list(fake_connection):
    conn = fake_connection(columns={"orders": ObjectLookupFailure("gone")})

    assert list_columns(conn, ObjectSelector(table="orders")) == []
