"""
Test suite for sql/ddl.py and sql/datatypes.py.

Tests cover:
- Type alias resolution
- CREATE TABLE rendering: primary keys, auto increment, WITHOUT ROWID,
  NOT NULL / UNIQUE / DEFAULT, unique key groups
- DROP TABLE rendering
"""

import pytest

from core.exceptions import InvalidSchema
from models.schema import validate_schema
from sql.datatypes import DataType, resolve_data_type
from sql.ddl import create_table_definition, drop_table_sql, format_default_value


def build(options, columns):
    return create_table_definition(validate_schema(options, columns))


# ============================================================================
# DATA TYPES
# ============================================================================


@pytest.mark.unit
@pytest.mark.parametrize(
    "alias,expected",
    [
        ("int", DataType.INTEGER),
        ("INTEGER", DataType.INTEGER),
        ("string", DataType.TEXT),
        ("Varchar", DataType.TEXT),
        ("char", DataType.TEXT),
        ("number", DataType.REAL),
        ("numeric", DataType.REAL),
        ("blob", DataType.BLOB),
        ("bool", DataType.BOOLEAN),
        (DataType.REAL, DataType.REAL),
    ],
)
def test_resolve_data_type(alias, expected):
    assert resolve_data_type(alias, "col") is expected


@pytest.mark.unit
@pytest.mark.parametrize("value", ["datetime", None, 3])
def test_resolve_data_type_invalid(value):
    with pytest.raises(InvalidSchema, match="Column col has an invalid type"):
        resolve_data_type(value, "col")


# ============================================================================
# CREATE TABLE
# ============================================================================


@pytest.mark.smoke
def test_auto_increment_table():
    sql = build(
        {"table_name": "test", "primary_keys": "id", "auto_increment": "id"},
        {"id": {"type": DataType.INTEGER}, "name": {"type": "string"}},
    )
    assert sql == "CREATE TABLE `test` (id integer PRIMARY KEY AUTOINCREMENT, name text);"


@pytest.mark.unit
def test_multiple_primary_keys():
    sql = build(
        {"table_name": "test", "primary_keys": ["id", "name"]},
        {"id": {"type": "integer"}, "name": {"type": "text"}},
    )
    assert sql == "CREATE TABLE `test` (id integer, name text, PRIMARY KEY (id, name)) WITHOUT ROWID;"


@pytest.mark.unit
def test_not_null_and_unique():
    sql = build(
        {"table_name": "test", "primary_keys": "id"},
        {"id": {"type": "integer"}, "name": {"type": "text", "not_null": True, "unique": True}},
    )
    assert sql == "CREATE TABLE `test` (id integer, name text NOT NULL UNIQUE, PRIMARY KEY (id)) WITHOUT ROWID;"


@pytest.mark.unit
def test_without_rowid_false_suppresses_clause():
    sql = build(
        {"table_name": "test", "primary_keys": "id", "without_rowid": False},
        {"id": {"type": "integer"}, "is_admin": {"type": "string"}},
    )
    assert sql == "CREATE TABLE `test` (id integer, is_admin text, PRIMARY KEY (id));"


@pytest.mark.unit
def test_unique_key_groups_in_declaration_order():
    sql = build(
        {"table_name": "test", "primary_keys": "id", "unique_keys": [["id", "name"], ["name"]]},
        {"id": {"type": "integer", "primary_key": True}, "name": {"type": "string"}},
    )
    assert sql == (
        "CREATE TABLE `test` (id integer, name text, PRIMARY KEY (id), "
        "UNIQUE (id, name), UNIQUE (name)) WITHOUT ROWID;"
    )


@pytest.mark.unit
@pytest.mark.parametrize(
    "column,rendered",
    [
        ({"type": "string", "default_value": "test"}, "is_admin text DEFAULT 'test'"),
        ({"type": "integer", "default_value": 1}, "is_admin integer DEFAULT 1"),
        ({"type": "integer", "default_value": 0}, "is_admin integer DEFAULT 0"),
        ({"type": "boolean", "default_value": True}, "is_admin boolean DEFAULT true"),
        ({"type": "boolean", "default_value": False}, "is_admin boolean DEFAULT false"),
        ({"type": "real", "default_value": 2.5}, "is_admin real DEFAULT 2.5"),
    ],
)
def test_default_values(column, rendered):
    sql = build({"table_name": "test", "primary_keys": "id"}, {"id": {"type": "integer"}, "is_admin": column})
    assert sql == f"CREATE TABLE `test` (id integer, {rendered}, PRIMARY KEY (id)) WITHOUT ROWID;"


@pytest.mark.edge_case
def test_default_string_quotes_escaped():
    assert format_default_value("it's") == "'it''s'"


@pytest.mark.edge_case
def test_default_bytes():
    assert format_default_value(b"\x01\xff") == "X'01ff'"


@pytest.mark.unit
@pytest.mark.parametrize(
    "options,columns",
    [
        ({"table_name": "t", "primary_keys": "id", "auto_increment": "id"}, {"id": {"type": "int"}}),
        ({"table_name": "t", "primary_keys": "id"}, {"id": {"type": "int"}}),
        ({"table_name": "t", "primary_keys": ["a", "b"]}, {"a": {"type": "int"}, "b": {"type": "text"}}),
        ({"table_name": "t", "primary_keys": "a", "unique_keys": [["a"]]}, {"a": {"type": "int"}}),
    ],
)
def test_exactly_one_primary_key_clause(options, columns):
    """Test every valid schema renders exactly one PRIMARY KEY clause."""
    sql = build(options, columns)
    assert sql.count("PRIMARY KEY") == 1


# ============================================================================
# DROP TABLE
# ============================================================================


@pytest.mark.unit
def test_drop_table_sql():
    assert drop_table_sql("test") == "DROP TABLE `test`;"
    assert drop_table_sql("test", if_exists=True) == "DROP TABLE IF EXISTS `test`;"
