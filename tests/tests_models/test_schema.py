"""
Test suite for models/schema.py.

Tests cover:
- Validation order and messages for table name, primary keys and columns
- Auto increment rules (string, primary key, single key, integer column)
- Unique key groups referencing existing columns
- auto_increment / without_rowid exclusivity
- Immutability of the validated schema
"""

import pytest

from core.exceptions import InvalidSchema
from models.schema import ModelColumn, ModelOptions, ValidatedSchema, validate_schema
from sql.datatypes import DataType

INT_ID = {"id": {"type": DataType.INTEGER}}


# ============================================================================
# TABLE OPTIONS
# ============================================================================


@pytest.mark.unit
@pytest.mark.parametrize("table_name", [None, "", 1])
def test_invalid_table_name(table_name):
    with pytest.raises(InvalidSchema, match="table_name must be a non-empty string"):
        validate_schema({"table_name": table_name, "primary_keys": "id"}, INT_ID)


@pytest.mark.unit
@pytest.mark.parametrize("primary_keys", [None, [], [1], [""], "", 5])
def test_invalid_primary_keys(primary_keys):
    with pytest.raises(InvalidSchema, match="primary_keys must be a string or a list of strings"):
        validate_schema({"table_name": "users", "primary_keys": primary_keys}, INT_ID)


@pytest.mark.unit
def test_table_name_checked_before_primary_keys():
    with pytest.raises(InvalidSchema, match="table_name"):
        validate_schema({}, {})


@pytest.mark.unit
@pytest.mark.parametrize("columns", [None, {}, ["id"]])
def test_columns_required(columns):
    with pytest.raises(InvalidSchema, match="columns must be a non-empty mapping"):
        validate_schema({"table_name": "users", "primary_keys": "id"}, columns)


@pytest.mark.unit
def test_column_without_type():
    with pytest.raises(InvalidSchema, match="Column name has an invalid type"):
        validate_schema({"table_name": "users", "primary_keys": "id"}, {**INT_ID, "name": {}})


@pytest.mark.unit
def test_column_unknown_option():
    with pytest.raises(InvalidSchema, match="unknown options: nullable"):
        validate_schema(
            {"table_name": "users", "primary_keys": "id"},
            {"id": {"type": "int", "nullable": True}},
        )


@pytest.mark.unit
@pytest.mark.parametrize("misspelled", ["autoincrement", "autoIncrement", "unique_key"])
def test_unknown_model_option(misspelled):
    with pytest.raises(InvalidSchema, match=f"Unknown model options: {misspelled}"):
        validate_schema(
            {"table_name": "users", "primary_keys": "id", misspelled: "id"},
            INT_ID,
        )


@pytest.mark.edge_case
@pytest.mark.parametrize("default", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_default_rejected(default):
    with pytest.raises(InvalidSchema, match="Column ratio has a non-finite default value"):
        validate_schema(
            {"table_name": "users", "primary_keys": "id"},
            {**INT_ID, "ratio": {"type": "real", "default_value": default}},
        )


@pytest.mark.unit
def test_primary_key_must_exist():
    with pytest.raises(InvalidSchema, match="primary_keys includes a column that does not exist"):
        validate_schema({"table_name": "users", "primary_keys": ["users"]}, INT_ID)


@pytest.mark.unit
def test_flagged_primary_key_must_be_listed():
    with pytest.raises(InvalidSchema, match="flagged primary_key"):
        validate_schema(
            {"table_name": "users", "primary_keys": "id"},
            {**INT_ID, "email": {"type": "text", "primary_key": True}},
        )


# ============================================================================
# AUTO INCREMENT
# ============================================================================


@pytest.mark.unit
def test_auto_increment_not_string():
    with pytest.raises(InvalidSchema, match="was not a string"):
        validate_schema({"table_name": "users", "primary_keys": "id", "auto_increment": 1}, INT_ID)


@pytest.mark.unit
def test_auto_increment_not_primary_key():
    with pytest.raises(InvalidSchema, match="was not a primary key"):
        validate_schema(
            {"table_name": "users", "primary_keys": "id", "auto_increment": "notId"},
            {**INT_ID, "notId": {"type": "integer"}},
        )


@pytest.mark.unit
def test_auto_increment_multiple_primary_keys():
    with pytest.raises(InvalidSchema, match="there are multiple primary keys"):
        validate_schema(
            {"table_name": "users", "primary_keys": ["id", "id2"], "auto_increment": "id"},
            {"id": {"type": "integer"}, "id2": {"type": "integer"}},
        )


@pytest.mark.unit
def test_auto_increment_not_integer():
    with pytest.raises(InvalidSchema, match="is not an integer column"):
        validate_schema(
            {"table_name": "users", "primary_keys": "id", "auto_increment": "id"},
            {"id": {"type": "string"}},
        )


@pytest.mark.unit
def test_auto_increment_column_flag_adopted():
    schema = validate_schema(
        {"table_name": "users", "primary_keys": "id"},
        {"id": {"type": "int", "auto_increment": True}},
    )
    assert schema.auto_increment_column == "id"


@pytest.mark.unit
def test_auto_increment_column_flag_disagrees():
    with pytest.raises(InvalidSchema, match="flagged auto_increment"):
        validate_schema(
            {"table_name": "users", "primary_keys": ["id", "other"], "auto_increment": "id"},
            {"id": {"type": "int"}, "other": {"type": "int", "auto_increment": True}},
        )


@pytest.mark.unit
def test_auto_increment_and_without_rowid():
    with pytest.raises(InvalidSchema, match="cannot both be set"):
        validate_schema(
            {"table_name": "users", "primary_keys": "id", "auto_increment": "id", "without_rowid": True},
            INT_ID,
        )


# ============================================================================
# UNIQUE KEYS
# ============================================================================


@pytest.mark.unit
@pytest.mark.parametrize("unique_keys", [[["missing"]], [["id", "missing"]], [["id"], ["missing"]]])
def test_unique_keys_reference_undefined_column(unique_keys):
    with pytest.raises(InvalidSchema, match="unique_keys includes a column that does not exist"):
        validate_schema({"table_name": "users", "primary_keys": "id", "unique_keys": unique_keys}, INT_ID)


@pytest.mark.unit
@pytest.mark.parametrize("unique_keys", ["id", [[]], ["id"], [[1]]])
def test_unique_keys_shape(unique_keys):
    with pytest.raises(InvalidSchema, match="unique_keys must be a list of lists"):
        validate_schema({"table_name": "users", "primary_keys": "id", "unique_keys": unique_keys}, INT_ID)


# ============================================================================
# RESULT
# ============================================================================


@pytest.mark.smoke
def test_validated_schema_facts():
    schema = validate_schema(
        ModelOptions(table_name="users", primary_keys=["id", "name"], unique_keys=[["email"]]),
        {
            "id": ModelColumn(type="int"),
            "name": ModelColumn(type="varchar"),
            "email": {"type": "string"},
        },
    )
    assert isinstance(schema, ValidatedSchema)
    assert schema.table_name == "users"
    assert schema.primary_keys == ("id", "name")
    assert schema.auto_increment_column is None
    assert schema.unique_key_groups == (("email",),)
    assert list(schema.columns) == ["id", "name", "email"]
    assert schema.columns["name"].type is DataType.TEXT


@pytest.mark.unit
def test_validated_schema_is_immutable():
    schema = validate_schema({"table_name": "users", "primary_keys": "id"}, INT_ID)
    with pytest.raises(AttributeError):
        schema.table_name = "other"
    with pytest.raises(TypeError):
        schema.columns["new"] = ModelColumn(type="int")


@pytest.mark.unit
def test_caller_columns_not_shared():
    columns = {"id": {"type": "int"}}
    schema = validate_schema({"table_name": "users", "primary_keys": "id"}, columns)
    columns["name"] = {"type": "text"}
    assert list(schema.columns) == ["id"]


@pytest.mark.unit
def test_options_type_checked():
    with pytest.raises(InvalidSchema, match="options must be"):
        validate_schema("users", INT_ID)
