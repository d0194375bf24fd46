"""
==========================================================
Data Definition Language (DDL) utilities for model tables.
==========================================================

Renders the CREATE TABLE and DROP TABLE statements for validated model
schemas. Rendering is a pure function of the schema: deterministic, no
I/O, and safe to call any number of times.

Functions:
    create_table_definition: Generate CREATE TABLE for a validated schema
    drop_table_sql: Generate DROP TABLE [IF EXISTS]
    format_default_value: Render a column default as an SQL literal

Column definition layout:
    <name> <type> [PRIMARY KEY AUTOINCREMENT] [NOT NULL] [UNIQUE] [DEFAULT <literal>]

Table constraints follow the columns: PRIMARY KEY (...) unless the primary
key is an auto-increment column, then one UNIQUE (...) per unique key group
in declaration order. WITHOUT ROWID is appended unless the table has an
auto-increment column or without_rowid is explicitly False.

Example:
    >>> from sql.ddl import create_table_definition, drop_table_sql
    >>>
    >>> create_table_definition(schema)
    'CREATE TABLE `test` (id integer, name text, PRIMARY KEY (id)) WITHOUT ROWID;'
    >>> drop_table_sql('test', if_exists=True)
    'DROP TABLE IF EXISTS `test`;'
"""

from typing import Any


def format_default_value(value: Any) -> str:
    """Render a default value as an SQL literal.

    Args:
        value: str, bool, int, float or bytes

    Returns:
        SQL literal ('text' with quotes doubled, true/false, bare numbers, X'..')
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, (bytes, bytearray)):
        return f"X'{bytes(value).hex()}'"
    text = str(value).replace("'", "''")
    return f"'{text}'"


def create_table_definition(schema) -> str:
    """
    Generate the CREATE TABLE statement for a validated schema.

    Args:
        schema: ValidatedSchema (table_name, columns, primary_keys,
            auto_increment_column, unique_key_groups, without_rowid)

    Returns:
        SQL CREATE TABLE statement terminated by a semicolon
    """
    definitions = []

    for name, column in schema.columns.items():
        definition = f"{name} {column.type.value}"
        if name == schema.auto_increment_column:
            definition += " PRIMARY KEY AUTOINCREMENT"
        if column.not_null:
            definition += " NOT NULL"
        if column.unique:
            definition += " UNIQUE"
        if column.default_value is not None:
            definition += f" DEFAULT {format_default_value(column.default_value)}"
        definitions.append(definition)

    if schema.auto_increment_column is None:
        definitions.append(f"PRIMARY KEY ({', '.join(schema.primary_keys)})")

    for group in schema.unique_key_groups:
        definitions.append(f"UNIQUE ({', '.join(group)})")

    sql = f"CREATE TABLE `{schema.table_name}` ({', '.join(definitions)})"

    if schema.auto_increment_column is None and schema.without_rowid is not False:
        sql += " WITHOUT ROWID"

    return sql + ";"


def drop_table_sql(table_name: str, if_exists: bool = False) -> str:
    """Generate DROP TABLE statement.

    Args:
        table_name: Name of the table to drop
        if_exists: If True, add IF EXISTS clause

    Returns:
        SQL DROP TABLE statement
    """
    if_exists_clause = "IF EXISTS " if if_exists else ""
    return f"DROP TABLE {if_exists_clause}`{table_name}`;"
