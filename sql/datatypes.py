"""
==========================
Column data type handling.
==========================

Defines the canonical column types understood by the ORM and the alias
table used to fold user-facing spellings ("int", "string", "varchar", ...)
into them. Alias resolution happens once, when a schema is validated;
everything downstream only sees DataType members.

Example:
    >>> from sql.datatypes import DataType, resolve_data_type
    >>>
    >>> resolve_data_type('VARCHAR', 'name')
    <DataType.TEXT: 'text'>
"""

from enum import Enum
from typing import Dict, Union

from core.exceptions import InvalidSchema


class DataType(str, Enum):
    """Canonical column types, rendered verbatim in CREATE TABLE."""

    INTEGER = "integer"
    TEXT = "text"
    REAL = "real"
    BLOB = "blob"
    BOOLEAN = "boolean"

    def __str__(self) -> str:
        return self.value


DATA_TYPE_ALIASES: Dict[str, DataType] = {
    'integer': DataType.INTEGER,
    'int': DataType.INTEGER,
    'text': DataType.TEXT,
    'string': DataType.TEXT,
    'varchar': DataType.TEXT,
    'char': DataType.TEXT,
    'real': DataType.REAL,
    'number': DataType.REAL,
    'numeric': DataType.REAL,
    'float': DataType.REAL,
    'double': DataType.REAL,
    'blob': DataType.BLOB,
    'boolean': DataType.BOOLEAN,
    'bool': DataType.BOOLEAN,
}


def resolve_data_type(value: Union[DataType, str], column_name: str) -> DataType:
    """
    Fold a type alias into its canonical DataType.

    Args:
        value: DataType member or alias string (case-insensitive)
        column_name: Column the type belongs to, used in the error message

    Returns:
        Canonical DataType

    Raises:
        InvalidSchema: If the value is missing or not a known alias
    """
    if isinstance(value, DataType):
        return value
    if isinstance(value, str):
        data_type = DATA_TYPE_ALIASES.get(value.strip().lower())
        if data_type is not None:
            return data_type
    raise InvalidSchema(f"Column {column_name} has an invalid type: {value!r}")
