"""
=======================================
Table schema definition and validation.
=======================================

A model is described once by a set of table options and a mapping of
column descriptors. validate_schema() checks every structural rule in a
fixed order and returns an immutable ValidatedSchema; construction is the
only validation gate, nothing re-checks the schema afterwards.

Validation order (first failure wins):
    1. table_name is a non-empty string
    2. primary_keys is a string or a non-empty list of non-empty strings
    3. columns is a non-empty mapping with a valid type per column
    4. every primary key (and every column flagged primary_key) is consistent
    5. auto_increment is a single integer primary key
    6. every unique key group references existing columns
    7. auto_increment and without_rowid=True are mutually exclusive

Example:
    >>> from models.schema import ModelColumn, ModelOptions, validate_schema
    >>> from sql.datatypes import DataType
    >>>
    >>> schema = validate_schema(
    ...     ModelOptions(table_name='users', primary_keys='id', auto_increment='id'),
    ...     {
    ...         'id': ModelColumn(type=DataType.INTEGER),
    ...         'name': {'type': 'string', 'not_null': True},
    ...     }
    ... )
    >>> schema.create_table_definition
    'CREATE TABLE `users` (id integer PRIMARY KEY AUTOINCREMENT, name text NOT NULL);'
"""

import math
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from core.exceptions import InvalidSchema
from core.logger import get_logger
from sql.datatypes import DataType, resolve_data_type
from sql.ddl import create_table_definition

logger = get_logger(__name__)


@dataclass(frozen=True)
class ModelColumn:
    """Column descriptor.

    Attributes:
        type: Canonical DataType or an alias string
        primary_key: Informational flag; must agree with ModelOptions.primary_keys
        not_null: Render NOT NULL
        unique: Render a standalone UNIQUE constraint on the column
        auto_increment: Mark this column as the auto-increment primary key
        default_value: Default literal; None means no default
    """

    type: Union[DataType, str]
    primary_key: bool = False
    not_null: bool = False
    unique: bool = False
    auto_increment: bool = False
    default_value: Any = None


@dataclass
class ModelOptions:
    """Table level options.

    Attributes:
        table_name: Name of the table
        primary_keys: Column name or ordered list of column names
        auto_increment: Optional auto-increment column name
        unique_keys: Optional list of unique column groups
        without_rowid: None renders WITHOUT ROWID unless auto-incrementing,
            False never renders it, True requires it
    """

    table_name: Any = None
    primary_keys: Any = None
    auto_increment: Any = None
    unique_keys: Optional[List[List[str]]] = None
    without_rowid: Optional[bool] = None

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "ModelOptions":
        """Build options from a plain dict, rejecting unknown keys."""
        unknown = set(options) - {f.name for f in fields(cls)}
        if unknown:
            raise InvalidSchema(f"Unknown model options: {', '.join(sorted(map(str, unknown)))}")
        return cls(**options)


@dataclass(frozen=True)
class ValidatedSchema:
    """Immutable, already validated table schema.

    Safe to share between threads and statement generation calls.
    """

    table_name: str
    columns: Mapping[str, ModelColumn]
    primary_keys: Tuple[str, ...]
    auto_increment_column: Optional[str] = None
    unique_key_groups: Tuple[Tuple[str, ...], ...] = field(default_factory=tuple)
    without_rowid: Optional[bool] = None

    @property
    def create_table_definition(self) -> str:
        """CREATE TABLE statement for this schema."""
        return create_table_definition(self)


def _normalize_primary_keys(primary_keys: Any) -> Tuple[str, ...]:
    if isinstance(primary_keys, str):
        primary_keys = [primary_keys]
    if (
        not isinstance(primary_keys, (list, tuple))
        or not primary_keys
        or not all(isinstance(key, str) and key for key in primary_keys)
    ):
        raise InvalidSchema("primary_keys must be a string or a list of strings")
    return tuple(primary_keys)


def _normalize_column(name: str, column: Any) -> ModelColumn:
    if isinstance(column, Mapping):
        unknown = set(column) - {f.name for f in fields(ModelColumn)}
        if unknown:
            raise InvalidSchema(f"Column {name} has unknown options: {', '.join(sorted(unknown))}")
        column = ModelColumn(**{'type': None, **column})
    elif not isinstance(column, ModelColumn):
        raise InvalidSchema(f"Column {name} must be a ModelColumn or a dict")
    if isinstance(column.default_value, float) and not math.isfinite(column.default_value):
        raise InvalidSchema(f"Column {name} has a non-finite default value: {column.default_value!r}")
    return ModelColumn(
        type=resolve_data_type(column.type, name),
        primary_key=bool(column.primary_key),
        not_null=bool(column.not_null),
        unique=bool(column.unique),
        auto_increment=bool(column.auto_increment),
        default_value=column.default_value,
    )


def _normalize_columns(columns: Any) -> Dict[str, ModelColumn]:
    if not isinstance(columns, Mapping) or not columns:
        raise InvalidSchema("columns must be a non-empty mapping")
    normalized = {}
    for name, column in columns.items():
        if not isinstance(name, str) or not name:
            raise InvalidSchema("column names must be non-empty strings")
        normalized[name] = _normalize_column(name, column)
    return normalized


def _resolve_auto_increment(
    auto_increment: Any,
    primary_keys: Tuple[str, ...],
    columns: Dict[str, ModelColumn]
) -> Optional[str]:
    flagged = [name for name, column in columns.items() if column.auto_increment]
    if len(flagged) > 1:
        raise InvalidSchema("Only one column can be flagged auto_increment")
    if flagged:
        if auto_increment is None:
            auto_increment = flagged[0]
        elif auto_increment != flagged[0]:
            raise InvalidSchema(
                f"Column {flagged[0]} is flagged auto_increment, but auto_increment is {auto_increment!r}"
            )

    if auto_increment is None:
        return None
    if not isinstance(auto_increment, str):
        raise InvalidSchema("auto_increment was provided, but was not a string")
    if auto_increment not in primary_keys:
        raise InvalidSchema("auto_increment was provided, but was not a primary key")
    if len(primary_keys) != 1:
        raise InvalidSchema("auto_increment was provided, but there are multiple primary keys")
    if columns[auto_increment].type is not DataType.INTEGER:
        raise InvalidSchema("auto_increment was provided, but is not an integer column")
    return auto_increment


def _normalize_unique_keys(
    unique_keys: Any,
    columns: Dict[str, ModelColumn]
) -> Tuple[Tuple[str, ...], ...]:
    if unique_keys is None:
        return ()
    if not isinstance(unique_keys, (list, tuple)):
        raise InvalidSchema("unique_keys must be a list of lists of column names")
    groups = []
    for group in unique_keys:
        if (
            not isinstance(group, (list, tuple))
            or not group
            or not all(isinstance(name, str) for name in group)
        ):
            raise InvalidSchema("unique_keys must be a list of lists of column names")
        for name in group:
            if name not in columns:
                raise InvalidSchema(f"unique_keys includes a column that does not exist: {name}")
        groups.append(tuple(group))
    return tuple(groups)


def validate_schema(
    options: Union[ModelOptions, Mapping[str, Any]],
    columns: Mapping[str, Union[ModelColumn, Mapping[str, Any]]]
) -> ValidatedSchema:
    """
    Validate table options and columns and build an immutable schema.

    Args:
        options: ModelOptions instance or dict with the same keys
        columns: Mapping of column name to ModelColumn or dict descriptor

    Returns:
        ValidatedSchema

    Raises:
        InvalidSchema: On the first rule the definition violates
    """
    if isinstance(options, Mapping):
        options = ModelOptions.from_dict(options)
    elif not isinstance(options, ModelOptions):
        raise InvalidSchema("options must be a ModelOptions instance or a dict")

    table_name = options.table_name
    if not isinstance(table_name, str) or not table_name:
        raise InvalidSchema("table_name must be a non-empty string")

    primary_keys = _normalize_primary_keys(options.primary_keys)
    normalized_columns = _normalize_columns(columns)

    for key in primary_keys:
        if key not in normalized_columns:
            raise InvalidSchema("primary_keys includes a column that does not exist")
    for name, column in normalized_columns.items():
        if column.primary_key and name not in primary_keys:
            raise InvalidSchema(f"Column {name} is flagged primary_key, but is not in primary_keys")

    auto_increment = _resolve_auto_increment(options.auto_increment, primary_keys, normalized_columns)
    unique_key_groups = _normalize_unique_keys(options.unique_keys, normalized_columns)

    if auto_increment is not None and options.without_rowid:
        raise InvalidSchema("auto_increment and without_rowid cannot both be set")

    logger.debug(
        f"Validated schema for {table_name}: {len(normalized_columns)} columns, "
        f"primary keys {primary_keys}"
    )

    return ValidatedSchema(
        table_name=table_name,
        columns=MappingProxyType(normalized_columns),
        primary_keys=primary_keys,
        auto_increment_column=auto_increment,
        unique_key_groups=unique_key_groups,
        without_rowid=options.without_rowid,
    )
