"""
==========================
SQL statement synthesizer.
==========================

Turns a statement kind, a table name and a clause bundle into SQL text with
positional `?` placeholders plus the ordered list of values to bind. Only
values are parameterized; table and column names are trusted identifiers
and are interpolated as given.

Builders:
- generate_query: Build a complete statement for one QueryType
- where_builder: Build an AND-joined equality filter
- order_by_builder: Normalize ordering specs into an ORDER BY expression

Statement shapes:
    SELECT * FROM `t` [WHERE a = ? AND b = ?] [ORDER BY ...] [LIMIT n [OFFSET m]]
    DELETE FROM `t` [WHERE ...]
    INSERT [or REPLACE] INTO `t` (a, b) VALUES (?, ?)
    UPDATE `t` SET a = ?, b = ? [WHERE ...]
    INSERT INTO `t` (a, b) VALUES (?, ?) ON CONFLICT (pk) DO UPDATE SET b = ? WHERE a = ?

Usage:
    from sql.query_builder import QueryType, generate_query

    statement = generate_query(
        QueryType.SELECT,
        'users',
        {'where': {'id': 1}, 'order_by': OrderBy('name', descending=True), 'limit': 10}
    )
    statement.query     # 'SELECT * FROM `users` WHERE id = ? ORDER BY "name" DESC LIMIT 10'
    statement.bindings  # [1]
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Union

from core.exceptions import InvalidArgument
from core.logger import get_logger

logger = get_logger(__name__)


class QueryType(str, Enum):
    """Statement kinds understood by generate_query."""

    SELECT = "SELECT"
    INSERT = "INSERT"
    INSERT_OR_REPLACE = "INSERT or REPLACE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    UPSERT = "UPSERT"


@dataclass(frozen=True)
class OrderBy:
    """Ordering for one column. Ascending with nulls first adds no suffix."""

    column: str
    descending: bool = False
    null_last: bool = False


OrderSpec = Union[str, OrderBy, Mapping[str, Any]]


@dataclass
class GenerateQueryOptions:
    """Clause bundle for a single generate_query call.

    Attributes:
        where: Column equality filter, joined with AND
        data: Column values to insert or set
        upsert_only_update_data: Column values set when an upsert conflicts
        limit: LIMIT value
        offset: OFFSET value, only emitted together with limit
        order_by: Single ordering spec or a list of them
    """

    where: Optional[Mapping[str, Any]] = None
    data: Optional[Mapping[str, Any]] = None
    upsert_only_update_data: Optional[Mapping[str, Any]] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    order_by: Optional[Union[OrderSpec, Sequence[OrderSpec]]] = None

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "GenerateQueryOptions":
        """Build options from a plain dict, rejecting unknown clauses."""
        known = {f.name for f in fields(cls)}
        unknown = set(options) - known
        if unknown:
            raise InvalidArgument(f"Unknown query options: {', '.join(sorted(unknown))}")
        return cls(**options)


@dataclass
class GeneratedQuery:
    """SQL text and its positional bindings, bindings[i] fills the i-th `?`."""

    query: str
    bindings: List[Any] = field(default_factory=list)


def _resolve_query_type(query_type: Union[QueryType, str]) -> QueryType:
    if isinstance(query_type, QueryType):
        return query_type
    if isinstance(query_type, str):
        for member in QueryType:
            if member.value.upper() == query_type.upper() or member.name == query_type.upper():
                return member
    raise InvalidArgument("Invalid statement kind")


def _check_mapping(value: Any, clause: str) -> None:
    if value is not None and not isinstance(value, Mapping):
        raise InvalidArgument(f"{clause} must be a mapping of column names to values")


def _check_count(value: Any, clause: str) -> None:
    if value is not None and (isinstance(value, bool) or not isinstance(value, int) or value < 0):
        raise InvalidArgument(f"{clause} must be a non-negative integer")


def where_builder(where: Optional[Mapping[str, Any]], bindings: List[Any]) -> str:
    """
    Build a WHERE clause from a column equality mapping.

    Appends one binding per entry, in iteration order. An empty or missing
    mapping means no filter and yields an empty string.

    Args:
        where: Mapping of column name to value
        bindings: Binding list to append to

    Returns:
        " WHERE a = ? AND b = ?" or ""
    """
    if not where:
        return ""
    conditions = []
    for column, value in where.items():
        conditions.append(f"{column} = ?")
        bindings.append(value)
    return f" WHERE {' AND '.join(conditions)}"


def order_by_builder(order_by: Union[OrderSpec, Sequence[OrderSpec]]) -> str:
    """
    Render ordering specs as an ORDER BY expression.

    Lists keep their input order. A bare column name renders as "name";
    OrderBy (or a dict with column/descending/null_last) may add DESC and
    NULLS LAST.

    Args:
        order_by: Column name, OrderBy, dict, or a list of these

    Returns:
        Comma separated ordering expression, e.g. '"a" DESC NULLS LAST, "b"'
    """
    if isinstance(order_by, (list, tuple)):
        return ", ".join(order_by_builder(spec) for spec in order_by)
    if isinstance(order_by, str):
        return f'"{order_by}"'
    if isinstance(order_by, Mapping):
        if 'column' not in order_by:
            raise InvalidArgument("order_by entries must name a column")
        order_by = OrderBy(
            column=order_by['column'],
            descending=bool(order_by.get('descending', False)),
            null_last=bool(order_by.get('null_last', False))
        )
    if not isinstance(order_by, OrderBy):
        raise InvalidArgument("order_by must be a column name, an OrderBy, or a list of them")

    expression = f'"{order_by.column}"'
    if order_by.descending:
        expression += " DESC"
    if order_by.null_last:
        expression += " NULLS LAST"
    return expression


def _insert_clause(table_name: str, data: Mapping[str, Any], bindings: List[Any], or_replace: bool = False) -> str:
    columns = []
    for column, value in data.items():
        columns.append(column)
        bindings.append(value)
    placeholders = ", ".join("?" for _ in columns)
    verb = "INSERT or REPLACE INTO" if or_replace else "INSERT INTO"
    return f"{verb} `{table_name}` ({', '.join(columns)}) VALUES ({placeholders})"


def _set_clause(data: Mapping[str, Any], bindings: List[Any]) -> str:
    assignments = []
    for column, value in data.items():
        assignments.append(f"{column} = ?")
        bindings.append(value)
    return ", ".join(assignments)


def generate_query(
    query_type: Union[QueryType, str],
    table_name: str,
    options: Optional[Union[GenerateQueryOptions, Mapping[str, Any]]] = None,
    primary_keys: Optional[Union[str, Sequence[str]]] = None
) -> GeneratedQuery:
    """
    Build a parameterized statement.

    Args:
        query_type: QueryType member or its value (case-insensitive)
        table_name: Table the statement targets
        options: GenerateQueryOptions or dict of clauses
        primary_keys: Upsert conflict target, a column name or ordered list

    Returns:
        GeneratedQuery with query text and bindings

    Raises:
        InvalidArgument: Missing table name, unknown kind, or a required
            clause is missing for the kind
    """
    if not isinstance(table_name, str) or not table_name:
        raise InvalidArgument("Invalid table name")
    query_type = _resolve_query_type(query_type)

    if options is None:
        options = GenerateQueryOptions()
    elif isinstance(options, Mapping):
        options = GenerateQueryOptions.from_dict(options)
    elif not isinstance(options, GenerateQueryOptions):
        raise InvalidArgument("options must be GenerateQueryOptions or a dict")

    _check_mapping(options.where, "where")
    _check_mapping(options.data, "data")
    _check_mapping(options.upsert_only_update_data, "upsert_only_update_data")
    _check_count(options.limit, "limit")
    _check_count(options.offset, "offset")

    bindings: List[Any] = []

    if query_type is QueryType.SELECT:
        query = f"SELECT * FROM `{table_name}`"
        query += where_builder(options.where, bindings)
        if options.order_by:
            query += f" ORDER BY {order_by_builder(options.order_by)}"
        if options.limit is not None:
            query += f" LIMIT {options.limit}"
            if options.offset is not None:
                query += f" OFFSET {options.offset}"

    elif query_type is QueryType.DELETE:
        query = f"DELETE FROM `{table_name}`"
        query += where_builder(options.where, bindings)

    elif query_type in (QueryType.INSERT, QueryType.INSERT_OR_REPLACE):
        if not options.data:
            raise InvalidArgument("Must provide data to insert")
        query = _insert_clause(
            table_name, options.data, bindings,
            or_replace=query_type is QueryType.INSERT_OR_REPLACE
        )

    elif query_type is QueryType.UPDATE:
        if not options.data:
            raise InvalidArgument("Must provide data to update")
        query = f"UPDATE `{table_name}` SET {_set_clause(options.data, bindings)}"
        query += where_builder(options.where, bindings)

    else:
        if not options.data or not options.upsert_only_update_data or not options.where:
            raise InvalidArgument(
                "Must provide data to insert with, data to update with, and where keys in Upsert"
            )
        if isinstance(primary_keys, str):
            primary_keys = [primary_keys]
        if not primary_keys:
            raise InvalidArgument("Must provide primary keys for the Upsert conflict target")
        if (
            not isinstance(primary_keys, (list, tuple))
            or not all(isinstance(key, str) and key for key in primary_keys)
        ):
            raise InvalidArgument("Upsert conflict target must be a column name or a list of column names")
        query = _insert_clause(table_name, options.data, bindings)
        query += f" ON CONFLICT ({', '.join(primary_keys)}) DO UPDATE SET "
        query += _set_clause(options.upsert_only_update_data, bindings)
        query += where_builder(options.where, bindings)

    logger.debug(f"Generated {query_type.name} for {table_name}: {query} with {len(bindings)} bindings")
    return GeneratedQuery(query=query, bindings=bindings)
