"""
===================================
SQL generation package for the ORM.
===================================

This package turns schemas and clause bundles into SQL text. All functions
are pure: no I/O, no state between calls, safe to call from any thread.

The package follows a clear organization:
    - datatypes.py: Canonical column types and alias resolution
    - ddl.py: CREATE TABLE / DROP TABLE rendering
    - query_builder.py: SELECT/INSERT/UPDATE/DELETE/UPSERT with `?` bindings

Example:
    >>> from sql.query_builder import QueryType, generate_query
    >>>
    >>> statement = generate_query(QueryType.INSERT, 't', {'data': {'id': 1, 'name': 'x'}})
    >>> statement.query
    'INSERT INTO `t` (id, name) VALUES (?, ?)'
    >>> statement.bindings
    [1, 'x']
"""

__version__ = "0.9.1"
__all__ = [
    # Data types
    'DataType', 'resolve_data_type',
    # DDL functions
    'create_table_definition', 'drop_table_sql',
    # Statement generation
    'QueryType', 'OrderBy', 'GenerateQueryOptions', 'GeneratedQuery',
    'generate_query', 'order_by_builder', 'where_builder'
]

from .datatypes import DataType, resolve_data_type
from .ddl import create_table_definition, drop_table_sql
from .query_builder import (
    GeneratedQuery,
    GenerateQueryOptions,
    OrderBy,
    QueryType,
    generate_query,
    order_by_builder,
    where_builder,
)
