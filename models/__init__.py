"""
=================================
Table models and schema handling.
=================================

Modules:
    schema: Column descriptors, table options and schema validation
    model: Model, a validated schema bound to a database

Architecture:
    - schema depends only on sql.datatypes and sql.ddl
    - model builds on schema, sql.query_builder and utils.database

Example:
    >>> from models import Model, ModelColumn
    >>> from sql.datatypes import DataType
    >>>
    >>> users = Model(
    ...     {'table_name': 'users', 'primary_keys': 'id'},
    ...     {'id': ModelColumn(type=DataType.INTEGER), 'name': ModelColumn(type='text')}
    ... )
    >>> users.create_table_definition
    'CREATE TABLE `users` (id integer, name text, PRIMARY KEY (id)) WITHOUT ROWID;'
"""

__version__ = "0.9.1"
__all__ = [
    'Model',
    'ModelColumn',
    'ModelOptions',
    'ValidatedSchema',
    'validate_schema',
]

from .model import Model
from .schema import ModelColumn, ModelOptions, ValidatedSchema, validate_schema
