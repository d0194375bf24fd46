"""
======================================
Exception hierarchy for the model ORM.
======================================

All errors raised by schema validation, statement generation and the
database façade derive from OrmError so callers can catch the whole family
with a single except clause.

Classes:
    OrmError: Base class for every library error
    InvalidSchema: A table schema violates a structural rule
    InvalidArgument: A statement generation call is missing or has bad input
    StrategyNotImplemented: A table strategy exists but is not supported
    InvalidDatabase: An executor does not offer the required capabilities

Example:
    >>> from core.exceptions import InvalidSchema, OrmError
    >>>
    >>> try:
    ...     Model({'table_name': ''}, {})
    ... except InvalidSchema as e:
    ...     print(f"Schema rejected: {e}")
"""


class OrmError(Exception):
    """Base exception for all model ORM errors."""
    pass


class InvalidSchema(OrmError, ValueError):
    """Exception raised when a table schema fails validation.

    Raised once, at model construction. There is no partially valid schema.
    """
    pass


class InvalidArgument(OrmError, ValueError):
    """Exception raised for invalid statement generation input.

    Raised when the table name is missing, the statement kind is unknown,
    or a clause required by the statement kind is absent or empty.
    """
    pass


class StrategyNotImplemented(OrmError, NotImplementedError):
    """Exception raised when an unsupported table strategy is requested."""
    pass


class InvalidDatabase(OrmError, TypeError):
    """Exception raised when a database executor is missing capabilities."""
    pass
