"""
=========================================
Database façade and SQLAlchemy executor.
=========================================

The ORM never talks to a driver directly. It hands generated SQL and
bindings to an executor offering four capabilities:

    prepare(sql) -> PreparedStatement   (bind(*values), run(), first(), all())
    batch(statements) -> list of results, executed atomically
    exec(sql) -> ExecResult             raw DDL such as CREATE/DROP TABLE
    dump() -> bytes                     serialized copy of the database

Database wraps any object with those capabilities and rejects anything
else up front. SQLAlchemyExecutor is the bundled implementation, running
positional (`?`) driver SQL through a SQLAlchemy Engine.

Key Features:
    - Capability validation before any statement is generated
    - One transaction per run() and one per batch()
    - Row results returned as plain dicts
    - Engine creation from core.config defaults

Example:
    >>> from utils.database import connect
    >>>
    >>> db = connect('sqlite:///app.db')
    >>> db.exec('CREATE TABLE `users` (id integer, PRIMARY KEY (id));')
    >>> db.prepare('INSERT INTO `users` (id) VALUES (?)').bind(1).run()
    >>> db.prepare('SELECT * FROM `users` WHERE id = ?').bind(1).first()
    {'id': 1}
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from core.config import config
from core.exceptions import InvalidDatabase
from core.logger import get_logger

logger = get_logger(__name__)

REQUIRED_METHODS = ('prepare', 'dump', 'batch', 'exec')


@dataclass
class QueryResult:
    """Result envelope for prepared statements.

    Attributes:
        success: True when the statement executed
        results: Rows as dicts (empty for statements returning no rows)
        meta: changes, last_row_id and duration (ms)
    """

    success: bool
    results: List[Dict[str, Any]] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ExecResult:
    """Result of a raw exec() call."""

    count: int
    duration: float


class PreparedStatement:
    """SQL text plus positional bindings, executed against an Engine.

    bind() returns a new statement so a prepared statement can be reused
    with different values.
    """

    def __init__(self, engine: Engine, query: str, bindings: Tuple[Any, ...] = ()):
        self.engine = engine
        self.query = query
        self.bindings = tuple(bindings)

    def bind(self, *values: Any) -> "PreparedStatement":
        """Return a copy of this statement with values appended to its bindings."""
        return PreparedStatement(self.engine, self.query, self.bindings + values)

    def execute_on(self, connection: Connection) -> QueryResult:
        """Execute within an open connection and collect the result envelope."""
        start = time.perf_counter()
        logger.debug(f"Executing: {self.query} with bindings {self.bindings}")
        result = connection.exec_driver_sql(self.query, self.bindings)

        # Read cursor metadata before the rows are consumed and the cursor closes
        if result.returns_rows:
            changes, last_row_id = 0, None
            rows = [dict(row) for row in result.mappings()]
        else:
            changes, last_row_id = max(result.rowcount, 0), result.lastrowid
            rows = []

        return QueryResult(
            success=True,
            results=rows,
            meta={
                'changes': changes,
                'last_row_id': last_row_id,
                'duration': (time.perf_counter() - start) * 1000
            }
        )

    def run(self) -> QueryResult:
        """Execute in its own transaction."""
        try:
            with self.engine.begin() as connection:
                return self.execute_on(connection)
        except SQLAlchemyError as e:
            logger.error(f"Statement failed: {self.query}: {e}")
            raise

    def all(self) -> QueryResult:
        """Execute and return every row."""
        return self.run()

    def first(self, column: Optional[str] = None) -> Any:
        """Execute and return the first row, or one column of it.

        Returns:
            Row dict, the column value when column is given, or None if no rows
        """
        result = self.run()
        if not result.results:
            return None
        row = result.results[0]
        if column is None:
            return row
        return row[column]


class SQLAlchemyExecutor:
    """Executor capabilities backed by a SQLAlchemy Engine.

    Attributes:
        engine: SQLAlchemy Engine used for every statement
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def prepare(self, query: str) -> PreparedStatement:
        return PreparedStatement(self.engine, query)

    def batch(self, statements: Sequence[PreparedStatement]) -> List[QueryResult]:
        """Execute statements in order inside a single transaction.

        Raises:
            SQLAlchemyError: The transaction is rolled back and the error re-raised
        """
        try:
            with self.engine.begin() as connection:
                return [statement.execute_on(connection) for statement in statements]
        except SQLAlchemyError as e:
            logger.error(f"Batch of {len(statements)} statements rolled back: {e}")
            raise

    def exec(self, query: str) -> ExecResult:
        """Execute a single raw statement without bindings."""
        start = time.perf_counter()
        logger.debug(f"Executing raw SQL: {query}")
        try:
            with self.engine.begin() as connection:
                connection.exec_driver_sql(query)
        except SQLAlchemyError as e:
            logger.error(f"Raw SQL failed: {query}: {e}")
            raise
        return ExecResult(count=1, duration=(time.perf_counter() - start) * 1000)

    def dump(self) -> bytes:
        """Serialize a SQLite database as SQL text.

        Raises:
            InvalidDatabase: If the engine is not SQLite
        """
        if self.engine.dialect.name != 'sqlite':
            raise InvalidDatabase(f"dump is only supported for SQLite, not {self.engine.dialect.name}")
        with self.engine.connect() as connection:
            dbapi_connection = connection.connection.dbapi_connection
            return "\n".join(dbapi_connection.iterdump()).encode('utf-8')


class Database:
    """Validated wrapper around an executor.

    Args:
        database: Any object with callable prepare, dump, batch and exec

    Raises:
        InvalidDatabase: If a capability is missing

    Example:
        >>> db = Database(SQLAlchemyExecutor(engine))
        >>> db.prepare('SELECT 1').first()
    """

    def __init__(self, database: Any):
        if not all(callable(getattr(database, method, None)) for method in REQUIRED_METHODS):
            raise InvalidDatabase("Invalid database, should contain prepare, dump, batch, and exec methods")
        self.database = database

    def prepare(self, query: str):
        return self.database.prepare(query)

    def dump(self):
        return self.database.dump()

    def batch(self, statements):
        return self.database.batch(statements)

    def exec(self, query: str):
        return self.database.exec(query)


def create_sqlalchemy_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create a SQLAlchemy engine.

    Args:
        url: SQLAlchemy URL (defaults to config.database_url)
            An in-memory sqlite:// URL is private to the calling thread.
        echo: Enable SQL statement logging (defaults to config.echo_sql)

    Returns:
        SQLAlchemy Engine
    """
    url = url or config.database_url
    echo = config.echo_sql if echo is None else echo
    logger.debug(f"Creating engine for {url}")
    return create_engine(url, echo=echo)


def connect(url: Optional[str] = None, echo: Optional[bool] = None) -> Database:
    """
    Build a Database backed by a new SQLAlchemy engine.

    Args:
        url: SQLAlchemy URL (defaults to config.database_url)
        echo: Enable SQL statement logging

    Returns:
        Database wrapping a SQLAlchemyExecutor
    """
    return Database(SQLAlchemyExecutor(create_sqlalchemy_engine(url, echo)))
