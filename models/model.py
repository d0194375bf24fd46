"""
=============================================
Model: a validated table bound to a database.
=============================================

A Model owns one ValidatedSchema and, optionally, a Database. Table
management goes through the DDL renderer, row operations go through the
statement synthesizer, and both end up as SQL handed to the database
executor with positional bindings.

Operations:
    create_table / drop_table: CREATE TABLE (default or force) and DROP TABLE
    first / all: SELECT one row or many
    insert_one / insert_many: INSERT [or REPLACE], many rows in one batch
    update / delete: UPDATE and DELETE filtered by column equality
    upsert: INSERT ... ON CONFLICT (primary keys) DO UPDATE

Example:
    >>> from models.model import Model
    >>> from utils.database import connect
    >>>
    >>> users = Model(
    ...     {'table_name': 'users', 'primary_keys': 'id', 'auto_increment': 'id'},
    ...     {'id': {'type': 'integer'}, 'name': {'type': 'string', 'not_null': True}},
    ...     database=connect()
    ... )
    >>> users.create_table()
    >>> users.insert_one({'name': 'Ada'})
    >>> users.first({'name': 'Ada'})
    {'id': 1, 'name': 'Ada'}
"""

from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple, Union

from core.exceptions import InvalidArgument, InvalidDatabase, OrmError, StrategyNotImplemented
from core.logger import get_logger
from models.schema import ModelColumn, ModelOptions, ValidatedSchema, validate_schema
from sql.ddl import drop_table_sql
from sql.query_builder import GenerateQueryOptions, GeneratedQuery, QueryType, generate_query
from utils.database import Database

logger = get_logger(__name__)

CREATE_TABLE_STRATEGIES = ('default', 'force', 'alter')


class Model:
    """A table schema plus the row operations generated from it.

    Attributes:
        schema: ValidatedSchema, immutable after construction

    Args:
        options: ModelOptions or dict (table_name, primary_keys, auto_increment,
            unique_keys, without_rowid)
        columns: Mapping of column name to ModelColumn or dict
        database: Optional Database, can be set later with set_database()

    Raises:
        InvalidSchema: If the options or columns are invalid
        InvalidDatabase: If database is given but is not a Database
    """

    def __init__(
        self,
        options: Union[ModelOptions, Mapping[str, Any]],
        columns: Mapping[str, Union[ModelColumn, Mapping[str, Any]]],
        database: Optional[Database] = None
    ):
        self.schema: ValidatedSchema = validate_schema(options, columns)
        self._database: Optional[Database] = None
        if database is not None:
            self.set_database(database)

    def __repr__(self) -> str:
        return f"<Model {self.table_name} primary_keys={self.primary_keys}>"

    @property
    def table_name(self) -> str:
        return self.schema.table_name

    @property
    def columns(self) -> Mapping[str, ModelColumn]:
        return self.schema.columns

    @property
    def primary_keys(self) -> Tuple[str, ...]:
        return self.schema.primary_keys

    @property
    def create_table_definition(self) -> str:
        return self.schema.create_table_definition

    @property
    def database(self) -> Database:
        """The bound Database.

        Raises:
            OrmError: If no database has been set
        """
        if self._database is None:
            raise OrmError(f"Model {self.table_name} has no database, call set_database() first")
        return self._database

    def set_database(self, database: Database) -> None:
        """Bind the model to a Database.

        Raises:
            InvalidDatabase: If database is not a Database instance
        """
        if not isinstance(database, Database):
            raise InvalidDatabase("database is not an instance of Database")
        self._database = database

    def _prepare(self, statement: GeneratedQuery):
        return self.database.prepare(statement.query).bind(*statement.bindings)

    def create_table(self, strategy: str = 'default'):
        """
        Create the table.

        Args:
            strategy: 'default' creates the table, 'force' drops it first if it
                exists, 'alter' is not supported

        Returns:
            The executor's exec() result

        Raises:
            StrategyNotImplemented: For the 'alter' strategy
            InvalidArgument: For an unknown strategy
        """
        if strategy not in CREATE_TABLE_STRATEGIES:
            raise InvalidArgument(f"Unknown create table strategy: {strategy!r}")
        if strategy == 'alter':
            raise StrategyNotImplemented("Alter strategy is not implemented")
        if strategy == 'force':
            self.drop_table(silent=True)
        logger.info(f"Creating table {self.table_name}")
        return self.database.exec(self.create_table_definition)

    def drop_table(self, silent: bool = False):
        """Drop the table; silent adds IF EXISTS."""
        logger.info(f"Dropping table {self.table_name}")
        return self.database.exec(drop_table_sql(self.table_name, if_exists=silent))

    def first(self, where: Optional[Mapping[str, Any]] = None) -> Optional[dict]:
        """Return the first row matching where, or None."""
        statement = generate_query(
            QueryType.SELECT, self.table_name, GenerateQueryOptions(where=where, limit=1)
        )
        return self._prepare(statement).first()

    def all(self, options: Optional[Union[GenerateQueryOptions, Mapping[str, Any]]] = None):
        """
        Return every row matching the clause bundle.

        Args:
            options: where, order_by, limit and offset clauses

        Returns:
            The executor's result envelope
        """
        statement = generate_query(QueryType.SELECT, self.table_name, options)
        return self._prepare(statement).all()

    def insert_one(self, data: Mapping[str, Any], or_replace: bool = False):
        """Insert one row, replacing on conflict when or_replace is set."""
        query_type = QueryType.INSERT_OR_REPLACE if or_replace else QueryType.INSERT
        statement = generate_query(query_type, self.table_name, GenerateQueryOptions(data=data))
        return self._prepare(statement).run()

    def insert_many(self, rows: Iterable[Mapping[str, Any]], or_replace: bool = False):
        """
        Insert several rows in one batch.

        Args:
            rows: Row mappings, each may name different columns
            or_replace: Use INSERT or REPLACE

        Returns:
            The executor's batch() result, one entry per row
        """
        query_type = QueryType.INSERT_OR_REPLACE if or_replace else QueryType.INSERT
        statements = [
            self._prepare(generate_query(query_type, self.table_name, GenerateQueryOptions(data=row)))
            for row in rows
        ]
        if not statements:
            raise InvalidArgument("Must provide data to insert")
        logger.debug(f"Inserting {len(statements)} rows into {self.table_name}")
        return self.database.batch(statements)

    def update(self, where: Optional[Mapping[str, Any]], data: Mapping[str, Any]):
        """Set data on every row matching where."""
        statement = generate_query(
            QueryType.UPDATE, self.table_name, GenerateQueryOptions(where=where, data=data)
        )
        return self._prepare(statement).run()

    def delete(self, where: Optional[Mapping[str, Any]] = None):
        """Delete every row matching where; no filter deletes all rows."""
        statement = generate_query(QueryType.DELETE, self.table_name, GenerateQueryOptions(where=where))
        return self._prepare(statement).run()

    def upsert(
        self,
        data: Mapping[str, Any],
        upsert_only_update_data: Mapping[str, Any],
        where: Mapping[str, Any],
        conflict_keys: Optional[Union[str, Sequence[str]]] = None
    ):
        """
        Insert data, or update the conflicting row.

        Args:
            data: Row to insert
            upsert_only_update_data: Columns set on the existing row on conflict
            where: Filter the conflicting row must match to be updated
            conflict_keys: Conflict target, defaults to the primary keys

        Returns:
            The executor's run() result
        """
        statement = generate_query(
            QueryType.UPSERT,
            self.table_name,
            GenerateQueryOptions(data=data, upsert_only_update_data=upsert_only_update_data, where=where),
            primary_keys=conflict_keys or self.primary_keys
        )
        return self._prepare(statement).run()
