"""
===================
Database utilities.
===================

Database façade and the bundled SQLAlchemy executor.

Modules:
    database: Database, SQLAlchemyExecutor, engine creation helpers
"""

__version__ = "0.9.1"
__all__ = [
    'Database',
    'SQLAlchemyExecutor',
    'PreparedStatement',
    'QueryResult',
    'ExecResult',
    'create_sqlalchemy_engine',
    'connect'
]

from .database import (
    Database,
    ExecResult,
    PreparedStatement,
    QueryResult,
    SQLAlchemyExecutor,
    connect,
    create_sqlalchemy_engine,
)
