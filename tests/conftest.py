"""
Shared pytest configuration and fixtures for all tests.

Key fixtures:
- fake_executor: MagicMock offering prepare/dump/batch/exec, records calls
- fake_database: Database wrapping fake_executor
- sqlite_database: Database backed by a fresh in-memory SQLite engine
- user_columns: column mapping used by model tests
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to sys.path to enable importing project modules
# This allows tests to import from 'core', 'sql', 'models', 'utils' without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests - isolated function-level tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interactions")
    config.addinivalue_line("markers", "smoke: Smoke tests - basic functionality checks")
    config.addinivalue_line("markers", "edge_case: Edge case tests - boundary conditions")


@pytest.fixture
def fake_executor():
    """
    Executor double. prepare() returns a statement whose bind() returns itself,
    so tests can assert on prepare/bind/run arguments.
    """
    executor = MagicMock(name="executor")
    statement = executor.prepare.return_value
    statement.bind.return_value = statement
    return executor


@pytest.fixture
def fake_database(fake_executor):
    from utils.database import Database

    return Database(fake_executor)


@pytest.fixture
def sqlite_database():
    """Database on a private in-memory SQLite engine."""
    from utils.database import connect

    database = connect("sqlite://", echo=False)
    yield database
    database.database.engine.dispose()


@pytest.fixture
def user_columns():
    return {
        "id": {"type": "integer"},
        "name": {"type": "string", "not_null": True},
        "email": {"type": "varchar", "unique": True},
        "is_admin": {"type": "boolean", "default_value": False},
    }
