"""
=====================================
Configuration management for the ORM.
=====================================

Loads configuration from environment variables (.env file) and provides
a centralized Config singleton for library-wide access.

The configuration covers:
- The default database URL used when no engine is supplied
- SQL echo for the SQLAlchemy engine
- Logging level, destination and console colours

Environment variables:
    ORM_DATABASE_URL: SQLAlchemy URL (default: in-memory SQLite)
    ORM_ECHO_SQL: Echo executed SQL through SQLAlchemy (default: false)
    ORM_LOG_LEVEL: Logging level (default: INFO)
    ORM_LOG_FILE: Optional log file name
    ORM_LOG_DIR: Directory for the log file (default: logs)
    ORM_LOG_COLORS: Coloured console output (default: true)

Example:
    >>> from core.config import config
    >>>
    >>> engine_url = config.database_url
    >>> print(f"Logging at {config.log_level}")
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}


def _env_flag(name: str, default: str) -> bool:
    """Read a boolean flag from the environment."""
    return os.getenv(name, default).strip().lower() in _TRUE_VALUES


@dataclass
class DatabaseConfig:
    """Database configuration settings.

    Attributes:
        url: SQLAlchemy database URL
        echo: If True, SQLAlchemy logs every statement it executes
    """

    url: str
    echo: bool

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured URL points at a SQLite database."""
        return self.url.startswith('sqlite')


@dataclass
class LoggingConfig:
    """Logging configuration settings.

    Attributes:
        level: Logging level name (DEBUG/INFO/WARNING/ERROR/CRITICAL)
        log_file: Optional log file name
        log_dir: Directory the log file is written to
        use_colors: If True, console output is coloured
    """

    level: str
    log_file: Optional[str]
    log_dir: str
    use_colors: bool


class Config:
    """Centralized configuration manager.

    Attributes:
        db: DatabaseConfig instance with database settings
        logging: LoggingConfig instance with logging settings

    The default ORM_DATABASE_URL, sqlite://, is an in-memory database.
    SQLAlchemy pools it per thread, so each thread sees its own empty
    database. Use a file URL such as sqlite:///app.db to share data.

    Example:
        >>> config = Config()
        >>> print(config.database_url)
        sqlite://
    """

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.db = DatabaseConfig(
            url=os.getenv('ORM_DATABASE_URL', 'sqlite://'),
            echo=_env_flag('ORM_ECHO_SQL', 'false')
        )

        self.logging = LoggingConfig(
            level=os.getenv('ORM_LOG_LEVEL', 'INFO').upper(),
            log_file=os.getenv('ORM_LOG_FILE') or None,
            log_dir=os.getenv('ORM_LOG_DIR', 'logs'),
            use_colors=_env_flag('ORM_LOG_COLORS', 'true')
        )

    @property
    def database_url(self) -> str:
        """Get the default SQLAlchemy database URL."""
        return self.db.url

    @property
    def echo_sql(self) -> bool:
        """Get whether SQLAlchemy should echo statements."""
        return self.db.echo

    @property
    def log_level(self) -> str:
        """Get the configured logging level name."""
        return self.logging.level


# Global configuration instance
config = Config()
