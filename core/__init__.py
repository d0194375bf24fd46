"""
========================================
Core infrastructure package for the ORM.
========================================

This package provides centralized configuration, logging and the exception
hierarchy used throughout the library.

Modules:
    config: Configuration management from environment variables
    logger: Centralized logging configuration and utilities
    exceptions: OrmError and its subclasses

Example:
    >>> from core.config import config
    >>> from core.logger import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info(f"Default database: {config.database_url}")
"""

__version__ = "0.9.1"
__all__ = [
    'get_logger', 'setup_logging', 'config', 'Config',
    'OrmError', 'InvalidSchema', 'InvalidArgument',
    'StrategyNotImplemented', 'InvalidDatabase'
]

from core.config import Config, config
from core.exceptions import (
    InvalidArgument,
    InvalidDatabase,
    InvalidSchema,
    OrmError,
    StrategyNotImplemented,
)
from core.logger import get_logger, setup_logging
