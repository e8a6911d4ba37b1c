"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from cashbook.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DB_PATH_ENV = "CASHBOOK_DB_PATH"


def default_database_path() -> Path:
    """Default location of the SQLite file, ~/.cashbook/cashbook.db."""
    return Path.home() / ".cashbook" / "cashbook.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks CASHBOOK_DB_PATH
            environment variable, then defaults to ~/.cashbook/cashbook.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        path = default_database_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        database_path = str(path)

    logger.debug("Opening SQLite database at %s", database_path)
    return SQLAlchemyDatabase(f"sqlite:///{database_path}")
