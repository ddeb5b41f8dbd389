"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from virman.database.base import Database
from virman.database.memory import InMemoryDatabase
from virman.database.sqlalchemy_db import SQLAlchemyDatabase

MEMORY_URL = "memory://"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks VIRMAN_DB_PATH
            environment variable, then defaults to ~/.virman/virman.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("VIRMAN_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".virman"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "virman.db")

    database = SQLAlchemyDatabase(f"sqlite:///{database_path}")
    database.database_path = database_path
    return database


def create_memory_database() -> InMemoryDatabase:
    """Create an in-process database whose contents die with the process."""
    return InMemoryDatabase()


def create_database(
    database_url: Optional[str] = None, database_path: Optional[str] = None
) -> Database:
    """Create a database from a URL, falling back to the SQLite file.

    Args:
        database_url: ``memory://`` or any SQLAlchemy URL. If None, checks the
            VIRMAN_DATABASE_URL environment variable.
        database_path: SQLite file used when no URL is configured

    Returns:
        Database instance
    """
    if database_url is None:
        database_url = os.environ.get("VIRMAN_DATABASE_URL")

    if database_url is None:
        return create_sqlite_database(database_path)
    if database_url == MEMORY_URL:
        return create_memory_database()
    return SQLAlchemyDatabase(database_url)
