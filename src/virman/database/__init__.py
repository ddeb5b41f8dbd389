"""Database layer for virman application."""

from virman.database.base import Database
from virman.database.factories import (
    create_database,
    create_memory_database,
    create_sqlite_database,
)

__all__ = ["Database", "create_database", "create_memory_database", "create_sqlite_database"]
