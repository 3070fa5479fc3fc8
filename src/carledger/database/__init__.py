"""Database layer for carledger application."""

from carledger.database.base import Database
from carledger.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
