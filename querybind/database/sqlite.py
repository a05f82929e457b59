"""
SQLite-specific execution unit.

Keys come from cursor.lastrowid. When explicit key columns are requested a
RETURNING clause is appended instead (SQLite 3.35+).
"""
import sqlite3
import logging

from querybind.binding.spec import GeneratedKeys
from querybind.database.db import Db

logger = logging.getLogger(__name__)


class SqliteDb(Db):

    def __init__(self, client):
        super().__init__(client)
        self.paramstyle = 'qmark'

    def uses_returning(self, keys, key_columns):
        if keys is not GeneratedKeys.RETURNED_KEYS_COLUMNS_SPECIFIED or not key_columns:
            return False
        if sqlite3.sqlite_version_info < (3, 35, 0):
            logger.warning(f"SQLite {sqlite3.sqlite_version} has no RETURNING; falling back to lastrowid")
            return False
        return True
