"""
MySQL/MariaDB execution unit (PyMySQL).

MySQL has no RETURNING clause; keys are derived from cursor.lastrowid, which
holds the first id of a multi-row insert. Ids of the following rows are
assumed consecutive (innodb_autoinc_lock_mode 0 or 1).
"""
import logging

from querybind.database.db import Db

logger = logging.getLogger(__name__)


class MySQLDb(Db):

    def __init__(self, client):
        super().__init__(client)
        self.paramstyle = 'format'

    def fetch_keys(self, cur, statement):
        if statement.key_columns:
            logger.debug(f"MySQL ignores key columns {statement.key_columns}; using lastrowid")
        first_id = cur.lastrowid
        if not first_id or cur.rowcount <= 0:
            return ()
        return tuple((first_id + offset,) for offset in range(cur.rowcount))
