"""
PostgreSQL execution unit (psycopg2).

PostgreSQL does not expose lastrowid for tables with sequences, so every key
request appends a RETURNING clause: the requested key columns, or all columns
when the driver decides.
"""
from querybind.database.db import Db


class PostgresDb(Db):

    def __init__(self, client):
        super().__init__(client)
        self.paramstyle = 'format'

    def uses_returning(self, keys, key_columns):
        return True
