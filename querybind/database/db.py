"""
Description:
DB-API 2.0 execution unit. Runs bound update statements on a PEP 249
connection taken from a client dict and reports affected rows and generated
keys. Backend specifics live in the subclasses (sqlite, mysql, postgres,
generic).

client - {"conn": connection, "database_type": ..., "database_name": ..., "db_lib": ...}
"""

import logging
from typing import Any, Sequence

from querybind.binding.spec import GeneratedKeys
from querybind.config.runtime import get_config
from querybind.database.unit import ExecutionUnit, Statement, UnitResult

logger = logging.getLogger(__name__)


def _strip_trailing_comment(sql: str) -> str:
    # drops a '--' comment on the last line; '--' inside quoted literals is kept
    head, sep, last = sql.rpartition('\n')
    quote = None
    for i, ch in enumerate(last):
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif last.startswith('--', i):
            return head + sep + last[:i]
    return sql


class Db(ExecutionUnit):

    paramstyle = 'qmark'

    def __init__(self, client):
        self.conn = client['conn']
        self.database_type = client.get('database_type')
        self.database_name = client.get('database_name')
        self.db_lib = client.get('db_lib')
        if self.db_lib in ['psycopg2', 'pymysql']:
            self.paramstyle = 'format'
        self.log_bound_values = get_config().log_bound_values

    def get_cursor(self):
        return self.conn.cursor()

    def uses_returning(self, keys: GeneratedKeys, key_columns) -> bool:
        """Whether keys are read from a RETURNING clause rather than lastrowid."""
        return False

    @staticmethod
    def append_returning(sql: str, key_columns) -> str:
        columns = ', '.join(key_columns) if key_columns else '*'
        body = sql.rstrip()
        while True:
            stripped = _strip_trailing_comment(body).rstrip()
            if stripped == body:
                break
            body = stripped
        return f"{body.rstrip(';').rstrip()} RETURNING {columns}"

    def prepare(self, template, keys=GeneratedKeys.NO_KEYS_RETURNED, key_columns=()):
        keys = GeneratedKeys(keys)
        key_columns = tuple(key_columns)
        sql = template.render(self.paramstyle)
        returning = keys is not GeneratedKeys.NO_KEYS_RETURNED and self.uses_returning(keys, key_columns)
        if returning:
            sql = self.append_returning(sql, key_columns)
        logger.debug(f"Prepared SQL: {sql}")
        return Statement(template=template, sql=sql, keys=keys, key_columns=key_columns, returning=returning)

    def driver_parameters(self, values: Sequence[Any]):
        if self.paramstyle == 'named':
            return {f"p{i}": v for i, v in enumerate(values, start=1)}
        return tuple(values)

    def fetch_keys(self, cur, statement: Statement):
        """
        Collect generated keys after execute.

        Rows of a RETURNING clause when the statement has one, otherwise a
        single key taken from cursor.lastrowid.
        """
        if statement.returning:
            if cur.description is None:
                return ()
            return tuple(tuple(row) for row in cur.fetchall())
        lastrowid = getattr(cur, 'lastrowid', None)
        if lastrowid is None or cur.rowcount == 0:
            return ()
        return ((lastrowid,),)

    def execute_single(self, statement: Statement) -> UnitResult:
        logger.debug(f"Execute SQL: {statement.sql}")
        if self.log_bound_values:
            logger.debug(f"Execute values: {statement.parameters}")

        cur = self.get_cursor()
        try:
            cur.execute(statement.sql, self.driver_parameters(statement.parameters))
            keys = self.fetch_keys(cur, statement) if statement.wants_keys else ()
            affected_rows = cur.rowcount
            if affected_rows is None or affected_rows < 0:
                affected_rows = len(keys)
        finally:
            cur.close()

        logger.info(f"SQL statement succeeded. {affected_rows} rows is affected.")
        return UnitResult(rows_affected=affected_rows,
                          rows_affected_per_row=(affected_rows,),
                          generated_keys=tuple(keys))

    def execute_batch(self, statement: Statement, parameter_sets) -> UnitResult:
        """
        Execute the statement once per parameter set on a single cursor.

        Each set is executed individually so that per-row counts are known;
        drivers report only a total for executemany().
        """
        logger.debug(f"Prepared Execute: {statement.sql}")
        logger.debug(f"Values count: {len(parameter_sets)}")

        counts = []
        cur = self.get_cursor()
        try:
            for values in parameter_sets:
                if self.log_bound_values:
                    logger.debug(f"Execute values: {values}")
                cur.execute(statement.sql, self.driver_parameters(values))
                counts.append(cur.rowcount if cur.rowcount is not None and cur.rowcount >= 0 else 0)
        finally:
            cur.close()

        total = sum(counts)
        logger.info(f"Prepared execute completed with {len(counts)} executions, {total} rows affected")
        return UnitResult(rows_affected=total, rows_affected_per_row=tuple(counts))
