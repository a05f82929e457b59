import sqlite3

import pytest

from querybind.binding.spec import GeneratedKeys
from querybind.config.config import QuerybindConfig
from querybind.config.runtime import using_config
from querybind.database.unit import ExecutionUnit, Statement, UnitResult
from querybind.template import clear_templates


class RecordingUnit(ExecutionUnit):
    """Execution unit that records every call instead of touching a database."""

    def __init__(self, rows_affected=1, keys=(), error=None):
        self.rows_affected = rows_affected
        self.keys = tuple(keys)
        self.error = error
        self.calls = []

    def prepare(self, template, keys=GeneratedKeys.NO_KEYS_RETURNED, key_columns=()):
        self.calls.append(('prepare', template.source))
        return Statement(template=template, sql=template.render('qmark'),
                         keys=GeneratedKeys(keys), key_columns=tuple(key_columns))

    def execute_single(self, statement):
        self.calls.append(('execute_single', list(statement.parameters)))
        if self.error:
            raise self.error
        return UnitResult(self.rows_affected, (self.rows_affected,), self.keys)

    def execute_batch(self, statement, parameter_sets):
        self.calls.append(('execute_batch', [list(p) for p in parameter_sets]))
        if self.error:
            raise self.error
        per_row = tuple(self.rows_affected for _ in parameter_sets)
        return UnitResult(sum(per_row), per_row, ())

    def executed(self):
        return [c for c in self.calls if c[0].startswith('execute')]


@pytest.fixture(autouse=True)
def default_config():
    with using_config(QuerybindConfig()):
        yield
    clear_templates()


@pytest.fixture
def recording_unit():
    return RecordingUnit()


@pytest.fixture
def sqlite_client():
    conn = sqlite3.connect(':memory:', isolation_level=None)
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE,
            email TEXT,
            active INTEGER DEFAULT 1,
            metadata TEXT
        )
    """)
    client = {"conn": conn, "database_type": "sqlite", "database_name": ":memory:", "db_lib": "sqlite3"}
    yield client
    conn.close()
