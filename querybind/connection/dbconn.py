import logging
import importlib
import traceback
from contextlib import contextmanager
from typing import Any, Dict, Generator

from querybind.config.config import DatabaseConfig
from querybind.config.runtime import get_config, require_db
from querybind.errors import QuerybindConnectionError

logger = logging.getLogger(__name__)

# database type -> DB-API module
DRIVER_MAP = {
    'sqlite': 'sqlite3',
    'mysql': 'pymysql',
    'mariadb': 'pymysql',
    'postgres': 'psycopg2',
    'postgresql': 'psycopg2',
}


class DatabaseConnection(object):

    def __init__(self, db_cfg: DatabaseConfig):
        self.database_type = (db_cfg.type or '').lower()
        self.dsn = db_cfg.dsn
        self.host = db_cfg.host
        self.port = db_cfg.port
        self.user = db_cfg.user
        self.password = db_cfg.password
        self.database = db_cfg.database
        self.options = db_cfg.options or {}
        self.autocommit = str(self.options.get('autocommit', True)).lower() not in ('false', '0', 'no')
        self.connect_timeout = get_config().connect_timeout
        self.database_module = DRIVER_MAP.get(self.database_type)
        self.conn = None

    def connect(self):
        if not self.database_module:
            raise QuerybindConnectionError(f"Unsupported database type: {self.database_type}")

        # dynamically load database module according to database type
        db_module = importlib.import_module(self.database_module)

        port = f":{self.port}" if self.port else ''
        connection_msg = f"Connected to the {self.database_type} database '{self.database}' at {self.host}{port}"
        connection_error_msg = f"Failed to connect to the {self.database_type} database '{self.database}' at {self.host}{port}"

        try:
            if self.database_type == 'sqlite':
                self.conn = db_module.connect(self.database or ':memory:',
                                              timeout=self.connect_timeout,
                                              isolation_level=None if self.autocommit else 'DEFERRED')
                logger.info(f"Connected to the sqlite database '{self.database}'")

            elif self.database_type in ['mysql', 'mariadb']:
                self.conn = db_module.connect(host=self.host,
                                              port=self.port or 3306,
                                              user=self.user,
                                              password=self.password,
                                              database=self.database,
                                              connect_timeout=self.connect_timeout,
                                              autocommit=self.autocommit,
                                              )
                logger.info(f"{connection_msg}, connection thread: {self.conn.thread_id()}")

            elif self.database_type in ['postgres', 'postgresql']:
                if not self.dsn:
                    sslmode = self.options.get('sslmode', 'prefer')
                    dsn = f"host={self.host} port={self.port or 5432} dbname={self.database} user={self.user} password={self.password} connect_timeout={self.connect_timeout} sslmode={sslmode}"
                else:
                    dsn = self.dsn
                self.conn = db_module.connect(dsn)
                self.conn.autocommit = self.autocommit
                logger.info(f"{connection_msg}, connection status: {self.conn.status}")

            return self.conn

        except Exception as e:
            logger.error(f"{connection_error_msg}: {e}")
            logger.error(traceback.format_exc())
            raise QuerybindConnectionError(str(e), extra_info=connection_error_msg) from e

    def client(self) -> Dict[str, Any]:
        conn = self.conn or self.connect()
        return {"conn": conn,
                "database_type": self.database_type,
                "database_name": self.database,
                "db_lib": self.database_module}

    def close(self):
        if self.conn is None:
            return
        try:
            self.conn.close()
            logger.info(f"Closed connection to {self.database_type} database '{self.database}'")
        except Exception as e:
            logger.warning(f"Failed to close connection: {e}")
        finally:
            self.conn = None


@contextmanager
def client(db_cfg: DatabaseConfig | str | None = None) -> Generator[Dict[str, Any], None, None]:
    """
    Context manager yielding a client dict for one connection.

    Usage:
        with client("main") as c:
            unit = get_unit(c)
        # connection closed on exit

    Args:
        db_cfg: DatabaseConfig, a configured database key, or None for the default database
    """
    if not isinstance(db_cfg, DatabaseConfig):
        db_cfg = require_db(db_cfg)
    connection = DatabaseConnection(db_cfg)
    try:
        yield connection.client()
    finally:
        connection.close()
