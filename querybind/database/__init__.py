"""
Execution units for querybind.

This package adapts PEP 249 connections to the execution unit protocol:
- SQLite (via sqlite3)
- PostgreSQL (via psycopg2)
- MySQL / MariaDB (via pymysql)
- any other DB-API 2.0 driver (GenericDb)

Usage:
    from querybind.database import get_unit

    # client is a dict with 'conn', 'database_type', 'database_name', 'db_lib'
    unit = get_unit(client)
"""

from querybind.database.db import Db
from querybind.database.unit import ExecutionUnit, Statement, UnitResult


def get_unit(client):
    """
    Factory function to create the database-specific execution unit.

    Args:
        client: Dictionary containing:
            - conn: Database connection object
            - database_type: 'postgres', 'postgresql', 'mysql', 'mariadb', 'sqlite', ...
            - database_name: Name of the database
            - db_lib: Database library being used ('psycopg2', 'pymysql', 'sqlite3')

    Returns:
        Db subclass instance; GenericDb for unknown database types
    """
    database_type = (client.get('database_type') or '').lower()

    if database_type in ['postgres', 'postgresql']:
        from querybind.database.postgres import PostgresDb
        return PostgresDb(client)
    elif database_type in ['mysql', 'mariadb']:
        from querybind.database.mysql import MySQLDb
        return MySQLDb(client)
    elif database_type == 'sqlite':
        from querybind.database.sqlite import SqliteDb
        return SqliteDb(client)
    else:
        from querybind.database.generic import GenericDb
        return GenericDb(client)


__all__ = [
    'Db',
    'ExecutionUnit',
    'Statement',
    'UnitResult',
    'get_unit',
]
