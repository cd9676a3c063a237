"""Postgres client library for reviewer-api."""
import logging
from contextlib import closing
from typing import Any, Dict, List

import psycopg2
from psycopg2.extras import RealDictCursor

from ...config.config import get_postgres_dsn

logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Raised when a database call fails."""


def get_connection():
    """Get a Postgres connection."""
    dsn = get_postgres_dsn()
    return psycopg2.connect(dsn)


def execute_query(sql: str, params: tuple) -> List[Dict[str, Any]]:
    """
    Execute a read-only SELECT statement and return results.

    Args:
        sql: SQL SELECT statement
        params: Parameters for the SQL statement

    Returns:
        List of rows as dictionaries
    """
    try:
        with closing(get_connection()) as conn, conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                cursor.execute(sql, params)
                return cursor.fetchall()
    except psycopg2.Error as e:
        logger.error(f"Failed to execute query: {e}")
        raise DatabaseError(f"Database query failed: {e}") from e


def execute_mutation_returning(sql: str, params: tuple) -> List[Dict[str, Any]]:
    """
    Execute a statement that writes and returns rows, committing it.

    Used for stored procedures that mutate state in the same call that
    reports the outcome.

    Args:
        sql: SQL statement
        params: Parameters for the SQL statement

    Returns:
        Returned rows as dictionaries
    """
    try:
        with closing(get_connection()) as conn, conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                cursor.execute(sql, params)
                rows = cursor.fetchall()
                conn.commit()
                return rows
    except psycopg2.Error as e:
        logger.error(f"Failed to execute mutation: {e}")
        raise DatabaseError(f"Database mutation failed: {e}") from e
