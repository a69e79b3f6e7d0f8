from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import StorageError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Open a connection and cursor, commit on success, roll back on error.

    Integrity errors are re-raised untouched so repositories can turn
    duplicate keys into conflicts. Other driver errors become StorageError.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise StorageError("Database unavailable") from e
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError:
        conn.rollback()
        raise
    except mysql.connector.Error as e:
        conn.rollback()
        raise StorageError("Database error") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def is_duplicate_key(error: mysql.connector.Error) -> bool:
    return getattr(error, "errno", None) == errorcode.ER_DUP_ENTRY


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def dump_json(value: Optional[dict]) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value)


def load_json(value: Any) -> Optional[dict]:
    """Normalize JSON column values across connector implementations.

    mysql-connector can return JSON as str, bytes or an already decoded dict.
    """

    if value is None:
        return None
    if isinstance(value, dict):
        return value
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value) if value.strip() else None
    raise TypeError(f"Unsupported JSON column value type: {type(value)!r}")
