from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateRecordError, PersistenceError
from ..logging_config import get_logger
from .connection import DatabaseConnection

logger = get_logger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, operation: str, dictionary: bool = True):
    """Yield ``(conn, cur)`` on a fresh connection; commit on success.

    Driver errors are translated once here: a duplicate-key violation becomes
    ``DuplicateRecordError``, anything else ``PersistenceError(operation)``.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("%s: cannot connect: %s", operation, e)
        raise PersistenceError(operation, str(e)) from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        if e.errno == errorcode.ER_DUP_ENTRY:
            raise DuplicateRecordError(f"{operation}: record already exists") from e
        raise PersistenceError(operation, str(e)) from e
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error("%s failed: %s", operation, e)
        raise PersistenceError(operation, str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(column: str, values: list) -> tuple[str, list]:
    """Build ``column IN (%s, ...)`` with its params (values must be non-empty)."""
    placeholders = ",".join(["%s"] * len(values))
    return f"{column} IN ({placeholders})", list(values)


def as_decimal(value: Any) -> Decimal:
    """Normalize MySQL DECIMAL/FLOAT values across connector implementations."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def as_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def as_optional_bool(value: Any) -> Optional[bool]:
    """TINYINT(1) NULL -> tri-state bool."""
    if value is None:
        return None
    return bool(value)
