from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

import mysql.connector

from ..core.constants import MYSQL_DUPLICATE_KEY_ERRNO
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection per unit of work: commit on success, rollback on error."""

    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def filtered_select(
    table: str,
    columns: str,
    filters: Iterable[Tuple[str, Any]],
    *,
    order_by: str,
    limit: Optional[int] = None,
) -> Tuple[str, Tuple[Any, ...]]:
    """SELECT with the ``(clause, value)`` filters whose value is not None, ANDed."""

    where: List[str] = []
    params: List[Any] = []
    for clause, value in filters:
        if value is None:
            continue
        where.append(clause)
        params.append(value)

    sql = f"SELECT {columns} FROM {table}"
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += f" ORDER BY {order_by}"
    if limit is not None:
        sql += " LIMIT %s"
        params.append(int(limit))
    return sql, tuple(params)


def normalize_mysql_time(value: Any) -> Optional[time]:
    """TIME columns come back as ``timedelta`` from mysql-connector."""

    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, (seconds % 3600) // 60, seconds % 60)
    if isinstance(value, str):
        h, m, *rest = value.strip().split(":")
        return time(int(h), int(m), int(rest[0]) if rest and rest[0] else 0)
    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")


def is_duplicate_key(exc: BaseException) -> bool:
    """True for MySQL "Duplicate entry" errors (unique key violations)."""

    return isinstance(exc, mysql.connector.Error) and getattr(exc, "errno", None) == MYSQL_DUPLICATE_KEY_ERRNO
