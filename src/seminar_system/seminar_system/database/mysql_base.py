from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from .connection import DatabaseConnection

_DUP_KEY_RE = re.compile(r"for key '([^']+)'")


class DuplicateKeyError(Exception):
    """A unique index rejected an INSERT/UPDATE.

    `key` is the index name without the table prefix MySQL 8 adds.
    """

    def __init__(self, key: str, message: str = ""):
        super().__init__(message or f"Duplicate entry for key {key!r}")
        self.key = key


def duplicate_key_name(exc: mysql.connector.Error) -> Optional[str]:
    if getattr(exc, "errno", None) != errorcode.ER_DUP_ENTRY:
        return None
    match = _DUP_KEY_RE.search(str(getattr(exc, "msg", "") or exc))
    if not match:
        return ""
    return match.group(1).split(".")[-1]


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as exc:
        conn.rollback()
        key = duplicate_key_name(exc)
        if key is not None:
            raise DuplicateKeyError(key, str(exc)) from exc
        raise
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
