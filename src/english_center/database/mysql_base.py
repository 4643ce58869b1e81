from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Type

from mysql.connector import errorcode, errors

from ..app_logger import get_logger
from ..core.exceptions import (
    ConflictError,
    InvalidReferenceError,
    PersistenceError,
    StorageUnavailableError,
)
from .connection import DatabaseClient

log = get_logger("database")

_MISSING_PARENT_ERRNOS = {errorcode.ER_NO_REFERENCED_ROW, errorcode.ER_NO_REFERENCED_ROW_2}
_REFERENCED_ROW_ERRNOS = {errorcode.ER_ROW_IS_REFERENCED, errorcode.ER_ROW_IS_REFERENCED_2}
_UNAVAILABLE_ERRNOS = {
    errorcode.CR_CONNECTION_ERROR,
    errorcode.CR_CONN_HOST_ERROR,
    errorcode.CR_UNKNOWN_HOST,
    errorcode.CR_SERVER_GONE_ERROR,
    errorcode.CR_SERVER_LOST,
}


@contextmanager
def db_cursor(client: DatabaseClient, *, dictionary: bool = True):
    """Borrow a pooled connection for one transaction.

    Commits when the block exits normally, rolls back on any exception, and
    always hands the connection back to the pool.
    """

    conn = client.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def storage_errors(
    action: str,
    *,
    invalid_reference: Optional[str] = None,
    duplicate: Optional[str] = None,
    duplicate_error: Type[ConflictError] = ConflictError,
    referenced: Optional[str] = None,
):
    """Translate mysql-connector errors raised inside the block into domain errors.

    ``action`` completes the generic message ("Error <action>: ..."); the other
    keywords override the message for the matching integrity failure.
    """

    try:
        yield
    except errors.IntegrityError as exc:
        if exc.errno in _MISSING_PARENT_ERRNOS:
            log.warning("Invalid reference while %s: %s", action, exc.msg)
            raise InvalidReferenceError(invalid_reference or f"Error {action}: referenced row does not exist") from exc
        if exc.errno == errorcode.ER_DUP_ENTRY:
            log.warning("Duplicate entry while %s: %s", action, exc.msg)
            raise duplicate_error(duplicate or f"Error {action}: record already exists") from exc
        if exc.errno in _REFERENCED_ROW_ERRNOS:
            log.warning("Referenced row while %s: %s", action, exc.msg)
            raise ConflictError(referenced or f"Error {action}: record is still referenced") from exc
        log.error("Integrity error while %s: %s", action, exc)
        raise PersistenceError(f"Error {action}: {exc.msg}") from exc
    except errors.Error as exc:
        if exc.errno in _UNAVAILABLE_ERRNOS:
            log.error("Storage unavailable while %s: %s", action, exc)
            raise StorageUnavailableError("Storage unavailable") from exc
        log.error("Storage error while %s: %s", action, exc)
        raise PersistenceError(f"Error {action}: {exc.msg or exc}") from exc


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def like_pattern(term: str) -> str:
    """Substring pattern for LIKE; escapes the wildcard characters in ``term``."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
