from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector import errors, pooling
from mysql.connector.constants import ClientFlag

from ..app_logger import get_logger
from ..core.constants import DEFAULT_CONNECTION_TIMEOUT, DEFAULT_DB_PORT, DEFAULT_POOL_SIZE, POOL_RETRY_INTERVAL
from ..core.exceptions import PersistenceError, StorageUnavailableError

log = get_logger("database")


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = DEFAULT_POOL_SIZE
    connection_timeout: int = DEFAULT_CONNECTION_TIMEOUT

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", DEFAULT_DB_PORT)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "english_center")),
            pool_size=int(db_config.get("pool_size", DEFAULT_POOL_SIZE)),
            connection_timeout=int(db_config.get("connection_timeout", DEFAULT_CONNECTION_TIMEOUT)),
        )

    def describe(self) -> str:
        """Connection target without the password, for logs."""
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseClient:
    """Owns the MySQL connection pool.

    The client is constructed explicitly and handed to every repository. Call
    ``open()`` before the first query and ``close()`` on shutdown; each
    repository operation borrows one pooled connection through ``connect()``
    and gives it back when its transaction ends.
    """

    def __init__(self, config: DBConfig, *, pool_name: str = "english_center"):
        self._config = config
        self._pool_name = pool_name
        self._pool: Optional[pooling.MySQLConnectionPool] = None

    @property
    def config(self) -> DBConfig:
        return self._config

    def open(self) -> "DatabaseClient":
        if self._pool is not None:
            return self
        try:
            self._pool = pooling.MySQLConnectionPool(
                pool_name=self._pool_name,
                pool_size=self._config.pool_size,
                pool_reset_session=True,
                host=self._config.host,
                port=int(self._config.port),
                user=self._config.user,
                password=self._config.password,
                database=self._config.database,
                connection_timeout=self._config.connection_timeout,
                autocommit=False,
                # rowcount counts matched rows, not changed rows
                client_flags=[ClientFlag.FOUND_ROWS],
            )
        except errors.Error as exc:
            log.error("Could not open connection pool for %s: %s", self._config.describe(), exc)
            raise StorageUnavailableError("Storage unavailable") from exc
        log.info("Connection pool ready (%s, size=%s)", self._config.describe(), self._config.pool_size)
        return self

    def close(self) -> None:
        if self._pool is None:
            return
        # The connector has no public call to drain a pool.
        drain = getattr(self._pool, "_remove_connections", None)
        if callable(drain):
            drain()
        else:
            log.warning("Connection pool cannot be drained; idle connections close with the process")
        self._pool = None
        log.info("Connection pool closed (%s)", self._config.describe())

    def connect(self):
        """Borrow a pooled connection.

        When every connection is in use this waits up to ``connection_timeout``
        seconds for one to be returned before giving up.
        """

        if self._pool is None:
            raise PersistenceError("Database client is not open")
        deadline = time.monotonic() + self._config.connection_timeout
        while True:
            try:
                return self._pool.get_connection()
            except errors.PoolError as exc:
                if time.monotonic() >= deadline:
                    log.error("Pool exhausted for %ss (%s)", self._config.connection_timeout, self._config.describe())
                    raise PersistenceError(f"No database connection available: {exc}") from exc
                time.sleep(POOL_RETRY_INTERVAL)
            except errors.Error as exc:
                raise StorageUnavailableError("Storage unavailable") from exc

    def ping(self) -> bool:
        """True when a pooled connection can run ``SELECT 1``; failures are logged."""
        try:
            conn = self.connect()
        except PersistenceError as exc:
            log.warning("Database ping failed: %s", exc)
            return False
        try:
            cur = conn.cursor()
            try:
                cur.execute("SELECT 1")
                cur.fetchall()
            finally:
                cur.close()
            return True
        except errors.Error as exc:
            log.warning("Database ping failed: %s", exc)
            return False
        finally:
            conn.close()


def connect_direct(config: DBConfig, *, with_database: bool = True):
    """Unpooled connection for schema bootstrap scripts."""
    kwargs = dict(
        host=config.host,
        port=int(config.port),
        user=config.user,
        password=config.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = config.database
    return mysql.connector.connect(**kwargs)
