from __future__ import annotations

import threading
import time
from unittest.mock import MagicMock

import pytest
from mysql.connector import errors

from english_center.core.exceptions import PersistenceError
from english_center.database.connection import DatabaseClient, DBConfig


class SingleConnectionPool:
    """Pool of size one that fails fast when exhausted, like the connector's."""

    def __init__(self):
        self.connection = MagicMock(name="connection")
        self._free = [self.connection]
        self._lock = threading.Lock()

    def get_connection(self):
        with self._lock:
            if not self._free:
                raise errors.PoolError("Failed getting connection; pool exhausted")
            return self._free.pop()

    def give_back(self, conn):
        with self._lock:
            self._free.append(conn)


def open_client(pool, *, timeout):
    client = DatabaseClient(DBConfig.from_dict({"pool_size": 1, "connection_timeout": timeout}))
    client._pool = pool
    return client


def test_connect_waits_for_a_returned_connection():
    pool = SingleConnectionPool()
    client = open_client(pool, timeout=2)
    borrowed = client.connect()

    releaser = threading.Timer(0.05, pool.give_back, args=(borrowed,))
    releaser.start()
    started = time.monotonic()
    try:
        again = client.connect()
    finally:
        releaser.join()

    assert again is pool.connection
    assert time.monotonic() - started >= 0.04


def test_connect_gives_up_after_timeout():
    pool = SingleConnectionPool()
    client = open_client(pool, timeout=0)
    client.connect()

    with pytest.raises(PersistenceError, match="No database connection available"):
        client.connect()


def test_close_drains_pool_when_supported():
    pool = MagicMock()
    client = open_client(pool, timeout=1)

    client.close()

    pool._remove_connections.assert_called_once()
    with pytest.raises(PersistenceError, match="not open"):
        client.connect()


def test_close_without_drain_hook_still_closes():
    client = open_client(SingleConnectionPool(), timeout=1)

    client.close()

    assert client.ping() is False
