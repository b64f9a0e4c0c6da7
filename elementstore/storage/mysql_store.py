# ==============================================
# MySQLStore
# ==============================================
#
# PURPOSE:
#   StorageAdapter backed by a two-column MySQL table:
#
#     element_key    VARCHAR(255) PRIMARY KEY
#     element_value  LONGTEXT
#
#   Upserts use INSERT ... ON DUPLICATE KEY UPDATE on the primary
#   key. PyMySQL is blocking, so every statement runs in a worker
#   thread via asyncio.to_thread. One connection is shared and
#   guarded by a lock since PyMySQL connections are not thread-safe.
#
# CLASS: MySQLStore
# -----------------
#   Constructor:
#   ------------
#   - __init__(host, port, user, password, database,
#              table="elements", timeout_seconds=5.0)
#       Store connection params. Don't connect yet.
#
#   Methods:
#   --------
#   - connect() -> None
#       Connect, create database and table if they don't exist.
#   - disconnect() -> None
#   - retrieve(key) / store(key, value) / delete(key)
#
# ==============================================

import asyncio
import logging
import threading
from typing import Optional

import pymysql

from elementstore.errors import StorageError, StorageReadError, StorageWriteError
from elementstore.storage.base import StorageAdapter

logger = logging.getLogger(__name__)


class MySQLStore(StorageAdapter):
    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: str,
        table: str = "elements",
        timeout_seconds: float = 5.0,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.table = table
        self.timeout_seconds = timeout_seconds
        self.connection = None
        self._lock = threading.Lock()

    async def connect(self) -> None:
        try:
            await asyncio.to_thread(self._connect_sync)
        except pymysql.MySQLError as e:
            raise StorageError(f"Could not connect to MySQL at {self.host}:{self.port}: {e}") from e
        logger.info("Connected to MySQL %s:%s/%s", self.host, self.port, self.database)

    def _connect_sync(self) -> None:
        timeout = max(1, int(self.timeout_seconds))
        self.connection = pymysql.connect(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            connect_timeout=timeout,
            read_timeout=timeout,
            write_timeout=timeout,
        )
        with self.connection.cursor() as cursor:
            cursor.execute(f"CREATE DATABASE IF NOT EXISTS {self.database}")
            cursor.execute(f"USE {self.database}")
            cursor.execute(
                f"CREATE TABLE IF NOT EXISTS {self.table} ("
                "element_key VARCHAR(255) NOT NULL PRIMARY KEY, "
                "element_value LONGTEXT NOT NULL)"
            )
        self.connection.commit()

    async def disconnect(self) -> None:
        if self.connection is not None:
            await asyncio.to_thread(self.connection.close)
            self.connection = None
            logger.info("Disconnected from MySQL.")

    def _execute(self, query: str, params: tuple, fetch: bool = False):
        # Runs in a worker thread
        if self.connection is None:
            raise StorageError("Not connected to MySQL.")
        with self._lock:
            try:
                with self.connection.cursor() as cursor:
                    cursor.execute(query, params)
                    row = cursor.fetchone() if fetch else None
                self.connection.commit()
            except pymysql.MySQLError:
                self.connection.rollback()
                raise
        return row

    async def retrieve(self, key: str) -> Optional[str]:
        query = f"SELECT element_value FROM {self.table} WHERE element_key = %s"
        try:
            row = await asyncio.to_thread(self._execute, query, (key,), True)
        except pymysql.MySQLError as e:
            raise StorageReadError(f"MySQL read of {key!r} failed: {e}", key=key) from e
        if row is None:
            return None
        return row[0]

    async def store(self, key: str, value: str) -> None:
        query = (
            f"INSERT INTO {self.table} (element_key, element_value) "
            "VALUES (%s, %s) "
            "ON DUPLICATE KEY UPDATE element_value = VALUES(element_value)"
        )
        try:
            await asyncio.to_thread(self._execute, query, (key, value))
        except pymysql.MySQLError as e:
            raise StorageWriteError(f"MySQL write of {key!r} failed: {e}", key=key) from e

    async def delete(self, key: str) -> None:
        query = f"DELETE FROM {self.table} WHERE element_key = %s"
        try:
            await asyncio.to_thread(self._execute, query, (key,))
        except pymysql.MySQLError as e:
            raise StorageWriteError(f"MySQL delete of {key!r} failed: {e}", key=key) from e
