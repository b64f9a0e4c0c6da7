# ==============================================
# STORAGE (key-value adapters)
# ==============================================
#
# The asynchronous key-value boundary behind every Element.
#
# Modules:
# --------
# - base.py          → StorageAdapter abstract contract
# - memory_store.py  → In-process dict store (tests, local runs)
# - mongo_store.py   → MongoDB collection, one document per key
# - mysql_store.py   → MySQL table, one row per key
#
# ==============================================

from elementstore.config import AppConfig
from .base import StorageAdapter
from .memory_store import InMemoryStore
from .mongo_store import MongoStore
from .mysql_store import MySQLStore


def create_store(config: AppConfig) -> StorageAdapter:
    """
    Build the adapter selected by config.backend. The adapter is
    returned unconnected; use it as an async context manager.
    """
    if config.backend == "mongo":
        return MongoStore(
            host=config.mongo.host,
            port=config.mongo.port,
            database=config.mongo.database,
            collection=config.mongo.collection,
            user=config.mongo.user,
            password=config.mongo.password,
            timeout_seconds=config.timeout_seconds,
        )
    if config.backend == "mysql":
        return MySQLStore(
            host=config.mysql.host,
            port=config.mysql.port,
            user=config.mysql.user,
            password=config.mysql.password,
            database=config.mysql.database,
            table=config.mysql.table,
            timeout_seconds=config.timeout_seconds,
        )
    return InMemoryStore()


__all__ = [
    "StorageAdapter",
    "InMemoryStore",
    "MongoStore",
    "MySQLStore",
    "create_store",
]
