# ==============================================
# MongoStore
# ==============================================
#
# PURPOSE:
#   StorageAdapter backed by a MongoDB collection.
#   One document per element:  {"_id": <key>, "value": <json text>}
#   Writes are whole-document upserts, which gives the single-key
#   atomic replacement the Element layer relies on.
#
# CLASS: MongoStore
# -----------------
#   Stateful — holds an AsyncMongoClient once connected.
#
#   Constructor:
#   ------------
#   - __init__(host, port, database, collection="elements",
#              user=None, password=None, timeout_seconds=5.0)
#       Store connection params. Don't connect yet.
#
#   Methods:
#   --------
#   - connect() / disconnect()
#   - retrieve(key) / store(key, value) / delete(key)
#
# ==============================================

import logging
from typing import Optional
from urllib.parse import quote_plus

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from elementstore.errors import StorageError, StorageReadError, StorageWriteError
from elementstore.storage.base import StorageAdapter

logger = logging.getLogger(__name__)


class MongoStore(StorageAdapter):
    def __init__(
        self,
        host: str,
        port: int,
        database: str,
        collection: str = "elements",
        user: Optional[str] = None,
        password: Optional[str] = None,
        timeout_seconds: float = 5.0,
    ):
        self.host = host
        self.port = port
        self.database = database
        self.collection_name = collection
        self.user = user
        self.password = password
        self.timeout_seconds = timeout_seconds
        self.client = None  # Will hold the AsyncMongoClient

    @property
    def uri(self) -> str:
        if self.user and self.password:
            return f"mongodb://{quote_plus(self.user)}:{quote_plus(self.password)}@{self.host}:{self.port}/{self.database}"
        return f"mongodb://{self.host}:{self.port}/{self.database}"

    async def connect(self) -> None:
        timeout_ms = int(self.timeout_seconds * 1000)
        self.client = AsyncMongoClient(
            self.uri,
            serverSelectionTimeoutMS=timeout_ms,
            socketTimeoutMS=timeout_ms,
        )
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            await self.client.close()
            self.client = None
            raise StorageError(f"Could not connect to MongoDB at {self.host}:{self.port}: {e}") from e
        logger.info("Connected to MongoDB %s:%s/%s", self.host, self.port, self.database)

    async def disconnect(self) -> None:
        if self.client is not None:
            await self.client.close()
            self.client = None
            logger.info("Disconnected from MongoDB.")

    def _collection(self):
        if self.client is None:
            raise StorageError("Not connected to MongoDB.")
        return self.client[self.database][self.collection_name]

    async def retrieve(self, key: str) -> Optional[str]:
        collection = self._collection()
        try:
            document = await collection.find_one({"_id": key})
        except PyMongoError as e:
            raise StorageReadError(f"MongoDB read of {key!r} failed: {e}", key=key) from e
        if document is None:
            return None
        return document.get("value")

    async def store(self, key: str, value: str) -> None:
        collection = self._collection()
        try:
            await collection.replace_one({"_id": key}, {"_id": key, "value": value}, upsert=True)
        except PyMongoError as e:
            raise StorageWriteError(f"MongoDB write of {key!r} failed: {e}", key=key) from e

    async def delete(self, key: str) -> None:
        collection = self._collection()
        try:
            await collection.delete_one({"_id": key})
        except PyMongoError as e:
            raise StorageWriteError(f"MongoDB delete of {key!r} failed: {e}", key=key) from e
