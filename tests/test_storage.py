# ==============================================
# Tests for Storage Adapters
# ==============================================
#
# MongoDB and MySQL drivers are replaced by small in-process
# fakes so the adapters' query shapes and error mapping can be
# checked without a running server.
# ==============================================

import json

import pymysql
import pytest
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError

from elementstore import Element, StorageError, StorageReadError, StorageWriteError
from elementstore.config import AppConfig
from elementstore.storage import InMemoryStore, MongoStore, MySQLStore, create_store
from elementstore.storage import mongo_store as mongo_store_module


class TestInMemoryStore:
    @pytest.mark.asyncio
    async def test_absent_key(self, store):
        assert await store.retrieve("missing") is None

    @pytest.mark.asyncio
    async def test_store_retrieve_delete(self, store):
        await store.store("k", "v1")
        await store.store("k", "v2")
        assert await store.retrieve("k") == "v2"
        await store.delete("k")
        assert await store.retrieve("k") is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_delete_absent_key(self, store):
        await store.delete("missing")

    @pytest.mark.asyncio
    async def test_context_manager(self):
        async with InMemoryStore({"a": "1"}) as store:
            assert store.keys() == ["a"]


class TestCreateStore:
    def test_memory(self):
        assert isinstance(create_store(AppConfig()), InMemoryStore)

    def test_mongo(self):
        store = create_store(AppConfig(backend="mongo"))
        assert isinstance(store, MongoStore)
        assert store.collection_name == "elements"
        assert store.client is None

    def test_mysql(self):
        store = create_store(AppConfig(backend="MySQL"))
        assert isinstance(store, MySQLStore)
        assert store.connection is None


# ----------------------------------------------
# MongoDB fakes
# ----------------------------------------------

class FakeCollection:
    def __init__(self):
        self.documents = {}
        self.fail_with = None

    def _check(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def find_one(self, query):
        self._check()
        document = self.documents.get(query["_id"])
        return dict(document) if document is not None else None

    async def replace_one(self, query, document, upsert=False):
        self._check()
        assert upsert is True
        self.documents[query["_id"]] = dict(document)

    async def delete_one(self, query):
        self._check()
        self.documents.pop(query["_id"], None)


class FakeAdmin:
    def __init__(self, client):
        self.client = client

    async def command(self, name):
        if self.client.ping_error is not None:
            raise self.client.ping_error
        return {"ok": 1}


class FakeAsyncMongoClient:
    instances = []
    ping_error = None

    def __init__(self, uri, **kwargs):
        self.uri = uri
        self.kwargs = kwargs
        self.closed = False
        self.admin = FakeAdmin(self)
        self.collections = {}
        FakeAsyncMongoClient.instances.append(self)

    def __getitem__(self, database):
        client = self

        class Database:
            def __getitem__(self, name):
                return client.collections.setdefault((database, name), FakeCollection())

        return Database()

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_mongo(monkeypatch):
    FakeAsyncMongoClient.instances = []
    FakeAsyncMongoClient.ping_error = None
    monkeypatch.setattr(mongo_store_module, "AsyncMongoClient", FakeAsyncMongoClient)
    return FakeAsyncMongoClient


class TestMongoStore:
    @pytest.mark.asyncio
    async def test_round_trip(self, fake_mongo):
        async with MongoStore("db.local", 27017, "app", collection="things") as store:
            await store.store("candidate_alice", '{"votes": 1}')
            assert await store.retrieve("candidate_alice") == '{"votes": 1}'
            await store.delete("candidate_alice")
            assert await store.retrieve("candidate_alice") is None
            collection = fake_mongo.instances[0].collections[("app", "things")]
            assert collection.documents == {}
        assert fake_mongo.instances[0].closed

    @pytest.mark.asyncio
    async def test_document_shape(self, fake_mongo):
        async with MongoStore("db.local", 27017, "app") as store:
            await store.store("k", "v")
            collection = fake_mongo.instances[0].collections[("app", "elements")]
            assert collection.documents["k"] == {"_id": "k", "value": "v"}

    def test_uri(self):
        assert MongoStore("h", 1, "d").uri == "mongodb://h:1/d"
        assert MongoStore("h", 1, "d", user="u", password="p").uri == "mongodb://u:p@h:1/d"

    def test_uri_escapes_credentials(self):
        store = MongoStore("h", 1, "d", user="u@x", password="p:/w")
        assert store.uri == "mongodb://u%40x:p%3A%2Fw@h:1/d"

    @pytest.mark.asyncio
    async def test_timeouts_passed_to_driver(self, fake_mongo):
        store = MongoStore("h", 1, "d", timeout_seconds=2.5)
        await store.connect()
        assert fake_mongo.instances[0].kwargs["serverSelectionTimeoutMS"] == 2500
        await store.disconnect()

    @pytest.mark.asyncio
    async def test_connect_failure(self, fake_mongo):
        fake_mongo.ping_error = ServerSelectionTimeoutError("no servers")
        store = MongoStore("h", 1, "d")
        with pytest.raises(StorageError):
            await store.connect()
        assert store.client is None
        assert fake_mongo.instances[0].closed

    @pytest.mark.asyncio
    async def test_not_connected(self):
        with pytest.raises(StorageError):
            await MongoStore("h", 1, "d").retrieve("k")

    @pytest.mark.asyncio
    async def test_driver_errors_are_mapped(self, fake_mongo):
        async with MongoStore("h", 1, "d") as store:
            collection = fake_mongo.instances[0].collections.setdefault(("d", "elements"), FakeCollection())
            collection.fail_with = PyMongoError("boom")
            with pytest.raises(StorageReadError):
                await store.retrieve("k")
            with pytest.raises(StorageWriteError):
                await store.store("k", "v")
            with pytest.raises(StorageWriteError):
                await store.delete("k")

    @pytest.mark.asyncio
    async def test_element_on_mongo(self, fake_mongo):
        async with MongoStore("h", 1, "d") as store:
            await Element("doc", store=store).merge_and_save({"a": 1})
            assert await Element("doc", store=store).refresh_and_get() == {"a": 1}


# ----------------------------------------------
# MySQL fakes
# ----------------------------------------------

class FakeCursor:
    def __init__(self, connection):
        self.connection = connection
        self._row = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    def execute(self, query, params=None):
        self.connection.executed.append((query, params))
        if self.connection.fail_with is not None:
            raise self.connection.fail_with
        rows = self.connection.rows
        if query.startswith("SELECT"):
            value = rows.get(params[0])
            self._row = (value,) if value is not None else None
        elif query.startswith("INSERT"):
            assert "ON DUPLICATE KEY UPDATE" in query
            rows[params[0]] = params[1]
        elif query.startswith("DELETE"):
            rows.pop(params[0], None)

    def fetchone(self):
        return self._row


class FakeConnection:
    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.executed = []
        self.rows = {}
        self.fail_with = None
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


@pytest.fixture
def fake_mysql(monkeypatch):
    connections = []

    def connect(**kwargs):
        connection = FakeConnection(**kwargs)
        connections.append(connection)
        return connection

    monkeypatch.setattr(pymysql, "connect", connect)
    return connections


class TestMySQLStore:
    @pytest.mark.asyncio
    async def test_connect_creates_schema(self, fake_mysql):
        async with MySQLStore("h", 3306, "root", "pw", "appdb", table="things", timeout_seconds=3):
            connection = fake_mysql[0]
            queries = [query for query, _ in connection.executed]
            assert queries[0] == "CREATE DATABASE IF NOT EXISTS appdb"
            assert queries[1] == "USE appdb"
            assert queries[2].startswith("CREATE TABLE IF NOT EXISTS things")
            assert connection.kwargs["connect_timeout"] == 3
        assert fake_mysql[0].closed

    @pytest.mark.asyncio
    async def test_round_trip(self, fake_mysql):
        async with MySQLStore("h", 3306, "root", "pw", "appdb") as store:
            assert await store.retrieve("k") is None
            await store.store("k", "v1")
            await store.store("k", "v2")
            assert await store.retrieve("k") == "v2"
            await store.delete("k")
            assert await store.retrieve("k") is None

    @pytest.mark.asyncio
    async def test_driver_errors_are_mapped(self, fake_mysql):
        async with MySQLStore("h", 3306, "root", "pw", "appdb") as store:
            connection = fake_mysql[0]
            connection.fail_with = pymysql.OperationalError(2013, "Lost connection")
            with pytest.raises(StorageReadError):
                await store.retrieve("k")
            with pytest.raises(StorageWriteError) as excinfo:
                await store.store("k", "v")
            assert excinfo.value.key == "k"
            assert connection.rollbacks == 2

    @pytest.mark.asyncio
    async def test_connect_failure(self, monkeypatch):
        def connect(**kwargs):
            raise pymysql.OperationalError(2003, "Can't connect")

        monkeypatch.setattr(pymysql, "connect", connect)
        with pytest.raises(StorageError):
            await MySQLStore("h", 3306, "root", "pw", "appdb").connect()

    @pytest.mark.asyncio
    async def test_not_connected(self):
        with pytest.raises(StorageError):
            await MySQLStore("h", 3306, "root", "pw", "appdb").store("k", "v")

    @pytest.mark.asyncio
    async def test_element_on_mysql(self, fake_mysql):
        async with MySQLStore("h", 3306, "root", "pw", "appdb") as store:
            element = Element("doc", {"a": 1}, store=store)
            await element.merge_and_save({"b": 2})
            assert json.loads(fake_mysql[0].rows["doc"]) == {"a": 1, "b": 2}
