# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - store            → fresh InMemoryStore
# - failing_store    → adapter whose every call raises ConnectionError
# - metadata_store   → MetadataStore in a temporary directory
# - fresh_config     → clears the config singleton, isolates env vars
#
# NOTES:
# ------
# - Async tests are marked with @pytest.mark.asyncio (pytest-asyncio)
# - No database server is needed; drivers are replaced with fakes
# ==============================================

import pytest

from elementstore import config as config_module
from elementstore.persistence import MetadataStore
from elementstore.storage import InMemoryStore, StorageAdapter


class FailingStore(StorageAdapter):
    """Adapter that fails every call, counting how often it was used."""

    def __init__(self, error: Exception = None):
        self.error = error or ConnectionError("store unavailable")
        self.calls = 0

    async def retrieve(self, key):
        self.calls += 1
        raise self.error

    async def store(self, key, value):
        self.calls += 1
        raise self.error

    async def delete(self, key):
        self.calls += 1
        raise self.error


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def metadata_store(tmp_path):
    return MetadataStore(str(tmp_path / "metadata"))


ENV_VARS = (
    "ELEMENTSTORE_BACKEND",
    "MONGO_HOST", "MONGO_PORT", "MONGO_USER", "MONGO_PASSWORD", "MONGO_DATABASE", "MONGO_COLLECTION",
    "MYSQL_HOST", "MYSQL_PORT", "MYSQL_USER", "MYSQL_PASSWORD", "MYSQL_DATABASE", "MYSQL_TABLE",
    "STORE_TIMEOUT_SECONDS", "METADATA_DIR", "LOG_LEVEL",
)


@pytest.fixture
def fresh_config(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "_config_instance", None)
    return monkeypatch
