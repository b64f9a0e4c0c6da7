# ==============================================
# InMemoryStore
# ==============================================
#
# PURPOSE:
#   Dict-backed StorageAdapter for local runs and tests.
#   Every call yields to the event loop once before touching the
#   dict, so two tasks racing on the same key interleave the way
#   they would against a real network store.
#
# ==============================================

import asyncio
import logging
from typing import Dict, Optional

from elementstore.storage.base import StorageAdapter

logger = logging.getLogger(__name__)


class InMemoryStore(StorageAdapter):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def retrieve(self, key: str) -> Optional[str]:
        await asyncio.sleep(0)
        return self._data.get(key)

    async def store(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        self._data[key] = value
        logger.debug("Stored %d chars at %r", len(value), key)

    async def delete(self, key: str) -> None:
        await asyncio.sleep(0)
        self._data.pop(key, None)

    def keys(self):
        # Snapshot of stored keys, for inspection in tests and the CLI
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: str) -> bool:
        return key in self._data
