# ==============================================
# StorageAdapter
# ==============================================
#
# PURPOSE:
#   The asynchronous key-value boundary every Element talks to.
#   Values are JSON text; the adapter never interprets them.
#
# CONTRACT:
# ---------
#   - retrieve(key) -> str | None   (None when the key is absent)
#   - store(key, value) -> None     (atomic replacement of one key)
#   - delete(key) -> None           (absent key is not an error)
#
#   Adapters translate driver failures into StorageReadError
#   (retrieve) or StorageWriteError (store / delete). They never
#   retry; timeouts come from the driver configuration.
#
#   Context Manager:
#   ----------------
#   - async with Adapter(...) as store:  connect() / disconnect()
#
# ==============================================

from abc import ABC, abstractmethod
from typing import Optional


class StorageAdapter(ABC):
    """Abstract asynchronous key-value store."""

    async def connect(self) -> None:
        """Open the underlying connection. No-op for in-process stores."""

    async def disconnect(self) -> None:
        """Close the underlying connection. No-op for in-process stores."""

    @abstractmethod
    async def retrieve(self, key: str) -> Optional[str]:
        """
        Fetch the text stored at key.

        Args:
            key: Storage key (an element identifier)

        Returns:
            The stored text, or None if nothing is stored at key
        """

    @abstractmethod
    async def store(self, key: str, value: str) -> None:
        """
        Replace whatever is stored at key with value.

        Args:
            key: Storage key (an element identifier)
            value: JSON text to store
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key. Deleting an absent key succeeds silently."""

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()
