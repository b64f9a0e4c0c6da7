# ==============================================
# Element — Store-Backed Stateful Entity
# ==============================================
#
# PURPOSE:
#   An object whose state lives in a key-value store under a
#   stable identifier. Reads refresh from the store, writes merge
#   into the last-known state and push the whole state back.
#
# LIFECYCLE:
#
#   construct ──► in-memory state only (no I/O)
#        │
#        ├── refresh_and_get() ── retrieve ── decode ── REPLACE state
#        │                          (absent key: state unchanged)
#        │
#        └── merge_and_save(patch) ── MERGE patch ── encode ── store
#                                      (unencodable patch: state untouched)
#                                      (failed store: no rollback)
#
# CONSISTENCY:
#   Last-writer-wins per key. A read-then-write sequence (see
#   VotingCandidate.vote_for) is not atomic: two concurrent callers
#   can both read the same value and one increment is lost.
#
# WIRE FORMAT:
#   The stored value is the JSON text of the full state mapping.
#   No envelope, no version tag.
#
# ==============================================

import json
import logging
from typing import Any, Dict, Mapping, Optional

from elementstore.errors import (
    DecodeError,
    EncodeError,
    InvalidIdentifier,
    StorageReadError,
    StorageWriteError,
)
from elementstore.metadata import decode_into_instance, default_registry, encode_description
from elementstore.storage.base import StorageAdapter

logger = logging.getLogger(__name__)


@default_registry.register
class Element:
    """
    Base class for objects whose state is synchronized with a key-value store.

    Subclasses fix an identifier scheme and add typed accessors on top of
    refresh_and_get() and merge_and_save().

    Args:
        identifier: Storage key for this element. Must be a non-empty string.
        initial_state: State used until the first successful load. Copied.
        store: The StorageAdapter every read and write goes through.
    """

    identifier: str
    state: Dict[str, Any]

    def __init__(
        self,
        identifier: str,
        initial_state: Optional[Mapping[str, Any]] = None,
        *,
        store: StorageAdapter,
    ):
        if not isinstance(identifier, str) or not identifier:
            raise InvalidIdentifier(identifier)
        self._identifier = identifier
        self.state = dict(initial_state or {})
        self.store = store

    @property
    def identifier(self) -> str:
        return self._identifier

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    async def merge_and_save(self, partial_state: Mapping[str, Any]) -> None:
        """
        Shallow-merge partial_state into the current state, then persist it.

        Keys in partial_state overwrite same-named keys; other keys are kept.
        The merged state stays in memory even if the write fails. A patch
        that cannot be encoded as JSON leaves the state untouched.

        Raises:
            EncodeError: The merged state holds a value JSON cannot encode
            StorageWriteError: The adapter could not store the state
        """
        merged = {**self.state, **partial_state}
        serialized = self._encode(merged)
        self.state = merged
        await self._store_encoded(serialized)

    async def update_data(self, partial_state: Mapping[str, Any]) -> None:
        await self.merge_and_save(partial_state)

    async def update(self, partial_state: Mapping[str, Any]) -> None:
        """Same as merge_and_save; named to match subclass accessors."""
        await self.merge_and_save(partial_state)

    async def save_state(self) -> None:
        """Encode the current state as JSON and store it at identifier."""
        await self._store_encoded(self._encode(self.state))

    def _encode(self, state: Mapping[str, Any]) -> str:
        try:
            return json.dumps(state)
        except (TypeError, ValueError) as e:
            raise EncodeError(self.identifier, str(e)) from e

    async def _store_encoded(self, serialized: str) -> None:
        try:
            await self.store.store(self.identifier, serialized)
        except StorageWriteError:
            raise
        except Exception as e:
            raise StorageWriteError(
                f"Saving {self.identifier!r} failed: {e}", key=self.identifier
            ) from e
        logger.debug("Saved state for %r (%d fields)", self.identifier, len(self.state))

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    async def refresh_and_get(self) -> Dict[str, Any]:
        """
        Reload state from the store and return it.

        If the store holds a value it replaces the in-memory state
        entirely. If the key is absent the in-memory state is left as is.

        Raises:
            StorageReadError: The adapter could not retrieve the key
            DecodeError: The stored text is not a JSON object
        """
        await self.load_state()
        return self.state

    async def get_state(self) -> Dict[str, Any]:
        return await self.refresh_and_get()

    async def load_state(self) -> None:
        try:
            stored = await self.store.retrieve(self.identifier)
        except StorageReadError:
            raise
        except Exception as e:
            raise StorageReadError(
                f"Loading {self.identifier!r} failed: {e}", key=self.identifier
            ) from e

        if not stored:
            logger.debug("No stored state for %r; keeping in-memory state", self.identifier)
            return

        try:
            decoded = json.loads(stored)
        except json.JSONDecodeError as e:
            raise DecodeError(self.identifier, str(e)) from e
        if not isinstance(decoded, dict):
            raise DecodeError(
                self.identifier, f"expected a JSON object, got {type(decoded).__name__}"
            )
        self.state = decoded

    # ------------------------------------------------------------------
    # Snapshots and class metadata
    # ------------------------------------------------------------------

    def to_plain_value(self) -> Dict[str, Any]:
        """Current in-memory state, without touching the store."""
        return self.state

    to_json = to_plain_value

    def serialize(self) -> str:
        # Always describes the base Element type, whatever self's class is
        return encode_description(Element)

    @classmethod
    def deserialize(cls, data: Mapping[str, Any], store: StorageAdapter) -> "Element":
        """Rebuild an element from an instance record, re-linking methods from cls."""
        return decode_into_instance(data, store, prototype=cls)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(identifier={self.identifier!r})"

