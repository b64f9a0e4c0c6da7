# ==============================================
# elementstore
# ==============================================
#
# Package Structure:
#
# elementstore/
# ├── element.py        # Element: store-backed state lifecycle
# ├── voting.py         # VotingCandidate: example subclass
# ├── errors.py         # Error taxonomy
# ├── metadata/         # Class descriptions, re-linking, scaffolding
# ├── storage/          # Async key-value adapters (memory, MongoDB, MySQL)
# ├── persistence/      # Class descriptions saved to disk
# ├── config.py         # Configuration management
# └── cli.py            # Command line entry point
#
# ==============================================

__version__ = "0.1.0"

from elementstore.element import Element
from elementstore.errors import (
    DecodeError,
    ElementStoreError,
    EncodeError,
    InvalidIdentifier,
    MetadataDecodeError,
    MethodNotFound,
    StorageError,
    StorageReadError,
    StorageWriteError,
    UnknownTypeTag,
)
from elementstore.storage import InMemoryStore, StorageAdapter
from elementstore.voting import VotingCandidate

__all__ = [
    "Element",
    "VotingCandidate",
    "StorageAdapter",
    "InMemoryStore",
    "ElementStoreError",
    "InvalidIdentifier",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "EncodeError",
    "DecodeError",
    "MetadataDecodeError",
    "UnknownTypeTag",
    "MethodNotFound",
]
