# ==============================================
# Error Taxonomy
# ==============================================
#
# Every error raised by the package derives from ElementStoreError,
# so callers can catch the whole family with one except clause.
#
#   ElementStoreError
#   ├── InvalidIdentifier      (construction time, also ValueError)
#   ├── StorageError           (adapter level)
#   │   ├── StorageReadError
#   │   └── StorageWriteError
#   ├── EncodeError            (state value JSON cannot encode)
#   ├── DecodeError            (stored text is not a JSON object)
#   ├── MetadataDecodeError    (malformed class description)
#   │   └── UnknownTypeTag     (also KeyError)
#   └── MethodNotFound         (also AttributeError, non-fatal on re-link)
#
# ==============================================

from typing import Optional


class ElementStoreError(Exception):
    """Base class for all elementstore errors."""


class InvalidIdentifier(ElementStoreError, ValueError):
    """Raised when an element identifier is empty or not a string."""

    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(
            f"Element identifier must be a non-empty string, got {identifier!r}"
        )


class StorageError(ElementStoreError):
    """A storage adapter call failed."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)


class StorageReadError(StorageError):
    """Retrieving a key from the storage adapter failed."""


class StorageWriteError(StorageError):
    """Storing or deleting a key through the storage adapter failed."""


class EncodeError(ElementStoreError, TypeError):
    """The state holds a value that cannot be encoded as JSON."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"State of {key!r} cannot be encoded as JSON: {reason}")


class DecodeError(ElementStoreError, ValueError):
    """The text stored at a key could not be decoded into a state mapping."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Stored value at {key!r} is not a valid state: {reason}")


class MetadataDecodeError(ElementStoreError, ValueError):
    """A class description or instance record is malformed."""


class UnknownTypeTag(MetadataDecodeError, KeyError):
    """A type tag is not present in the type registry."""

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"No type registered under tag {tag!r}")

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return self.args[0]


class MethodNotFound(ElementStoreError, AttributeError):
    """A method named in stored metadata does not exist on the prototype."""

    def __init__(self, method: str, prototype: str):
        self.method = method
        self.prototype = prototype
        super().__init__(f"{prototype} has no method {method!r}")
