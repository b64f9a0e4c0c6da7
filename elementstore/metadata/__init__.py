# ==============================================
# CLASS METADATA (shape of a type, not of an instance)
# ==============================================
#
# This package describes an Element type's declared properties and
# methods, encodes that description as JSON, re-links behavior onto
# decoded instances by name, and scaffolds class source from a
# stored description.
#
# Modules:
# --------
# - description.py  → describe / encode / decode class descriptions
# - registry.py     → TypeRegistry: stable type tag → local class
# - relink.py       → encode_instance / decode_into_instance
# - scaffold.py     → synthesize_type: description → class source text
#
# ==============================================

from .description import (
    ClassDescription,
    Schema,
    decode_description,
    describe,
    encode_description,
)
from .registry import TypeRegistry, default_registry
from .relink import decode_into_instance, encode_instance
from .scaffold import synthesize_type

__all__ = [
    "ClassDescription",
    "Schema",
    "describe",
    "encode_description",
    "decode_description",
    "TypeRegistry",
    "default_registry",
    "encode_instance",
    "decode_into_instance",
    "synthesize_type",
]
