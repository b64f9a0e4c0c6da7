# ==============================================
# Class Descriptions
# ==============================================
#
# PURPOSE:
#   Describe the surface of an Element type: which property names
#   and which method names it declares. The description is about
#   the TYPE; no instance state is involved.
#
# HOW A TYPE IS DESCRIBED:
#   1. If the class declares its own `__schema__ = Schema(...)`,
#      that author-maintained descriptor is used as is.
#   2. Otherwise names declared directly in the class body are
#      inspected (inherited names are not included):
#        - properties: annotated fields, `property` objects and
#                      plain (non-callable) public class attributes
#        - methods:    public functions, coroutine functions,
#                      staticmethods and classmethods
#      Names starting with "_" are skipped, so the constructor
#      never appears.
#
# WIRE FORMAT:
#   {"className": "Element", "properties": [...], "methods": [...]}
#
# ==============================================

import inspect
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple, Union

from elementstore.errors import MetadataDecodeError


@dataclass(frozen=True)
class Schema:
    """Explicit property / operation names declared by a type's author."""
    fields: Tuple[str, ...] = ()
    operations: Tuple[str, ...] = ()

    def __post_init__(self):
        # Accept any iterable of names but store tuples
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "operations", tuple(self.operations))
        for name in self.fields + self.operations:
            if not isinstance(name, str) or not name:
                raise TypeError(f"Schema names must be non-empty strings, got {name!r}")


@dataclass
class ClassDescription:
    """Declared shape of one type."""
    class_name: str
    properties: List[str] = field(default_factory=list)
    methods: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "className": self.class_name,
            "properties": list(self.properties),
            "methods": list(self.methods),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "ClassDescription":
        """Create from dictionary (deserialization)"""
        if not isinstance(data, Mapping):
            raise MetadataDecodeError(
                f"Class description must be an object, got {type(data).__name__}"
            )
        class_name = data.get("className")
        if not isinstance(class_name, str) or not class_name:
            raise MetadataDecodeError("Class description is missing a 'className' string")
        return ClassDescription(
            class_name=class_name,
            properties=name_list(data, "properties"),
            methods=name_list(data, "methods"),
        )


def name_list(data: Mapping[str, Any], key: str) -> List[str]:
    """
    Read a list of names from a decoded record.

    Raises:
        MetadataDecodeError: key is missing, not a list, or holds non-strings
    """
    if key not in data:
        raise MetadataDecodeError(f"Description is missing {key!r}")
    names = data[key]
    if not isinstance(names, list):
        raise MetadataDecodeError(f"{key!r} must be a list, got {type(names).__name__}")
    for name in names:
        if not isinstance(name, str):
            raise MetadataDecodeError(f"{key!r} entries must be strings, got {name!r}")
    return list(names)


def _is_public(name: str) -> bool:
    return not name.startswith("_")


def describe(cls: type) -> ClassDescription:
    """
    Describe the properties and methods declared on cls itself.

    Args:
        cls: The type to describe

    Returns:
        ClassDescription for cls
    """
    if not isinstance(cls, type):
        raise TypeError(f"describe() expects a class, got {type(cls).__name__}")

    schema = cls.__dict__.get("__schema__")
    if isinstance(schema, Schema):
        return ClassDescription(cls.__name__, list(schema.fields), list(schema.operations))

    properties: List[str] = [name for name in inspect.get_annotations(cls) if _is_public(name)]
    methods: List[str] = []

    for name, value in cls.__dict__.items():
        if not _is_public(name):
            continue
        if inspect.isfunction(value) or isinstance(value, (staticmethod, classmethod)):
            methods.append(name)
        elif isinstance(value, property) or not callable(value):
            if name not in properties:
                properties.append(name)

    return ClassDescription(cls.__name__, properties, methods)


def encode_description(cls: type) -> str:
    """JSON text of describe(cls)."""
    return json.dumps(describe(cls).to_dict())


def decode_description(data: Union[str, bytes, Mapping[str, Any]]) -> ClassDescription:
    """
    Parse a class description from JSON text or an already-decoded mapping.

    Raises:
        MetadataDecodeError: The input is not a well-formed description
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise MetadataDecodeError(f"Class description is not valid JSON: {e}") from e
    return ClassDescription.from_dict(data)
