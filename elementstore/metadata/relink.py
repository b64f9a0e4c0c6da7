# ==============================================
# Instance Records and Method Re-linking
# ==============================================
#
# PURPOSE:
#   Turn an element into a plain record and back:
#
#     {"className": "VotingCandidate",
#      "identifier": "candidate_alice",
#      "state": {"votes": 3},
#      "methods": ["get_votes", "vote_for", ...]}
#
#   Decoding always builds a base Element, then copies each named
#   method from a prototype class and binds it to the new instance.
#   This only works when the prototype is already loaded in this
#   process: it re-links by name, it does not transport code.
#
# PROTOTYPE RESOLUTION (first match wins):
#   1. `prototype=` argument
#   2. registry lookup of the record's "className"
#   3. Element itself
#
# MISSING METHODS:
#   Types evolve, so old records can name methods that no longer
#   exist. Each one is logged as a warning and skipped, unless
#   strict=True, in which case MethodNotFound is raised.
#
# ==============================================

import inspect
import logging
import types
from typing import Any, Dict, Mapping, Optional

from elementstore.errors import MetadataDecodeError, MethodNotFound, UnknownTypeTag
from elementstore.metadata.description import describe, name_list
from elementstore.metadata.registry import TypeRegistry, default_registry

logger = logging.getLogger(__name__)


def encode_instance(element) -> Dict[str, Any]:
    """
    Build the record decode_into_instance() expects. No I/O.

    Args:
        element: Any Element instance

    Returns:
        dict with className, identifier, state and methods
    """
    cls = type(element)
    return {
        "className": cls.__name__,
        "identifier": element.identifier,
        "state": dict(element.to_plain_value()),
        "methods": describe(cls).methods,
    }


def _lookup_method(prototype: type, name: str, instance):
    attr = inspect.getattr_static(prototype, name, None)
    if isinstance(attr, staticmethod):
        return attr.__func__
    if isinstance(attr, classmethod):
        return types.MethodType(attr.__func__, prototype)
    if inspect.isfunction(attr):
        return types.MethodType(attr, instance)
    raise MethodNotFound(name, prototype.__name__)


def _resolve_prototype(data: Mapping[str, Any], registry: TypeRegistry, strict: bool, fallback: type) -> type:
    tag = data.get("className")
    if not tag:
        return fallback
    try:
        return registry.resolve(tag)
    except UnknownTypeTag:
        if strict:
            raise
        logger.warning("Type tag %r is not registered; re-linking from %s", tag, fallback.__name__)
        return fallback


def decode_into_instance(
    data: Mapping[str, Any],
    store,
    *,
    prototype: Optional[type] = None,
    registry: Optional[TypeRegistry] = None,
    strict: bool = False,
):
    """
    Rebuild an Element from an instance record and re-link its methods.

    Args:
        data: Record with "identifier" and "state", optionally "methods"
              and "className"
        store: StorageAdapter for the new element
        prototype: Class to copy methods from (skips registry lookup)
        registry: Where to resolve "className" (default_registry if None)
        strict: Raise instead of warning on unknown methods or type tags

    Returns:
        A new Element whose listed methods are bound from the prototype

    Raises:
        MetadataDecodeError: The record is malformed
        MethodNotFound: strict=True and a named method is missing
    """
    from elementstore.element import Element

    if not isinstance(data, Mapping):
        raise MetadataDecodeError(f"Instance record must be an object, got {type(data).__name__}")
    for key in ("identifier", "state"):
        if key not in data:
            raise MetadataDecodeError(f"Instance record is missing {key!r}")
    identifier = data["identifier"]
    if not isinstance(identifier, str) or not identifier:
        raise MetadataDecodeError(f"'identifier' must be a non-empty string, got {identifier!r}")
    state = data["state"]
    if not isinstance(state, Mapping):
        raise MetadataDecodeError(f"'state' must be an object, got {type(state).__name__}")
    methods = name_list(data, "methods") if "methods" in data else []

    if prototype is None:
        prototype = _resolve_prototype(
            data, registry if registry is not None else default_registry, strict, Element
        )

    element = Element(identifier, state, store=store)

    for name in methods:
        try:
            bound = _lookup_method(prototype, name, element)
        except MethodNotFound as e:
            if strict:
                raise
            logger.warning("Skipping re-link: %s", e)
            continue
        setattr(element, name, bound)

    return element
