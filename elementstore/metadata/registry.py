# ==============================================
# TypeRegistry
# ==============================================
#
# PURPOSE:
#   Map a stable type tag (by default the class name) to a class
#   that is available in THIS process. Decoding an instance record
#   looks its "className" up here to find where methods should be
#   re-linked from. Behavior is never shipped as data; a tag the
#   process does not know simply fails to resolve.
#
# USAGE:
# ------
#   registry = TypeRegistry()
#
#   @registry.register
#   class Car(Element): ...
#
#   registry.register(Truck, tag="vehicle.truck")
#   registry.resolve("Car")  -> Car
#
# ==============================================

from typing import Dict, List, Optional

from elementstore.errors import UnknownTypeTag


class TypeRegistry:
    def __init__(self):
        self._types: Dict[str, type] = {}

    def register(self, cls: type, tag: Optional[str] = None) -> type:
        """
        Register cls under tag (defaults to cls.__name__).

        Returns cls unchanged, so this works as a class decorator.
        Re-registering a tag replaces the previous class.
        """
        if not isinstance(cls, type):
            raise TypeError(f"Only classes can be registered, got {cls!r}")
        self._types[tag or cls.__name__] = cls
        return cls

    def resolve(self, tag: str) -> type:
        try:
            return self._types[tag]
        except KeyError:
            raise UnknownTypeTag(tag) from None

    def tags(self) -> List[str]:
        return sorted(self._types)

    def __contains__(self, tag: str) -> bool:
        return tag in self._types

    def __len__(self) -> int:
        return len(self._types)


# Process-wide registry used when decode_into_instance gets no registry.
default_registry = TypeRegistry()
