# ==============================================
# Class Scaffolding
# ==============================================
#
# PURPOSE:
#   Generate Python SOURCE TEXT for a skeleton class from a
#   {properties, methods} definition. The constructor takes each
#   property positionally and stores it; every method is an empty
#   stub. The output is meant to be written to a file and filled
#   in by hand. Nothing here builds a live type.
#
# EXAMPLE:
# --------
#   synthesize_type({"properties": ["color", "model"],
#                    "methods": ["repaint"]}, class_name="Car")
#
#   class Car:
#       def __init__(self, color, model):
#           self.color = color
#           self.model = model
#
#       def repaint(self):
#           pass
#
# ==============================================

import keyword
from typing import Any, List, Mapping, Union

from elementstore.errors import MetadataDecodeError
from elementstore.metadata.description import ClassDescription, name_list


def _check_names(names: List[str], kind: str) -> None:
    seen = set()
    for name in names:
        if not name.isidentifier() or keyword.iskeyword(name):
            raise MetadataDecodeError(f"{name!r} is not a valid {kind} name")
        if name in seen:
            raise MetadataDecodeError(f"Duplicate {kind} name {name!r}")
        seen.add(name)


def synthesize_type(
    definition: Union[ClassDescription, Mapping[str, Any]],
    class_name: str = "NewClass",
) -> str:
    """
    Render skeleton class source for a definition.

    Args:
        definition: ClassDescription, or mapping with "properties" and "methods"
        class_name: Name of the generated class

    Returns:
        Python source text ending with a newline

    Raises:
        MetadataDecodeError: A name is not a usable identifier or is repeated
    """
    if isinstance(definition, ClassDescription):
        properties, methods = list(definition.properties), list(definition.methods)
    elif isinstance(definition, Mapping):
        properties = name_list(definition, "properties")
        methods = name_list(definition, "methods")
    else:
        raise MetadataDecodeError(
            f"Definition must be a mapping or ClassDescription, got {type(definition).__name__}"
        )

    _check_names([class_name], "class")
    _check_names(properties, "property")
    _check_names(methods, "method")
    if "self" in properties:
        raise MetadataDecodeError("'self' cannot be used as a property name")
    clashes = set(properties) & set(methods)
    if clashes:
        raise MetadataDecodeError(f"Names used as both property and method: {sorted(clashes)}")

    lines = [f"class {class_name}:"]
    lines.append(f"    def __init__({', '.join(['self'] + properties)}):")
    if properties:
        lines.extend(f"        self.{name} = {name}" for name in properties)
    else:
        lines.append("        pass")
    for name in methods:
        lines.append("")
        lines.append(f"    def {name}(self):")
        lines.append("        pass")
    return "\n".join(lines) + "\n"
