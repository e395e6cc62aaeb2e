"""Type label helpers for field tables."""

import re

_ARRAY_OF_COMPONENT = re.compile(r"array\(object\([^)]*\)\)")
_OBJECT_COMPONENT = re.compile(r"object\([^)]*\)")


def strip_component_decorations(label: str) -> str:
    """Drop component names from labels: ``object(Foo)`` -> ``object``, ``array(object(Foo))`` -> ``array(object)``."""
    label = _ARRAY_OF_COMPONENT.sub("array(object)", label)
    return _OBJECT_COMPONENT.sub("object", label)


def display_type(label: str) -> str:
    """Label as shown to readers: undecorated, with an empty type shown as ``object``."""
    return strip_component_decorations(label) or "object"


def is_leaf_type(label: str) -> bool:
    """True for scalar labels (``string``, ``array(string)``...), False for objects and object arrays."""
    label = strip_component_decorations(label)
    return bool(label) and label not in ("object", "array(object)")
