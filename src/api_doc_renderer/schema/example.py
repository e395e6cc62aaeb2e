"""Representative example values for schemas."""

import json
import logging

from .document import Document, component_name_from_ref, resolve
from .flatten import to_node
from .merge import merged_properties
from .nodes import ArrayNode, RefNode, ScalarNode, SchemaNode, is_object_like

logger = logging.getLogger(__name__)

PLACEHOLDERS = {
    "string": "string",
    "integer": 0,
    "number": 0,
    "boolean": False,
}


class _ExampleBuilder:
    def __init__(self, document: Document | None):
        self.document = document
        self.stack: list[str] = []

    def ref(self, ref: str):
        name = component_name_from_ref(ref)
        if name in self.stack:
            logger.debug("Cyclic $ref %s in example, stopping", ref)
            return {}
        target = resolve(self.document, ref)
        if target is None:
            return None
        self.stack.append(name)
        try:
            return self.value(target)
        finally:
            self.stack.pop()

    def value(self, node: SchemaNode | None):
        if isinstance(node, RefNode):
            return self.ref(node.ref)
        if isinstance(node, ArrayNode):
            return self.array(node)
        if is_object_like(node):
            return {name: self.value(prop) for name, prop in merged_properties(self.document, node).items()}
        if isinstance(node, ScalarNode):
            return PLACEHOLDERS.get(node.type)
        return None

    def array(self, node: ArrayNode) -> list:
        items = node.items
        if isinstance(items, RefNode):
            element = self.ref(items.ref)
            return [element] if element is not None else []
        if is_object_like(items):
            return [self.value(items)]
        return []


def build_example(document: Document | None, schema_or_ref):
    """Build an example value tree for a schema (ref, component name, raw dict or node).

    Strings become ``"string"``, numbers ``0``, booleans ``False``; arrays hold
    a single representative element when their items are objects and are
    empty otherwise. Unknown types and unresolved references give ``None``.
    """
    node, name = to_node(document, schema_or_ref)
    if node is None:
        return None
    builder = _ExampleBuilder(document)
    if name:
        builder.stack.append(name)
    return builder.value(node)


def example_json(value) -> str:
    """Serialize an example the way it is shown in the docs (4-space indent)."""
    return json.dumps(value, indent=4, ensure_ascii=False)
