"""Flatten a schema into path-qualified field rows.

Paths use ``.`` between property names and a ``[]`` suffix for array
elements, e.g. ``data.items[].code``. Properties are visited in declaration
order (the order of keys in the source document, which both the JSON and the
YAML loaders preserve), so the output is stable for a given document.
"""

import logging

from pydantic import BaseModel

from .document import Document, component_name_from_ref, resolve, to_ref
from .merge import merged_properties, required_names
from .nodes import ArrayNode, RefNode, ScalarNode, SchemaNode, is_object_like, normalize

logger = logging.getLogger(__name__)


class FieldDescriptor(BaseModel):
    """One row of a request/response field table."""

    path: str
    required: bool = False
    type: str
    description: str = ""


def join_path(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def to_node(document: Document | None, schema_or_ref) -> tuple[SchemaNode | None, str | None]:
    """Turn a ref string, component name, raw dict or node into ``(node, component_name)``."""
    if isinstance(schema_or_ref, str):
        ref = to_ref(schema_or_ref)
        return resolve(document, ref), component_name_from_ref(ref)
    if isinstance(schema_or_ref, dict):
        schema_or_ref = normalize(schema_or_ref)
    if isinstance(schema_or_ref, RefNode):
        return resolve(document, schema_or_ref.ref), component_name_from_ref(schema_or_ref.ref)
    return schema_or_ref, None


class _Flattener:
    def __init__(self, document: Document | None, decorate_refs: bool):
        self.document = document
        self.decorate_refs = decorate_refs
        self.fields: list[FieldDescriptor] = []
        # component names currently being expanded
        self.stack: list[str] = []

    def emit(self, path: str, required: bool, type_: str, description: str) -> None:
        self.fields.append(FieldDescriptor(path=path, required=required, type=type_, description=description))

    def object_label(self, ref: str) -> str:
        if self.decorate_refs:
            return f"object({component_name_from_ref(ref)})"
        return "object"

    def expand_ref(self, ref: str, prefix: str) -> None:
        name = component_name_from_ref(ref)
        if name in self.stack:
            logger.debug("Cyclic $ref %s at %s, not expanding", ref, prefix)
            return
        target = resolve(self.document, ref)
        if target is None:
            return
        self.stack.append(name)
        try:
            self.walk(target, prefix)
        finally:
            self.stack.pop()

    def walk(self, node: SchemaNode, prefix: str) -> None:
        """Emit rows for the fields of ``node`` below ``prefix``."""
        if isinstance(node, RefNode):
            self.expand_ref(node.ref, prefix)
            return
        if isinstance(node, ArrayNode):
            self.array(node, f"{prefix}[]", required=False, description=node.title_description())
            return
        required = required_names(node)
        for name, prop in merged_properties(self.document, node).items():
            self.property(prop, join_path(prefix, name), name in required)

    def property(self, prop: SchemaNode, path: str, required: bool) -> None:
        description = prop.title_description()
        if isinstance(prop, RefNode):
            self.emit(path, required, self.object_label(prop.ref), description)
            self.expand_ref(prop.ref, path)
        elif isinstance(prop, ArrayNode):
            self.array(prop, f"{path}[]", required, description)
        elif is_object_like(prop):
            self.emit(path, required, "object", description)
            self.walk(prop, path)
        else:
            self.emit(path, required, prop.type, description)

    def array(self, node: ArrayNode, path: str, required: bool, description: str) -> None:
        items = node.items
        if isinstance(items, RefNode):
            label = "array(object)"
            if self.decorate_refs:
                label = f"array({self.object_label(items.ref)})"
            self.emit(path, required, label, description)
            self.expand_ref(items.ref, path)
        elif is_object_like(items):
            self.emit(path, required, "array(object)", description)
            self.walk(items, path)
        elif isinstance(items, ArrayNode):
            self.emit(path, required, "array(array)", description)
        elif isinstance(items, ScalarNode) and items.type:
            self.emit(path, required, f"array({items.type})", description)
        else:
            self.emit(path, required, "array", description)


def flatten(document: Document | None, schema_or_ref, prefix: str = "", decorate_refs: bool = False) -> list[FieldDescriptor]:
    """Flatten a schema (ref, component name, raw dict or node) into field rows.

    Unresolvable references produce no rows. A component that is reached again
    while it is still being expanded (a reference cycle) keeps its ``object``
    row but is not expanded a second time.
    """
    node, name = to_node(document, schema_or_ref)
    if node is None:
        return []
    flattener = _Flattener(document, decorate_refs)
    if name:
        flattener.stack.append(name)
    flattener.walk(node, prefix)
    return flattener.fields
