"""Effective property map of a schema node, merging allOf / oneOf / anyOf."""

from .document import Document, resolve
from .nodes import CompositionNode, ObjectNode, RefNode, SchemaNode


def merged_properties(document: Document | None, node: SchemaNode | None) -> dict[str, SchemaNode]:
    """Return the node's properties, or the merged properties of its composition members.

    Direct ``properties`` win outright. Otherwise the members of ``allOf``,
    ``oneOf`` and ``anyOf`` are visited in that order; a ``$ref`` member
    contributes the properties of its target. Later members overwrite earlier
    ones on name collision.
    """
    if isinstance(node, ObjectNode) and node.properties:
        return dict(node.properties)
    if not isinstance(node, (ObjectNode, CompositionNode)):
        return {}

    merged: dict[str, SchemaNode] = {}
    for members in (node.all_of, node.one_of, node.any_of):
        for member in members:
            if isinstance(member, RefNode):
                member = resolve(document, member.ref)
            if isinstance(member, ObjectNode):
                merged.update(member.properties)
    return merged


def required_names(node: SchemaNode | None) -> set[str]:
    """Names listed in the node's own ``required`` array."""
    if isinstance(node, (ObjectNode, CompositionNode)):
        return set(node.required)
    return set()
