"""Normalized schema node variants.

Raw OpenAPI schema objects are loosely-typed JSON trees. ``normalize`` turns
one of them into exactly one of the node models below so the walkers can
dispatch on the node class instead of re-checking keys at every call site.
"""

from typing import Literal, Union

from pydantic import BaseModel

COMPOSITION_KEYWORDS = ("allOf", "oneOf", "anyOf")


class BaseNode(BaseModel):
    """Fields shared by every node variant."""

    title: str = ""
    description: str = ""
    format: str = ""

    def title_description(self) -> str:
        """Return ``title + " " + description``, or whichever one is set."""
        title = self.title.strip()
        desc = self.description.strip()
        if title and desc:
            return f"{title} {desc}"
        return title or desc


class RefNode(BaseNode):
    kind: Literal["ref"] = "ref"
    ref: str


class ArrayNode(BaseNode):
    kind: Literal["array"] = "array"
    items: "SchemaNode | None" = None


class ObjectNode(BaseNode):
    kind: Literal["object"] = "object"
    properties: dict[str, "SchemaNode"] = {}
    required: list[str] = []
    all_of: list["SchemaNode"] = []
    one_of: list["SchemaNode"] = []
    any_of: list["SchemaNode"] = []


class CompositionNode(BaseNode):
    """A node made only of allOf / oneOf / anyOf members."""

    kind: Literal["composition"] = "composition"
    required: list[str] = []
    all_of: list["SchemaNode"] = []
    one_of: list["SchemaNode"] = []
    any_of: list["SchemaNode"] = []


class ScalarNode(BaseNode):
    kind: Literal["scalar"] = "scalar"
    type: str = ""


SchemaNode = Union[RefNode, ArrayNode, ObjectNode, CompositionNode, ScalarNode]

for _model in (ArrayNode, ObjectNode, CompositionNode):
    _model.model_rebuild()


def _text(raw: dict, key: str) -> str:
    value = raw.get(key)
    return value if isinstance(value, str) else ""


def _strings(value) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def _members(raw: dict, keyword: str) -> list:
    value = raw.get(keyword)
    if not isinstance(value, list):
        return []
    return [normalize(v) for v in value]


def normalize(raw) -> "SchemaNode":
    """Classify a raw schema object into one node variant.

    Precedence: ``$ref``, then ``type: array``, then object (non-empty
    ``properties`` or ``type: object``), then composition, then scalar.
    """
    if not isinstance(raw, dict):
        return ScalarNode()

    common = {
        "title": _text(raw, "title"),
        "description": _text(raw, "description"),
        "format": _text(raw, "format"),
    }
    schema_type = _text(raw, "type")

    ref = _text(raw, "$ref")
    if ref:
        return RefNode(ref=ref, **common)

    if schema_type == "array":
        items = raw.get("items")
        return ArrayNode(items=normalize(items) if isinstance(items, dict) else None, **common)

    compositions = {
        "all_of": _members(raw, "allOf"),
        "one_of": _members(raw, "oneOf"),
        "any_of": _members(raw, "anyOf"),
    }
    properties = raw.get("properties")
    if not isinstance(properties, dict):
        properties = {}

    if properties or schema_type == "object":
        return ObjectNode(
            properties={name: normalize(prop) for name, prop in properties.items()},
            required=_strings(raw.get("required")),
            **compositions,
            **common,
        )

    if any(compositions.values()):
        return CompositionNode(required=_strings(raw.get("required")), **compositions, **common)

    return ScalarNode(type=schema_type, **common)


def is_object_like(node) -> bool:
    """True for nodes whose value is a JSON object with (possibly merged) fields."""
    return isinstance(node, (ObjectNode, CompositionNode))
