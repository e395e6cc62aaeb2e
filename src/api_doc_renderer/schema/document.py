"""Parsed OpenAPI document access and ``$ref`` resolution."""

import logging

from .nodes import SchemaNode, normalize

logger = logging.getLogger(__name__)

SCHEMAS_PREFIX = "#/components/schemas/"
PARAMETERS_PREFIX = "#/components/parameters/"


class Document:
    """Read-only view over a parsed OpenAPI document."""

    def __init__(self, raw: dict | None):
        self.raw = raw if isinstance(raw, dict) else {}

    def get(self, dotted: str, default=None):
        """Look up a dotted path such as ``info.title``; missing segments give ``default``."""
        current = self.raw
        for key in dotted.split("."):
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return current

    def _mapping(self, dotted: str) -> dict:
        value = self.get(dotted)
        return value if isinstance(value, dict) else {}

    @property
    def paths(self) -> dict:
        return self._mapping("paths")

    @property
    def schemas(self) -> dict:
        return self._mapping("components.schemas")

    @property
    def parameters(self) -> dict:
        return self._mapping("components.parameters")

    @property
    def title(self) -> str:
        title = self.get("info.title")
        return title.strip() if isinstance(title, str) else ""


def component_name_from_ref(ref: str) -> str:
    """Return the component name after the final ``/`` of a ref."""
    _, sep, name = ref.rpartition("/")
    return name if sep else ""


def resolve_raw(document: Document | None, ref: str) -> dict | None:
    """Resolve a components ref to its raw JSON object, or ``None``."""
    if document is None or not isinstance(ref, str):
        return None
    if ref.startswith(SCHEMAS_PREFIX):
        registry = document.schemas
    elif ref.startswith(PARAMETERS_PREFIX):
        registry = document.parameters
    else:
        logger.debug("Unsupported $ref prefix: %s", ref)
        return None
    target = registry.get(component_name_from_ref(ref))
    if not isinstance(target, dict):
        logger.debug("Unresolved $ref: %s", ref)
        return None
    return target


def resolve(document: Document | None, ref: str) -> SchemaNode | None:
    """Resolve a components ref to a normalized schema node, or ``None``."""
    target = resolve_raw(document, ref)
    if target is None:
        return None
    return normalize(target)


def to_ref(schema_name_or_ref: str) -> str:
    """Accept either a full ref or a bare schema component name."""
    if schema_name_or_ref.startswith("#/"):
        return schema_name_or_ref
    return SCHEMAS_PREFIX + schema_name_or_ref
