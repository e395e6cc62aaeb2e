"""Field table and example for one request or response body."""

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel

from api_doc_renderer.schema.document import Document
from api_doc_renderer.schema.example import build_example, example_json
from api_doc_renderer.schema.flatten import FieldDescriptor, flatten
from api_doc_renderer.schema.whitelist import (
    DEFAULT_CONTAINER_KEYS,
    DEFAULT_ENVELOPE_KEYS,
    filter_example,
    filter_fields,
)


class Projection(BaseModel):
    fields: list[FieldDescriptor]
    example: Any = None

    @property
    def example_text(self) -> str:
        return example_json(self.example)


def project(
    document: Document,
    schema_or_ref,
    allowed: Sequence[str] | None = None,
    envelope_keys: Sequence[str] = DEFAULT_ENVELOPE_KEYS,
    container_keys: Sequence[str] = DEFAULT_CONTAINER_KEYS,
) -> Projection:
    """Flatten a body schema and build its example, applying the allow-list when configured."""
    fields = flatten(document, schema_or_ref)
    example = build_example(document, schema_or_ref)
    if allowed is not None:
        fields = filter_fields(fields, allowed, envelope_keys, container_keys)
        example = filter_example(example, allowed, container_keys)
    return Projection(fields=fields, example=example)
