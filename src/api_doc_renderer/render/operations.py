"""Documented operations collected from an OpenAPI document.

Operations are listed path by path in declaration order, methods sorted
within a path, and carry everything the renderers need: grouping, anchor,
parameters and the selected request/response schemas.
"""

import logging
import re

from pydantic import BaseModel

from api_doc_renderer.config import DocsConfig, parse_header_value
from api_doc_renderer.schema.document import Document, resolve_raw
from api_doc_renderer.schema.nodes import ArrayNode, RefNode, ScalarNode, SchemaNode, normalize
from api_doc_renderer.source.order import ordered_top_level_keys

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "options", "head")
PREFERRED_RESPONSE_TYPES = ("application/json", "application/problem+json", "application/ld+json")
DEFAULT_CONTENT_TYPE = "application/json"
UNGROUPED = "Ungrouped"
DEFAULT_SUBGROUP = "Default"


class ParamInfo(BaseModel):
    """A header, path or query parameter row."""

    name: str
    location: str  # header / path / query
    required: bool = False
    param_type: str = ""
    description: str = ""


class Operation(BaseModel):
    """One HTTP method on one path."""

    method: str  # lower case
    path: str
    summary: str
    tags: list[str] = []
    group: str = UNGROUPED
    subgroup: str = DEFAULT_SUBGROUP
    anchor: str
    content_type: str = DEFAULT_CONTENT_TYPE
    headers: list[ParamInfo] = []
    path_params: list[ParamInfo] = []
    query_params: list[ParamInfo] = []
    request_schema: SchemaNode | None = None
    response_schema: SchemaNode | None = None


def anchor_id(method: str, path: str) -> str:
    """Anchor for an operation block, e.g. ``get-v1-users-id``."""
    s = f"{method}-{path}"
    s = s.replace("{", "").replace("}", "")
    s = re.sub(r"[/ :?&=.,@]", "-", s)
    s = re.sub(r"-{2,}", "-", s)
    return s.strip("-")


def slugify(text: str) -> str:
    """Anchor-friendly form of a group title."""
    s = text.strip().lower()
    s = re.sub(r"[ /.]", "-", s)
    s = re.sub(r"[()\[\]]", "", s)
    s = re.sub(r"-{2,}", "-", s)
    return s.strip("-")


def split_tag_parts(tags: list[str]) -> tuple[str, str]:
    """Split ``tags[0]`` into ``(group, subgroup)`` on the first ``/``."""
    if not tags:
        return UNGROUPED, DEFAULT_SUBGROUP
    group, sep, subgroup = tags[0].partition("/")
    if not sep or not subgroup:
        return group, DEFAULT_SUBGROUP
    return group, subgroup


def ordered_paths(document: Document, raw: str) -> list[str]:
    """Path keys in declaration order, taken from the raw text when possible."""
    paths = document.paths
    keys = [k for k in ordered_top_level_keys(raw, "paths") if k in paths]
    if not keys and paths:
        logger.warning("Could not read paths order from document text, using parsed order")
    # paths the text scan did not reach keep their parsed order
    return keys + [k for k in paths if k not in keys]


def present_methods(path_item: dict) -> list[str]:
    methods = {k.lower() for k in path_item if isinstance(k, str) and k.lower() in HTTP_METHODS}
    return sorted(methods)


def _schema_of(media: dict) -> SchemaNode | None:
    schema = media.get("schema") if isinstance(media, dict) else None
    if not isinstance(schema, dict):
        return None
    return normalize(schema)


def request_schema(operation: dict) -> tuple[SchemaNode | None, str]:
    """First request body media type carrying a schema: ``(schema, content_type)``."""
    body = operation.get("requestBody")
    content = body.get("content") if isinstance(body, dict) else None
    if not isinstance(content, dict):
        return None, ""
    for content_type, media in content.items():
        schema = _schema_of(media)
        if schema is not None:
            return schema, content_type
    # a body without schema still tells us the content type
    for content_type in content:
        return None, content_type
    return None, ""


def response_schema(operation: dict) -> tuple[SchemaNode | None, str]:
    """Schema of the 200 response (else the lowest status code), preferring JSON media types."""
    responses = operation.get("responses", {})
    if not isinstance(responses, dict) or not responses:
        return None, ""
    by_code = {str(code): response for code, response in responses.items()}
    pick = "200" if "200" in by_code else sorted(by_code)[0]
    response = by_code[pick]
    content = response.get("content", {}) if isinstance(response, dict) else {}
    if not isinstance(content, dict):
        return None, ""

    candidates = [ct for ct in PREFERRED_RESPONSE_TYPES if ct in content]
    candidates += [ct for ct in content if "json" in ct and ct not in candidates]
    candidates += [ct for ct in sorted(content) if ct not in candidates]
    for content_type in candidates:
        schema = _schema_of(content[content_type])
        if schema is not None:
            return schema, content_type
    return None, ""


def param_schema_type(schema: SchemaNode | None) -> str:
    """Type label for a parameter schema."""
    if schema is None:
        return ""
    if isinstance(schema, RefNode):
        return "object"
    if isinstance(schema, ArrayNode):
        items = schema.items
        if items is None:
            return "array"
        if isinstance(items, RefNode):
            return "array(object)"
        if items.format:
            return f"array({items.format})"
        if isinstance(items, ScalarNode) and items.type:
            return f"array({items.type})"
        return "array"
    if isinstance(schema, ScalarNode):
        return schema.type
    return "object"


def collect_parameters(document: Document, path_item: dict, operation: dict) -> tuple[list[ParamInfo], list[ParamInfo], list[ParamInfo]]:
    """Path-item and operation parameters, split into ``(headers, path, query)``."""
    headers: list[ParamInfo] = []
    path_params: list[ParamInfo] = []
    query_params: list[ParamInfo] = []
    buckets = {"header": headers, "path": path_params, "query": query_params}

    raw_params = list(path_item.get("parameters") or []) + list(operation.get("parameters") or [])
    for p in raw_params:
        if not isinstance(p, dict):
            continue
        if "$ref" in p:
            p = resolve_raw(document, p["$ref"])
            if p is None:
                continue
        bucket = buckets.get(p.get("in", ""))
        if bucket is None:
            continue
        schema = p.get("schema")
        bucket.append(
            ParamInfo(
                name=str(p.get("name", "")),
                location=p["in"],
                required=bool(p.get("required", False)),
                param_type=param_schema_type(normalize(schema) if isinstance(schema, dict) else None),
                description=p.get("description", "") or "",
            )
        )
    return headers, path_params, query_params


def inject_headers(path: str, headers: list[ParamInfo], config: DocsConfig) -> list[ParamInfo]:
    """Add configured headers that the operation does not declare itself."""
    rule = config.rules_for_path(path)
    existing = {h.name for h in headers}
    result = list(headers)
    for name, value in rule.headers.items():
        if name in existing:
            continue
        type_, required, desc = parse_header_value(value)
        result.append(ParamInfo(name=name, location="header", required=required, param_type=type_, description=desc))
    return result


def collect_operations(document: Document, raw: str, config: DocsConfig | None = None) -> list[Operation]:
    """All documented operations in declaration order."""
    config = config or DocsConfig()
    operations: list[Operation] = []
    paths = document.paths

    for path in ordered_paths(document, raw):
        path_item = paths.get(path)
        if not isinstance(path_item, dict):
            continue
        for method in present_methods(path_item):
            operation = next(
                (v for k, v in path_item.items() if isinstance(k, str) and k.lower() == method), None
            )
            if not isinstance(operation, dict):
                continue
            raw_tags = operation.get("tags")
            tags = [t for t in raw_tags if isinstance(t, str)] if isinstance(raw_tags, list) else []
            group, subgroup = split_tag_parts(tags)
            summary = operation.get("summary")
            summary = (summary.strip() if isinstance(summary, str) else "") or f"{method.upper()} {path}"

            req_schema, req_content_type = request_schema(operation)
            res_schema, _ = response_schema(operation)
            headers, path_params, query_params = collect_parameters(document, path_item, operation)

            operations.append(
                Operation(
                    method=method,
                    path=path,
                    summary=summary,
                    tags=tags,
                    group=group,
                    subgroup=subgroup,
                    anchor=anchor_id(method, path),
                    content_type=req_content_type or DEFAULT_CONTENT_TYPE,
                    headers=inject_headers(path, headers, config),
                    path_params=path_params,
                    query_params=query_params,
                    request_schema=req_schema,
                    response_schema=res_schema,
                )
            )
    return operations


def group_operations(operations: list[Operation]) -> dict[str, dict[str, list[Operation]]]:
    """Group operations by tag group then subgroup, keeping first-seen order."""
    groups: dict[str, dict[str, list[Operation]]] = {}
    for op in operations:
        groups.setdefault(op.group, {}).setdefault(op.subgroup, []).append(op)
    return groups
