"""Markdown export of a whole document."""

from api_doc_renderer.config import DocsConfig
from api_doc_renderer.schema.document import Document
from api_doc_renderer.schema.flatten import FieldDescriptor
from api_doc_renderer.schema.labels import display_type

from .operations import Operation, ParamInfo, collect_operations, group_operations
from .projection import Projection, project

DEFAULT_TITLE = "API Documentation"
NO_FIELDS = "No fields"


def cell(text: str) -> str:
    """Make text safe for a Markdown table cell."""
    return str(text).replace("|", "\\|").replace("\r", " ").replace("\n", " ")


def yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


def render_param_table(params: list[ParamInfo]) -> str:
    lines = ["| Name | Required | Type | Description |", "|---|---|---|---|"]
    for p in params:
        lines.append(f"| {cell(p.name)} | {yes_no(p.required)} | {cell(p.param_type)} | {cell(p.description)} |")
    return "\n".join(lines) + "\n"


def render_request_table(fields: list[FieldDescriptor]) -> str:
    lines = ["| Field | Required | Type | Description |", "|---|---|---|---|"]
    for f in fields:
        lines.append(f"| {cell(f.path)} | {yes_no(f.required)} | {cell(display_type(f.type))} | {cell(f.description)} |")
    return "\n".join(lines) + "\n"


def render_response_table(fields: list[FieldDescriptor]) -> str:
    lines = ["| Field | Type | Description |", "|---|---|---|"]
    if not fields:
        lines.append(f"| {NO_FIELDS} |  |  |")
    for f in fields:
        lines.append(f"| {cell(f.path)} | {cell(display_type(f.type))} | {cell(f.description)} |")
    return "\n".join(lines) + "\n"


def _json_block(projection: Projection) -> str:
    return f"```json\n{projection.example_text}\n```\n"


def render_operation(document: Document, op: Operation, config: DocsConfig) -> str:
    rule = config.rules_for_path(op.path)
    parts = [
        f"#### {op.summary}\n",
        f"##### Request URL\n\n`{op.path}`\n",
        f"##### Method\n\n- {op.method.upper()}  Content-Type: {op.content_type}\n",
    ]
    if op.headers:
        parts.append("##### Header parameters\n\n" + render_param_table(op.headers))
    if op.path_params:
        parts.append("##### Path parameters\n\n" + render_param_table(op.path_params))
    if op.query_params:
        parts.append("##### Query parameters\n\n" + render_param_table(op.query_params))

    if op.request_schema is not None:
        request = project(document, op.request_schema, rule.request, config.envelope_keys, config.container_keys)
        parts.append("##### Request example\n\n" + _json_block(request))
        parts.append("##### Request parameters\n\n" + render_request_table(request.fields))

    if op.response_schema is not None:
        response = project(document, op.response_schema, rule.response, config.envelope_keys, config.container_keys)
        parts.append("##### Response example\n\n" + _json_block(response))
        parts.append("##### Response fields\n\n" + render_response_table(response.fields))

    return "\n".join(parts)


def render_markdown(document: Document, raw: str, config: DocsConfig | None = None) -> str:
    """Render the whole document as Markdown, in the order paths are declared."""
    config = config or DocsConfig()
    title = config.title or document.title or DEFAULT_TITLE
    operations = collect_operations(document, raw, config)

    out = [f"# {title}\n"]
    for group, subgroups in group_operations(operations).items():
        out.append(f"## {group}\n")
        for subgroup, ops in subgroups.items():
            out.append(f"### {subgroup}\n")
            for op in ops:
                out.append(render_operation(document, op, config))
    return "\n".join(out)
