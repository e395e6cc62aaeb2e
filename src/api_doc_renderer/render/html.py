"""Standalone HTML page: side navigation plus one block per operation."""

from html import escape

from api_doc_renderer.config import DocsConfig
from api_doc_renderer.schema.document import Document
from api_doc_renderer.schema.flatten import FieldDescriptor
from api_doc_renderer.schema.labels import display_type

from .markdown import DEFAULT_TITLE, NO_FIELDS, yes_no
from .operations import Operation, ParamInfo, collect_operations, group_operations, slugify
from .projection import project

STYLE = """
*{box-sizing:border-box}
body{font-family:Arial,sans-serif;line-height:1.6;margin:0;padding-left:280px}
aside{position:fixed;left:0;top:0;bottom:0;width:280px;background:#f5f7fa;border-right:1px solid #e5e9f2;padding:16px;overflow:auto}
main{padding:24px}
pre{background:#f8f9fb;border:1px solid #e5e9f2;border-radius:6px;padding:12px;overflow:auto}
table{border-collapse:collapse;width:100%;margin:12px 0}
th,td{border:1px solid #dfe3e8;padding:8px;text-align:left}
th{background:#fafbfc}
.endpoint{margin-bottom:32px}
.method{display:inline-block;background:#eef2ff;color:#3f51b5;border:1px solid #c7d2fe;border-radius:12px;padding:2px 8px;margin-right:6px;font-size:12px}
.export{position:fixed;top:10px;right:12px;background:#3f51b5;color:#fff;border-radius:20px;padding:8px 14px;text-decoration:none}
.nav summary{cursor:pointer;font-size:13px}
.nav summary a,.nav .item-link{color:#2c2c2c;text-decoration:none}
.nav details.grp>summary{font-weight:600;font-size:15px}
.nav .item-link{display:block;font-size:12px;padding:3px 2px}
.nav .item-link.active{color:#16c06e;font-weight:600}
"""

SCRIPT = """
function setActive(){var h=location.hash;document.querySelectorAll('aside .nav .item-link').forEach(function(a){a.classList.toggle('active',a.getAttribute('href')===h);});}
window.addEventListener('hashchange',setActive);setActive();
document.getElementById('expandAll').onclick=function(){document.querySelectorAll('aside .nav details').forEach(function(d){d.open=true;});};
document.getElementById('collapseAll').onclick=function(){document.querySelectorAll('aside .nav details').forEach(function(d){d.open=false;});};
"""


class NavNode:
    """Subgroup tree node; ``Admin/Roles`` nests ``Roles`` under ``Admin``."""

    def __init__(self, name: str, anchor: str):
        self.name = name
        self.anchor = anchor
        self.children: dict[str, "NavNode"] = {}
        self.operations: list[Operation] = []

    def child(self, name: str) -> "NavNode":
        if name not in self.children:
            self.children[name] = NavNode(name, f"{self.anchor}-{slugify(name)}")
        return self.children[name]


def group_anchor(group: str) -> str:
    return f"group-{slugify(group)}"


def build_nav_tree(group: str, subgroups: dict[str, list[Operation]]) -> NavNode:
    root = NavNode(group, group_anchor(group))
    for subgroup, ops in subgroups.items():
        node = root
        for segment in subgroup.split("/"):
            segment = segment.strip()
            if segment:
                node = node.child(segment)
        node.operations.extend(ops)
    return root


def render_nav_node(node: NavNode, depth: int) -> str:
    pad = 14 * depth
    parts = [f'<details class="subgrp" open><summary style="padding-left:{pad}px"><a href="#{node.anchor}">{escape(node.name)}</a></summary>']
    for op in node.operations:
        parts.append(
            f'<div class="item" style="padding-left:{pad + 14}px"><a class="item-link" href="#{op.anchor}">{escape(op.summary)}</a></div>'
        )
    parts.extend(render_nav_node(child, depth + 1) for child in node.children.values())
    parts.append("</details>")
    return "".join(parts)


def render_nav(trees: list[NavNode]) -> str:
    parts = [
        '<div class="nav"><div><button id="expandAll">Expand all</button> <button id="collapseAll">Collapse all</button></div>'
    ]
    for tree in trees:
        parts.append(f'<details class="grp" open><summary><a href="#{tree.anchor}">{escape(tree.name)}</a></summary>')
        parts.extend(render_nav_node(child, 1) for child in tree.children.values())
        parts.append("</details>")
    parts.append("</div>")
    return "".join(parts)


def render_param_table(params: list[ParamInfo]) -> str:
    rows = "".join(
        f"<tr><td>{escape(p.name)}</td><td>{yes_no(p.required)}</td><td>{escape(p.param_type)}</td><td>{escape(p.description)}</td></tr>"
        for p in params
    )
    return f"<table><thead><tr><th>Name</th><th>Required</th><th>Type</th><th>Description</th></tr></thead><tbody>{rows}</tbody></table>"


def render_request_table(fields: list[FieldDescriptor]) -> str:
    rows = "".join(
        f"<tr><td>{escape(f.path)}</td><td>{yes_no(f.required)}</td><td>{escape(display_type(f.type))}</td><td>{escape(f.description)}</td></tr>"
        for f in fields
    )
    return f"<table><thead><tr><th>Field</th><th>Required</th><th>Type</th><th>Description</th></tr></thead><tbody>{rows}</tbody></table>"


def render_response_table(fields: list[FieldDescriptor]) -> str:
    rows = "".join(
        f"<tr><td>{escape(f.path)}</td><td>{escape(display_type(f.type))}</td><td>{escape(f.description)}</td></tr>"
        for f in fields
    )
    if not fields:
        rows = f"<tr><td colspan=3>{NO_FIELDS}</td></tr>"
    return f"<table><thead><tr><th>Field</th><th>Type</th><th>Description</th></tr></thead><tbody>{rows}</tbody></table>"


def render_operation(document: Document, op: Operation, config: DocsConfig) -> str:
    rule = config.rules_for_path(op.path)
    a = op.anchor
    parts = [
        f'<div class="endpoint" id="{a}"><h3><span class="method">{op.method.upper()}</span> {escape(op.summary)}</h3>',
        f'<h4 id="{a}-url">Request URL</h4><pre><code>{escape(op.path)}</code></pre>',
        f'<h4 id="{a}-method">Method</h4><ul><li>{op.method.upper()} <em>Content-Type: {escape(op.content_type)}</em></li></ul>',
    ]
    if op.headers:
        parts.append(f'<h4 id="{a}-headers">Header parameters</h4>' + render_param_table(op.headers))
    if op.path_params:
        parts.append(f'<h4 id="{a}-path-params">Path parameters</h4>' + render_param_table(op.path_params))
    if op.query_params:
        parts.append(f'<h4 id="{a}-query-params">Query parameters</h4>' + render_param_table(op.query_params))

    if op.request_schema is not None:
        request = project(document, op.request_schema, rule.request, config.envelope_keys, config.container_keys)
        parts.append(f'<h4 id="{a}-req-example">Request example</h4><pre><code>{escape(request.example_text)}</code></pre>')
        parts.append(f'<h4 id="{a}-req">Request parameters</h4>' + render_request_table(request.fields))

    if op.response_schema is not None:
        response = project(document, op.response_schema, rule.response, config.envelope_keys, config.container_keys)
        parts.append(f'<h4 id="{a}-res-example">Response example</h4><pre><code>{escape(response.example_text)}</code></pre>')
        parts.append(f'<h4 id="{a}-res-params">Response fields</h4>' + render_response_table(response.fields))

    parts.append("</div>")
    return "".join(parts)


def render_html(document: Document, raw: str, config: DocsConfig | None = None) -> str:
    """Render the whole document as one HTML page, in the order paths are declared."""
    config = config or DocsConfig()
    title = config.title or document.title or DEFAULT_TITLE
    groups = group_operations(collect_operations(document, raw, config))
    trees = [build_nav_tree(group, subgroups) for group, subgroups in groups.items()]

    main = [f"<h1>{escape(title)}</h1>", f'<a class="export" href="{escape(config.route_markdown)}">Export Markdown</a>']
    for tree, subgroups in zip(trees, groups.values()):
        main.append(f'<h1 id="{tree.anchor}">{escape(tree.name)}</h1>')
        for subgroup, ops in subgroups.items():
            sub_anchor = f"{tree.anchor}-{slugify(subgroup)}"
            main.append(f'<h2 id="{sub_anchor}">{escape(subgroup)}</h2>')
            main.extend(render_operation(document, op, config) for op in ops)

    return (
        '<!DOCTYPE html><html><head><meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        f"<title>{escape(title)}</title><style>{STYLE}</style></head><body>"
        f"<aside>{render_nav(trees)}</aside><main>{''.join(main)}</main>"
        f"<script>{SCRIPT}</script></body></html>"
    )
