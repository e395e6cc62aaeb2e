"""CLI entry point for api-doc-renderer."""

import logging
from pathlib import Path

import click

from api_doc_renderer.config import ConfigError, DocsConfig, load_config
from api_doc_renderer.render.html import render_html
from api_doc_renderer.render.markdown import render_markdown, render_request_table
from api_doc_renderer.render.operations import ordered_paths
from api_doc_renderer.schema.example import build_example, example_json
from api_doc_renderer.schema.flatten import flatten
from api_doc_renderer.schema.whitelist import filter_example, filter_fields
from api_doc_renderer.source.loader import LoadedSource, SourceError, load_source


def _load(src: str, config: DocsConfig) -> LoadedSource:
    try:
        return load_source(src, timeout=config.timeout)
    except SourceError as e:
        raise click.ClickException(str(e)) from e


def _write(output: Path, content: str) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    click.echo(f"Saved to {output}")


@click.group()
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML rendering config.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool):
    """API Doc Renderer: HTML and Markdown docs from OpenAPI documents."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    try:
        ctx.obj = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.argument("src")
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output Markdown file.")
@click.pass_obj
def markdown(config: DocsConfig, src: str, output: Path):
    """Render SRC (path, file:// or http(s) URL) as Markdown."""
    click.echo(f"Loading {src}...")
    loaded = _load(src, config)
    click.echo(f"Found {len(loaded.document.paths)} paths.")
    _write(output, render_markdown(loaded.document, loaded.raw, config))


@main.command()
@click.argument("src")
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output HTML file.")
@click.pass_obj
def html(config: DocsConfig, src: str, output: Path):
    """Render SRC (path, file:// or http(s) URL) as a standalone HTML page."""
    click.echo(f"Loading {src}...")
    loaded = _load(src, config)
    click.echo(f"Found {len(loaded.document.paths)} paths.")
    _write(output, render_html(loaded.document, loaded.raw, config))


@main.command()
@click.argument("src")
@click.argument("schema")
@click.option("--allow", "allowed", multiple=True, help="Allow-list pattern (repeatable).")
@click.option("--decorate", is_flag=True, help="Keep component names in type labels.")
@click.pass_obj
def fields(config: DocsConfig, src: str, schema: str, allowed: tuple[str, ...], decorate: bool):
    """Print the flattened field table of SCHEMA (component name or $ref)."""
    loaded = _load(src, config)
    rows = flatten(loaded.document, schema, decorate_refs=decorate)
    if allowed:
        rows = filter_fields(rows, list(allowed), config.envelope_keys, config.container_keys)
    if decorate:
        for row in rows:
            click.echo(f"{row.path}\t{row.type}\t{'required' if row.required else 'optional'}\t{row.description}")
        return
    click.echo(render_request_table(rows), nl=False)


@main.command()
@click.argument("src")
@click.argument("schema")
@click.option("--allow", "allowed", multiple=True, help="Allow-list pattern (repeatable).")
@click.pass_obj
def example(config: DocsConfig, src: str, schema: str, allowed: tuple[str, ...]):
    """Print an example JSON value for SCHEMA (component name or $ref)."""
    loaded = _load(src, config)
    value = build_example(loaded.document, schema)
    if allowed:
        value = filter_example(value, list(allowed), config.container_keys)
    click.echo(example_json(value))


@main.command()
@click.argument("src")
@click.pass_obj
def paths(config: DocsConfig, src: str):
    """Print the path keys of SRC in declaration order."""
    loaded = _load(src, config)
    for key in ordered_paths(loaded.document, loaded.raw):
        click.echo(key)
