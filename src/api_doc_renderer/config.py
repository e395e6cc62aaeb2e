"""Rendering configuration.

A YAML file maps operation path patterns to customization rules::

    title: Shop API
    customize:
      "/v1/record/*":
        headers:
          accessToken: "string#required#Token returned by /login"
        request: null            # not configured: show everything
        response:
          - completeCode         # any scalar field named completeCode
          - data.departments.items[].address

``*`` in a pattern matches any run of characters. Every matching rule
applies: header definitions are added (first definition wins) and
request/response allow-lists are merged.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from api_doc_renderer.schema.whitelist import DEFAULT_CONTAINER_KEYS, DEFAULT_ENVELOPE_KEYS

REQUIRED_WORDS = {"required", "必选"}
OPTIONAL_WORDS = {"optional", "可选"}


class ConfigError(Exception):
    """The configuration file is missing or invalid."""


class CustomizeRule(BaseModel):
    """Header injection and allow-lists for the operations matching one pattern."""

    headers: dict[str, str] = {}
    request: list[str] | None = None  # None: not configured
    response: list[str] | None = None


class DocsConfig(BaseModel):
    title: str = ""
    route_markdown: str = "/docs.md"
    envelope_keys: list[str] = list(DEFAULT_ENVELOPE_KEYS)
    container_keys: list[str] = list(DEFAULT_CONTAINER_KEYS)
    customize: dict[str, CustomizeRule] = {}
    timeout: float = 10.0

    def rules_for_path(self, path: str) -> CustomizeRule:
        """Merge every rule whose pattern matches ``path``."""
        merged = CustomizeRule()
        for pattern, rule in self.customize.items():
            if not path_like_match(pattern, path):
                continue
            for name, value in rule.headers.items():
                merged.headers.setdefault(name, value)
            if rule.request is not None:
                merged.request = unique_merge(merged.request or [], rule.request)
            if rule.response is not None:
                merged.response = unique_merge(merged.response or [], rule.response)
        return merged


def path_like_match(pattern: str, path: str) -> bool:
    """Match ``path`` against a pattern where ``*`` stands for any characters."""
    if not pattern:
        return False
    if "*" not in pattern:
        return pattern == path
    pos = 0
    for segment in pattern.split("*"):
        if not segment:
            continue
        idx = path.find(segment, pos)
        if idx < 0:
            return False
        pos = idx + len(segment)
    return True


def unique_merge(first: list[str], second: list[str]) -> list[str]:
    """Append unseen, non-empty items of ``second`` to ``first``."""
    result = [item for item in first if item]
    for item in second:
        if item and item not in result:
            result.append(item)
    return result


def parse_header_value(value: str) -> tuple[str, bool, str]:
    """Parse ``type#required#desc`` / ``type#optional#desc`` / ``type#desc``.

    Returns ``(type, required, description)``.
    """
    parts = value.split("#")
    type_ = parts[0]
    required = False
    desc = ""
    if len(parts) >= 2:
        flag = parts[1].strip().lower()
        if flag in REQUIRED_WORDS:
            required = True
            desc = "#".join(parts[2:])
        elif flag in OPTIONAL_WORDS:
            desc = "#".join(parts[2:])
        else:
            desc = "#".join(parts[1:])
    return type_, required, desc


def load_config(path: Path | None) -> DocsConfig:
    """Read a YAML config file; no path means defaults."""
    if path is None:
        return DocsConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return DocsConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping")
    try:
        return DocsConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e
