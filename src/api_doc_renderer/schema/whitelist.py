"""Allow-list filtering of field rows and example trees.

Allow-list patterns come in two forms:

* full paths, where ``.items[]`` and ``[]`` are equivalent, e.g.
  ``data.departments.items[].address`` or ``data.departments[].address``;
* bare leaf names, e.g. ``code``, which keep every scalar field with that
  name anywhere under a container key (``data`` by default).

Envelope keys (``code``, ``message``, ``data`` by default) are never removed.
In examples only container keys are filtered; other top-level keys are kept.
An allow-list of ``None`` (or an empty one) disables filtering entirely.
"""

from collections.abc import Iterable, Sequence

from .flatten import FieldDescriptor, join_path
from .labels import is_leaf_type

DEFAULT_ENVELOPE_KEYS = ("code", "message", "data")
DEFAULT_CONTAINER_KEYS = ("data",)


def normalize_pattern(pattern: str) -> str:
    pattern = pattern.replace(".items", "")
    while "[][]" in pattern:
        pattern = pattern.replace("[][]", "[]")
    return pattern


def normalize_allowed(allowed: Iterable[str] | None) -> list[str]:
    """Normalize patterns (``.items`` removed, ``[][]`` collapsed), dropping empty ones."""
    result: list[str] = []
    for pattern in allowed or ():
        if not pattern:
            continue
        pattern = normalize_pattern(pattern)
        if pattern and pattern not in result:
            result.append(pattern)
    return result


def is_bare_name(pattern: str) -> bool:
    return "." not in pattern and "[]" not in pattern


def leaf_name(path: str) -> str:
    return path.replace("[]", "").rsplit(".", 1)[-1]


def under_pattern(path: str, pattern: str) -> bool:
    """True when ``path`` is the pattern itself or lies below it."""
    return path == pattern or path.startswith((pattern + ".", pattern + "[]"))


def _is_envelope_row(path: str, envelope_keys: Sequence[str]) -> bool:
    return path in envelope_keys or (path.endswith("[]") and path[:-2] in envelope_keys)


def filter_fields(
    fields: list[FieldDescriptor],
    allowed: Sequence[str] | None,
    envelope_keys: Sequence[str] = DEFAULT_ENVELOPE_KEYS,
    container_keys: Sequence[str] = DEFAULT_CONTAINER_KEYS,
) -> list[FieldDescriptor]:
    """Keep envelope rows plus the rows matched by the allow-list."""
    if not allowed:
        return fields
    patterns = normalize_allowed(allowed)

    kept = []
    for field in fields:
        if _is_envelope_row(field.path, envelope_keys) or _field_matches(field, patterns, container_keys):
            kept.append(field)
    return kept


def _field_matches(field: FieldDescriptor, patterns: list[str], container_keys: Sequence[str]) -> bool:
    in_container = any(under_pattern(field.path, key) for key in container_keys)
    for pattern in patterns:
        if under_pattern(field.path, pattern):
            return True
        if in_container and is_bare_name(pattern) and leaf_name(field.path) == pattern and is_leaf_type(field.type):
            return True
    return False


def _path_allowed(path: str, key: str, patterns: list[str]) -> bool:
    variants = {path, path.replace("[].", "[]"), path.replace("[]", "")}
    for pattern in patterns:
        if pattern == key and is_bare_name(pattern):
            return True
        if any(under_pattern(variant, pattern) for variant in variants):
            return True
    return False


def _is_branch(value) -> bool:
    return isinstance(value, (dict, list)) and bool(value)


def _filter_value(value, patterns: list[str], path: str, key: str):
    if isinstance(value, dict) and value:
        kept = {}
        for child_key, child in value.items():
            child_path = join_path(path, child_key)
            if _is_branch(child):
                pruned = _filter_value(child, patterns, child_path, child_key)
                if _is_branch(pruned):
                    kept[child_key] = pruned
            elif _path_allowed(child_path, child_key, patterns):
                kept[child_key] = child
        return kept
    if isinstance(value, list) and value:
        first = value[0]
        if not _is_branch(first):
            return value if _path_allowed(path + "[]", key, patterns) else []
        pruned = _filter_value(first, patterns, path + "[]", key)
        return [pruned] if _is_branch(pruned) else []
    return value


def filter_example(
    value,
    allowed: Sequence[str] | None,
    container_keys: Sequence[str] = DEFAULT_CONTAINER_KEYS,
):
    """Prune the container keys of an example down to the allowed leaves.

    Container keys (``data``) are filtered with paths rooted at their own
    name; every other top-level key is kept verbatim. Non-dict examples are
    returned as is.
    """
    if not allowed or not isinstance(value, dict):
        return value
    patterns = normalize_allowed(allowed)

    result = {}
    for key, child in value.items():
        if key in container_keys and _is_branch(child):
            result[key] = _filter_value(child, patterns, key, key)
        else:
            result[key] = child
    return result
