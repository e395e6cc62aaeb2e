"""Recover the declaration order of keys straight from the raw JSON text."""

import json
import logging
import re
from json.decoder import scanstring

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_DECODER = json.JSONDecoder()


class _Cursor:
    """Minimal forward-only reader over JSON text."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def peek(self) -> str:
        self.pos = _WHITESPACE.match(self.text, self.pos).end()
        return self.text[self.pos:self.pos + 1]

    def expect(self, char: str) -> None:
        if self.peek() != char:
            raise ValueError(f"expected {char!r} at offset {self.pos}")
        self.pos += 1

    def key(self) -> str:
        self.expect('"')
        key, self.pos = scanstring(self.text, self.pos)
        self.expect(":")
        return key

    def skip_value(self) -> None:
        self.peek()
        _, self.pos = _DECODER.raw_decode(self.text, self.pos)

    def members(self):
        """Yield each key of the object at the cursor.

        The caller must consume the value (``skip_value``) before asking for
        the next key.
        """
        self.expect("{")
        if self.peek() == "}":
            self.pos += 1
            return
        while True:
            yield self.key()
            separator = self.peek()
            if separator == ",":
                self.pos += 1
            elif separator == "}":
                self.pos += 1
                return
            else:
                raise ValueError(f"expected ',' or '}}' at offset {self.pos}")


def ordered_top_level_keys(raw_text: str, container_key: str = "paths") -> list[str]:
    """Return the keys of the root object's ``container_key`` object in source order.

    Returns an empty list when the text is not JSON, the container is missing,
    or the text is malformed before the container starts. Malformed content
    inside the container stops the scan and keeps the keys read so far.
    """
    if not isinstance(raw_text, str):
        return []
    cursor = _Cursor(raw_text.lstrip("\ufeff"))

    try:
        for key in cursor.members():
            if key == container_key:
                break
            cursor.skip_value()
        else:
            return []
        if cursor.peek() != "{":
            return []
    except ValueError as exc:
        logger.debug("Could not locate %r in document text: %s", container_key, exc)
        return []

    keys: list[str] = []
    try:
        for key in cursor.members():
            keys.append(key)
            cursor.skip_value()
    except ValueError as exc:
        logger.warning("Malformed %r object after %d keys: %s", container_key, len(keys), exc)
    return keys
