"""Load an OpenAPI document from a local path, a ``file://`` URL or an HTTP(S) URL.

The raw text is kept next to the parsed document because the declaration
order of ``paths`` is recovered from the text, not from the parsed mapping.
"""

import json
import logging
from pathlib import Path

import requests
import yaml
from pydantic import BaseModel, ConfigDict

from api_doc_renderer.schema.document import Document

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class SourceError(Exception):
    """The document could not be fetched, read or parsed."""


class LoadedSource(BaseModel):
    """A parsed document together with the text it was parsed from."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    document: Document
    raw: str
    source: str


def normalize_source(src: str) -> str:
    """Clean up a source string copied from an IDE or a browser.

    Drops a leading ``#``/``#/``, any ``#...`` fragment (``#L10-20``), the
    ``file://`` scheme and the leading slash of ``/C:/...`` Windows paths.
    """
    s = src.strip()
    if s.startswith("#"):
        s = s[1:]
    s = s.split("#", 1)[0]
    if s.lower().startswith("file://"):
        s = s[len("file://"):]
    if s.startswith("/") and len(s) >= 3 and s[2] == ":":
        s = s[1:]
    return s


def is_remote(src: str) -> bool:
    return src.lower().startswith(("http://", "https://"))


def fetch_url(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Fetch remote text; anything but HTTP 200 is an error."""
    logger.info("Fetching %s", url)
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise SourceError(f"Failed to fetch {url}: {e}") from e
    if response.status_code != 200:
        raise SourceError(f"Failed to fetch {url}: HTTP {response.status_code}")
    return response.text


def parse_document(text: str) -> dict:
    """Parse JSON text, falling back to YAML."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise SourceError(f"Document is neither JSON nor YAML: {e}") from e

    if not isinstance(data, dict):
        raise SourceError("Document root must be an object")
    return data


def read_text(src: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    location = normalize_source(src)
    if is_remote(location):
        text = fetch_url(location, timeout=timeout)
    else:
        path = Path(location)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SourceError(f"Cannot read {location}: {e}") from e
    if not text.strip():
        raise SourceError(f"Empty content from {location}")
    return text


def load_source(src: str, timeout: float = DEFAULT_TIMEOUT) -> LoadedSource:
    """Load and parse a document, keeping its raw text."""
    text = read_text(src, timeout=timeout)
    return LoadedSource(document=Document(parse_document(text)), raw=text, source=src)


def load_text(text: str) -> LoadedSource:
    """Wrap already-available document text."""
    return LoadedSource(document=Document(parse_document(text)), raw=text, source="<text>")
