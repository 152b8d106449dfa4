"""Read raw OpenAPI text and decode it into Python data.

This module handles all I/O and format detection for incoming documents.  It
supports both JSON and YAML content and performs no schema validation; that
happens later in :func:`~specgraph.parser.extractor.parse_spec`.

The two public functions are:

* :func:`load_source` -- Read raw text from a local file, an HTTP(S) URL, or
  stdin (``-``).  The text is returned undecoded so it can be stored
  verbatim or passed on to :func:`decode`.
* :func:`decode` -- Turn raw text into a Python value, trying strict JSON
  first and YAML second.  Already-decoded documents pass through.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from specgraph.exceptions import (
    EmptyInputError,
    SourceLoadError,
    UnparseableContentError,
)

logger = logging.getLogger(__name__)


def load_source(source: str, timeout: float = 30.0) -> str:
    """Read raw spec text from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.
        timeout: Network timeout in seconds for URL sources.

    Returns:
        The raw, undecoded document text.

    Raises:
        SourceLoadError: If the source cannot be read.
    """
    if source == "-":
        return _read_stdin()
    elif source.startswith(("http://", "https://")):
        return _read_url(source, timeout)
    else:
        return _read_file(source)


def _read_stdin() -> str:
    try:
        return sys.stdin.read()
    except Exception as exc:
        raise SourceLoadError(f"Failed to read from stdin: {exc}") from exc


def _read_url(url: str, timeout: float) -> str:
    """Fetch spec text from URL.

    Raises:
        SourceLoadError: On HTTP error status or transport failure.
    """
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SourceLoadError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SourceLoadError(f"Failed to fetch spec from {url}: {exc}") from exc

    logger.debug("Fetched %d characters from %s", len(response.text), url)
    return response.text


def _read_file(path: str) -> str:
    file_path = Path(path)
    if not file_path.is_file():
        raise SourceLoadError(f"Spec file not found: {path}")

    try:
        return file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceLoadError(f"Failed to read spec file {path}: {exc}") from exc


def decode(raw: Any) -> Any:
    """Decode a raw spec payload.

    Strings and UTF-8 bytes are trimmed and parsed as strict JSON first,
    then as YAML.  Valid JSON is also valid YAML, but JSON parsing is
    stricter and faster, so it goes first.  Anything else is taken to be an
    already-decoded document and returned as it is (no copy is made,
    nothing is modified).

    The result is whatever the document decodes to; whether it is a usable
    OpenAPI object is decided by :func:`~specgraph.parser.extractor.parse_spec`.

    Args:
        raw: Document text, UTF-8 bytes, or an already-decoded document.

    Returns:
        The decoded document.

    Raises:
        EmptyInputError: If the text is blank after trimming.
        UnparseableContentError: If the text is neither JSON nor YAML, or
            the bytes are not UTF-8.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise UnparseableContentError(f"Spec content is not valid UTF-8: {exc}") from exc

    if not isinstance(raw, str):
        return raw

    content = raw.strip()
    if not content:
        raise EmptyInputError("Specification content is empty.")

    try:
        result = json.loads(content)
    except json.JSONDecodeError as json_error:
        try:
            result = yaml.safe_load(content)
        except yaml.YAMLError as yaml_error:
            raise UnparseableContentError(
                "Failed to parse content as JSON or YAML"
                f"\n  JSON error: {json_error}"
                f"\n  YAML error: {yaml_error}"
            ) from yaml_error
        logger.debug("Decoded document as YAML")
    else:
        logger.debug("Decoded document as JSON")
    return result
