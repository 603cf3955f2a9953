"""Import pipeline: raw text from a URL, file, or stdin into a stored document.

The pipeline runs in four steps, each of which can reject the input while
leaving the currently stored document untouched:

1. **Read** -- :func:`read_source` fetches the text (URL, local file, or
   ``-`` for stdin). A file's ``.yaml``/``.yml`` extension is kept as a
   language hint; URL and pasted content rely on content detection only.
2. **Classify** -- :func:`~specedit.parser.detect.detect_language` picks
   JSON or YAML.
3. **Check the standard** -- ``arazzo`` documents are rejected as not
   implemented, content without an ``openapi`` key as unrecognised.
4. **Validate and store** -- the tree is converted into a
   :class:`~specedit.models.Document` and handed to
   :meth:`~specedit.store.DocumentStore.load_from_text`.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import httpx
from pydantic import ValidationError

from specedit.exceptions import (
    ConnectionError_,
    InvalidUsageError,
    SpecParseError,
    UnrecognizedStandardError,
    UnsupportedStandardError,
)
from specedit.models import Document
from specedit.parser.detect import (
    ARAZZO,
    YAML,
    detect_language,
    detect_standard,
    parse_text,
)

if TYPE_CHECKING:
    from specedit.store import DocumentStore


def read_source(source: str, fallback: Optional[str] = None) -> tuple[str, str]:
    """Read raw text from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.
        fallback: Pasted content to use when a URL answers with a non-2xx
            status.

    Returns:
        A ``(text, hint)`` tuple. *hint* is ``"yaml"`` for ``.yaml``/``.yml``
        files and empty otherwise.

    Raises:
        SpecParseError: If the source cannot be read or is empty.
        ConnectionError_: If a URL cannot be reached.
    """
    if source == "-":
        return _read_stdin(), ""
    if source.startswith(("http://", "https://")):
        return _read_url(source, fallback), ""
    return _read_file(source)


def _read_stdin() -> str:
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")
    return content


def _read_url(url: str, fallback: Optional[str] = None) -> str:
    """Fetch document text from *url*.

    A non-2xx answer falls back to *fallback* when one is given.
    """
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
    except httpx.HTTPError as exc:
        raise ConnectionError_(f"Failed to fetch document from {url}: {exc}") from exc

    if response.is_success:
        return response.text
    if fallback:
        return fallback
    raise SpecParseError(
        f"HTTP {response.status_code} fetching document from {url}"
    )


def _read_file(path: str) -> tuple[str, str]:
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Document file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read document file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Document file is empty: {path}")

    hint = YAML if file_path.suffix.lower() in (".yaml", ".yml") else ""
    return content, hint


def check_standard(data: Any) -> None:
    """Reject parsed content that is not an OpenAPI document.

    Raises:
        UnsupportedStandardError: For Arazzo documents.
        UnrecognizedStandardError: For anything without an ``openapi`` key.
    """
    standard = detect_standard(data)
    if standard == ARAZZO:
        raise UnsupportedStandardError("Arazzo support is not implemented yet")
    if standard is None:
        msg = "Not a recognized standard: expected a top-level 'openapi' key"
        if isinstance(data, dict) and "swagger" in data:
            msg += (
                f" (found Swagger {data['swagger']}; "
                "consider converting with https://converter.swagger.io)"
            )
        raise UnrecognizedStandardError(msg)


def build_document(data: Any) -> Document:
    """Validate a parsed tree into a :class:`Document`.

    Raises:
        SpecParseError: If the tree does not fit the document model.
    """
    try:
        return Document.model_validate(data)
    except ValidationError as exc:
        raise SpecParseError(
            f"Invalid OpenAPI document ({exc.error_count()} problem(s)):\n{exc}"
        ) from exc


def parse_document(text: str, language: str) -> Document:
    """Parse *text* as *language*, check the standard, and validate.

    Raises:
        SpecParseError: On any of the failures described in the module
            docstring.
    """
    data = parse_text(text, language)
    check_standard(data)
    return build_document(data)


def resolve_language(text: str, hint: str = "") -> str:
    """Return the markup language of *text*, honouring a file-extension *hint*.

    Raises:
        SpecParseError: If the text is neither JSON nor YAML.
    """
    language = hint or detect_language(text)
    if language is None:
        raise SpecParseError(
            "Not a recognized markup: content is neither valid JSON nor YAML"
        )
    return language


def load_document(text: str, hint: str = "") -> Document:
    """Run the classify / check / validate steps on *text* without storing."""
    return parse_document(text, resolve_language(text, hint))


def import_document(
    store: DocumentStore,
    source: Optional[str] = None,
    content: Optional[str] = None,
) -> Document:
    """Import a document into *store* from a source and/or pasted content.

    A *source* (URL, path, or ``-``) takes precedence; *content* is used
    on its own when no source is given, or as the fallback for a URL that
    answers with an error status.

    Returns:
        The stored document.

    Raises:
        InvalidUsageError: If neither *source* nor *content* is given.
        SpecParseError: If the text is rejected. The store is unchanged.
        ConnectionError_: If a URL cannot be reached. The store is unchanged.
    """
    if source:
        text, hint = read_source(source, fallback=content)
    elif content and content.strip():
        text, hint = content, ""
    else:
        raise InvalidUsageError(
            "Nothing to import: give a URL, a file path, '-' for stdin, or content"
        )

    return store.load_from_text(text, resolve_language(text, hint))
