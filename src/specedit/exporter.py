"""Serialise the stored document back to JSON or YAML.

Export is the inverse of :mod:`specedit.parser.loader`: the document is
dumped by alias with only the keys that were present on import, so a
document imported and exported unchanged is structurally identical to the
input. YAML keeps the document's key order rather than sorting.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml

from specedit.config import atomic_write
from specedit.exceptions import NoDocumentError
from specedit.models import Document

EXPORT_BASENAME = "openapi-schema"


class ExportFormat(str, Enum):
    """File formats the document can be exported as."""

    JSON = "json"
    YAML = "yaml"


def export_document(document: Optional[Document], fmt: ExportFormat) -> str:
    """Return *document* serialised as *fmt*.

    Raises:
        NoDocumentError: If *document* is ``None``.
    """
    if document is None:
        raise NoDocumentError("No document loaded; nothing to export")

    data = document.to_dict()
    if fmt == ExportFormat.YAML:
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def export_filename(fmt: ExportFormat) -> str:
    """Default file name for an export, e.g. ``openapi-schema.yaml``."""
    return f"{EXPORT_BASENAME}.{fmt.value}"


def write_export(
    document: Optional[Document],
    fmt: ExportFormat,
    directory: Optional[Path] = None,
    filename: Optional[str] = None,
) -> Path:
    """Write the serialised document to disk and return the written path.

    Args:
        document: The document to export.
        fmt: Target format.
        directory: Destination directory (defaults to the working directory).
        filename: Overrides :func:`export_filename`.
    """
    text = export_document(document, fmt)
    path = (directory or Path.cwd()) / (filename or export_filename(fmt))
    atomic_write(path, text)
    return path
