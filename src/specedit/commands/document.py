"""Document commands -- import, export and clear the stored document."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from specedit.commands import handle_errors, open_store
from specedit.exporter import ExportFormat, export_document, write_export
from specedit.exceptions import NoDocumentError
from specedit.output import print_document, success, suggest


def import_command(
    ctx: typer.Context,
    source: Optional[str] = typer.Argument(
        None, help="URL, file path, or '-' to read from stdin."
    ),
    content: Optional[str] = typer.Option(
        None,
        "--content",
        "-c",
        help="Pasted document text. Used as the fallback when a URL fetch fails.",
    ),
) -> None:
    """Import an OpenAPI document (JSON or YAML), replacing the current one.

    The markup is detected from the content; ``.yaml``/``.yml`` files are
    always read as YAML. Swagger 2.0 and Arazzo documents are rejected and
    the previously stored document is kept.

    Example::

        specedit import https://petstore3.swagger.io/api/v3/openapi.json
        specedit import ./openapi.yaml
        cat openapi.json | specedit import -
    """
    from specedit.parser.loader import import_document

    with handle_errors(), open_store(ctx) as store:
        document = import_document(store, source, content)

    title = document.info.title if document.info else "untitled document"
    count = len(document.path_items())
    success(f"Imported {title} ({count} path{'s' if count != 1 else ''})")
    suggest("Run: specedit paths list")


def export_command(
    ctx: typer.Context,
    fmt: ExportFormat = typer.Option(
        ExportFormat.JSON, "--format", "-f", help="Export format."
    ),
    directory: Optional[Path] = typer.Option(
        None, "--dir", "-d", help="Destination directory (default: current directory)."
    ),
    to_stdout: bool = typer.Option(
        False, "--stdout", help="Print the document instead of writing a file."
    ),
) -> None:
    """Export the current document as openapi-schema.json or openapi-schema.yaml.

    Example::

        specedit export --format yaml
        specedit export --stdout | jq .info
    """
    with handle_errors(), open_store(ctx) as store:
        if to_stdout:
            print_document(export_document(store.get(), fmt), fmt.value)
            return
        path = write_export(store.get(), fmt, directory)
    success(f"Exported to {path}")


def clear_command(ctx: typer.Context) -> None:
    """Forget the stored document."""
    with handle_errors(), open_store(ctx) as store:
        if store.get() is None:
            raise NoDocumentError("No document loaded; nothing to clear")
        store.clear()
    success("Document cleared")
