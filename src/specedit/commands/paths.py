"""Path commands -- list, add, remove and inspect operations."""

from __future__ import annotations

from typing import Optional

import typer

from specedit.commands import handle_errors, open_store
from specedit.editors.paths import PathEditor
from specedit.models import Reference
from specedit.output import format_response, info, print_table, success
from specedit.parser.resolver import resolve_parameter

paths_app = typer.Typer(no_args_is_help=True)


@paths_app.command("list")
def paths_list(
    ctx: typer.Context,
    query: Optional[str] = typer.Option(
        None, "--query", help="Filter by path or operation summary."
    ),
    method: Optional[str] = typer.Option(
        None, "--method", "-m", help="Only operations with this HTTP method."
    ),
) -> None:
    """List operations in document order.

    Example::

        specedit paths list
        specedit paths list --method post --query pet
    """
    with handle_errors(), open_store(ctx) as store:
        operations = PathEditor(store).list(query, method)

    if not operations:
        info("No matching operations.")
        return

    rows = [
        [op_method.upper(), path, op.summary or "-", "Yes" if op.deprecated else ""]
        for path, op_method, op in operations
    ]
    print_table(
        ["Method", "Path", "Summary", "Deprecated"], rows, title=f"Operations ({len(rows)})"
    )


@paths_app.command("show")
def paths_show(
    ctx: typer.Context,
    path: str = typer.Argument(help="Path template, e.g. /pets/{petId}."),
    method: str = typer.Argument(help="HTTP method."),
) -> None:
    """Show one operation and its resolved parameters.

    Example::

        specedit paths show /pets get
    """
    with handle_errors(), open_store(ctx) as store:
        operation = PathEditor(store).get_operation(path, method)
        document = store.get()
        root = document.to_dict()
        rows = []
        for node in operation.parameters or []:
            parameter = resolve_parameter(document, node, root)
            rows.append([
                parameter.name,
                parameter.location.value,
                "Yes" if parameter.required else "",
                node.ref if isinstance(node, Reference) else "inline",
                parameter.description or "",
            ])

    format_response(operation.to_dict())
    if rows:
        print_table(
            ["Name", "In", "Required", "Source", "Description"], rows, title="Parameters"
        )


@paths_app.command("add")
def paths_add(
    ctx: typer.Context,
    path: str = typer.Argument(help="Path template starting with '/'."),
    method: str = typer.Argument(help="HTTP method."),
    summary: Optional[str] = typer.Option(None, "--summary", "-s"),
) -> None:
    """Add an operation with a default 200 response.

    Example::

        specedit paths add /pets/{petId} delete --summary "Delete a pet"
    """
    with handle_errors(), open_store(ctx) as store:
        PathEditor(store).add(path, method, summary)
    success(f"Added {method.upper()} {path}")


@paths_app.command("remove")
def paths_remove(
    ctx: typer.Context,
    path: str = typer.Argument(help="Path template."),
    method: str = typer.Argument(help="HTTP method."),
) -> None:
    """Remove an operation; the path goes too when it has no operations left."""
    with handle_errors(), open_store(ctx) as store:
        PathEditor(store).remove(path, method)
    success(f"Removed {method.upper()} {path}")
