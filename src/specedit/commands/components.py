"""Component commands -- list, add and remove reusable definitions."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from specedit.commands import handle_errors, open_store
from specedit.editors.components import ComponentEditor, parse_definition
from specedit.exceptions import InvalidUsageError
from specedit.models import ComponentType
from specedit.output import info, print_table, success

components_app = typer.Typer(no_args_is_help=True)

_TYPE_OPTION = typer.Option(
    ComponentType.SCHEMAS, "--type", "-t", help="Component collection."
)


@components_app.command("list")
def components_list(
    ctx: typer.Context,
    kind: ComponentType = _TYPE_OPTION,
    query: Optional[str] = typer.Option(
        None, "--query", help="Filter by name or description."
    ),
) -> None:
    """List components of one collection, grouped by their group prefix.

    Example::

        specedit components list
        specedit components list --type parameters --query page
    """
    with handle_errors(), open_store(ctx) as store:
        groups = ComponentEditor(store).list(kind, query)

    if not groups:
        info(f"No {kind.value} defined.")
        return

    rows = [
        [group, entry.name, entry.key, entry.description or ""]
        for group, entries in groups.items()
        for entry in entries
    ]
    print_table(["Group", "Name", "Key", "Description"], rows, title=kind.value)


@components_app.command("add")
def components_add(
    ctx: typer.Context,
    name: str = typer.Argument(help="Component name."),
    kind: ComponentType = _TYPE_OPTION,
    group: Optional[str] = typer.Option(
        None, "--group", "-g", help="Group prefix, stored as 'group/name'."
    ),
    definition: Optional[str] = typer.Option(
        None, "--definition", "-d", help="JSON definition."
    ),
    definition_file: Optional[Path] = typer.Option(
        None,
        "--file",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Read the JSON definition from a file.",
    ),
) -> None:
    """Add a component from a JSON definition.

    Example::

        specedit components add Address -g users -d '{"type": "object"}'
    """
    with handle_errors(), open_store(ctx) as store:
        if definition_file is not None:
            definition = definition_file.read_text(encoding="utf-8")
        value = parse_definition(definition, previous=None) if definition else {}
        if value is None:
            raise InvalidUsageError("Definition is not valid JSON")
        key = ComponentEditor(store).add(kind, name, value, group)
    success(f"Added {kind.value} '{key}'")


@components_app.command("remove")
def components_remove(
    ctx: typer.Context,
    key: str = typer.Argument(help="Component key, including any 'group/' prefix."),
    kind: ComponentType = _TYPE_OPTION,
) -> None:
    """Remove a component."""
    with handle_errors(), open_store(ctx) as store:
        ComponentEditor(store).remove(kind, key)
    success(f"Removed {kind.value} '{key}'")
