"""Tag commands."""

from __future__ import annotations

from typing import Optional

import typer

from specedit.commands import handle_errors, open_store
from specedit.editors.base import clean
from specedit.editors.tags import TagEditor
from specedit.models import Tag
from specedit.output import info, print_table, success

tags_app = typer.Typer(no_args_is_help=True)


@tags_app.command("list")
def tags_list(
    ctx: typer.Context,
    query: Optional[str] = typer.Option(None, "--query", help="Filter by name or description."),
) -> None:
    """List tags."""
    with handle_errors(), open_store(ctx) as store:
        tags = TagEditor(store).list(query)

    if not tags:
        info("No tags defined.")
        return
    print_table(["Name", "Description"], [[t.name, t.description or ""] for t in tags])


@tags_app.command("add")
def tags_add(
    ctx: typer.Context,
    name: str = typer.Argument(help="Tag name."),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
) -> None:
    """Add a tag. Names must be unique."""
    with handle_errors(), open_store(ctx) as store:
        tag = Tag.model_validate(clean(name=name, description=description or None))
        TagEditor(store).add(tag)
    success(f"Added tag '{name}'")


@tags_app.command("remove")
def tags_remove(
    ctx: typer.Context,
    name: str = typer.Argument(help="Tag name."),
) -> None:
    """Remove a tag."""
    with handle_errors(), open_store(ctx) as store:
        TagEditor(store).remove(name)
    success(f"Removed tag '{name}'")
