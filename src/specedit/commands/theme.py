"""Theme command -- light/dark preference for highlighted output."""

from __future__ import annotations

from typing import Optional

import typer

from specedit.commands import command_config, open_storage
from specedit.models import Theme
from specedit.output import print_data, success
from specedit.store import ThemeStore


def theme_command(
    ctx: typer.Context,
    theme: Optional[Theme] = typer.Argument(None, help="light or dark."),
    toggle: bool = typer.Option(False, "--toggle", help="Switch to the other theme."),
) -> None:
    """Show or change the display theme.

    Example::

        specedit theme
        specedit theme dark
        specedit theme --toggle
    """
    with open_storage(command_config(ctx).persist) as storage:
        store = ThemeStore(storage)
        if toggle:
            success(f"Theme set to {store.toggle().value}")
        elif theme is not None:
            store.set(theme)
            success(f"Theme set to {theme.value}")
        else:
            print_data(store.get().value)
