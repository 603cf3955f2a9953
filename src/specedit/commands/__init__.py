"""Built-in CLI sub-commands for specedit.

This package groups all Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~specedit.commands.document` -- ``import``, ``export`` and ``clear``.
* :mod:`~specedit.commands.info` -- view and edit the info section.
* :mod:`~specedit.commands.servers` -- list, add, remove and probe servers.
* :mod:`~specedit.commands.paths` -- list, add, remove and show operations.
* :mod:`~specedit.commands.components` -- reusable definitions.
* :mod:`~specedit.commands.tags` -- tags.
* :mod:`~specedit.commands.security` -- security schemes and requirements.
* :mod:`~specedit.commands.run` -- send a request for an operation.
* :mod:`~specedit.commands.theme` -- light/dark display preference.

The helpers below give every command the same store lifecycle and the same
mapping from :class:`~specedit.exceptions.SpecEditError` to exit codes.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer

from specedit.config import get_data_dir, resolve_config
from specedit.exceptions import SpecEditError
from specedit.models import EditorConfig
from specedit.output import error
from specedit.store import DocumentStore, LocalStorage


def storage_dir() -> Path:
    """Directory of the :class:`~specedit.store.LocalStorage` cache."""
    return get_data_dir() / "storage"


def command_config(ctx: Optional[typer.Context]) -> EditorConfig:
    """The effective config resolved by the root callback (or resolved now)."""
    if ctx is not None and isinstance(ctx.obj, dict) and "config" in ctx.obj:
        return ctx.obj["config"]
    return resolve_config()


@contextmanager
def handle_errors() -> Iterator[None]:
    """Print a :class:`SpecEditError` and exit with its code."""
    try:
        yield
    except SpecEditError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@contextmanager
def open_storage(persist: bool = True) -> Iterator[Optional[LocalStorage]]:
    """Open the local storage cache for the duration of a command."""
    if not persist:
        yield None
        return
    storage = LocalStorage(storage_dir())
    try:
        yield storage
    finally:
        storage.close()


@contextmanager
def open_store(ctx: Optional[typer.Context] = None) -> Iterator[DocumentStore]:
    """Yield a :class:`DocumentStore` restored from (and mirrored to) local storage."""
    config = command_config(ctx)
    with open_storage(config.persist) as storage:
        yield DocumentStore(storage)
