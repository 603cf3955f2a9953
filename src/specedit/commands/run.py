"""Run command -- send a request for one operation of the stored document."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import typer

from specedit.client.response import format_result
from specedit.client.runner import RequestRunner
from specedit.commands import command_config, handle_errors, open_store
from specedit.editors.paths import PathEditor
from specedit.editors.security import CredentialBag, SecurityEditor
from specedit.exceptions import InvalidUsageError
from specedit.exit_codes import EXIT_GENERIC_FAILURE
from specedit.models import HttpSecurityScheme, MissingParameterPolicy
from specedit.output import info


def _parse_pairs(pairs: list[str]) -> dict[str, str]:
    """Split ``name=value`` arguments; the value may itself contain ``=``."""
    values: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise InvalidUsageError(f"Expected name=value, got '{pair}'")
        values[name] = value
    return values


def _capture_credentials(
    security: SecurityEditor, credentials: CredentialBag, pairs: list[str]
) -> None:
    """Record ``scheme=value`` credentials; basic auth values are ``user:password``.

    Raises:
        NotFoundError: If a scheme is not declared in the document.
    """
    for name, value in _parse_pairs(pairs).items():
        scheme = security.get(name)
        if isinstance(scheme, HttpSecurityScheme) and scheme.scheme.lower() == "basic":
            username, _, password = value.partition(":")
            credentials.set_basic(name, username, password)
        else:
            credentials.set(name, value)


def run_command(
    ctx: typer.Context,
    path: str = typer.Argument(help="Path template, e.g. /pets/{petId}."),
    method: str = typer.Argument(help="HTTP method."),
    params: Optional[list[str]] = typer.Option(
        None, "--param", "-p", help="Parameter value as name=value (repeatable)."
    ),
    server: Optional[str] = typer.Option(
        None, "--server", "-s", help="Base URL (default: the document's first server)."
    ),
    body: Optional[str] = typer.Option(
        None, "--body", "-b", help="Request body; parsed as JSON when possible."
    ),
    body_file: Optional[Path] = typer.Option(
        None,
        "--body-file",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Read the request body from a file.",
    ),
    credentials: Optional[list[str]] = typer.Option(
        None,
        "--credential",
        "-c",
        help=(
            "Credential for a security scheme as scheme=value (repeatable;"
            " user:password for basic auth). Captured only, never sent."
        ),
    ),
    missing_required: Optional[MissingParameterPolicy] = typer.Option(
        None,
        "--missing-required",
        help="What to do when a required parameter is empty: ignore, warn, block.",
    ),
) -> None:
    """Send a request for an operation and print the response.

    Path, query, header and cookie parameters are filled from --param.
    Referenced parameters are resolved against components.parameters.
    Any HTTP status is a result; only failures to get a JSON response
    exit non-zero.

    Example::

        specedit run /pets get -p limit=10
        specedit run /pets/{petId} get -p petId=42 --server http://localhost:8080
        specedit run /pets post -b '{"name": "Rex"}'
        specedit run /pets get -c bearerAuth=token
    """
    config = command_config(ctx).request
    if missing_required is not None:
        config = config.model_copy(update={"missing_required": missing_required})

    with handle_errors(), open_store(ctx) as store:
        method = method.lower()
        operation = PathEditor(store).get_operation(path, method)
        runner = RequestRunner(store, config)
        for name, value in _parse_pairs(params or []).items():
            runner.update_value(path, method, name, value)
        runner.set_server(path, method, server)
        if body_file is not None:
            body = body_file.read_text(encoding="utf-8")
        runner.set_body(path, method, body)
        bag = runner.state(path, method).credentials
        _capture_credentials(SecurityEditor(store), bag, credentials or [])

        result = asyncio.run(runner.send(path, method, operation))

    if bag.values:
        info(f"Captured credentials for: {', '.join(bag.values)} (not sent)")
    format_result(result)
    if not result.ok:
        raise typer.Exit(code=EXIT_GENERIC_FAILURE)
