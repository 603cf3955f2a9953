"""Server commands -- list, add, remove and probe server entries."""

from __future__ import annotations

from typing import Optional

import typer

from specedit.client.prober import check_servers
from specedit.commands import command_config, handle_errors, open_store
from specedit.editors.base import clean
from specedit.editors.servers import ServerEditor
from specedit.models import Server, ServerStatus
from specedit.output import debug, info, print_table, success

servers_app = typer.Typer(no_args_is_help=True)


def _variables(server: Server) -> str:
    return ", ".join(
        f"{name}={variable.default}" for name, variable in (server.variables or {}).items()
    )


def _status_rows(servers: list[Server], statuses: list[ServerStatus]) -> list[list[str]]:
    return [
        [server.url, server.description or "", _variables(server), status.value]
        for server, status in zip(servers, statuses)
    ]


@servers_app.command("list")
def servers_list(
    ctx: typer.Context,
    query: Optional[str] = typer.Option(
        None, "--query", help="Filter by URL or description."
    ),
    check: bool = typer.Option(False, "--check", help="Probe each server's reachability."),
) -> None:
    """List servers with their variables (and reachability with --check).

    Example::

        specedit servers list
        specedit servers list --query staging --check
    """
    with handle_errors(), open_store(ctx) as store:
        servers = ServerEditor(store).list(query)

    if not servers:
        info("No servers defined.")
        return

    if check:
        statuses = check_servers(
            [s.url for s in servers], command_config(ctx).probe, on_update=_report
        )
        print_table(["URL", "Description", "Variables", "Status"], _status_rows(servers, statuses))
        return

    rows = [[s.url, s.description or "", _variables(s)] for s in servers]
    print_table(["URL", "Description", "Variables"], rows, title=f"Servers ({len(rows)})")


def _report(index: int, status: ServerStatus) -> None:
    debug(f"server #{index + 1}: {status.value}")


@servers_app.command("check")
def servers_check(ctx: typer.Context) -> None:
    """Probe every server concurrently: live on any non-404 answer.

    Example::

        specedit servers check
    """
    with handle_errors(), open_store(ctx) as store:
        servers = ServerEditor(store).list()

    if not servers:
        info("No servers defined.")
        return

    statuses = check_servers(
        [s.url for s in servers], command_config(ctx).probe, on_update=_report
    )
    print_table(["URL", "Description", "Variables", "Status"], _status_rows(servers, statuses))


@servers_app.command("add")
def servers_add(
    ctx: typer.Context,
    url: str = typer.Argument(help="Server base URL."),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
) -> None:
    """Add a server. URLs must be unique.

    Example::

        specedit servers add https://staging.example.com/v1 -d Staging
    """
    with handle_errors(), open_store(ctx) as store:
        server = Server.model_validate(clean(url=url, description=description or None))
        ServerEditor(store).add(server)
    success(f"Added server {url}")


@servers_app.command("remove")
def servers_remove(
    ctx: typer.Context,
    url: str = typer.Argument(help="URL of the server to remove."),
) -> None:
    """Remove the server(s) with the given URL."""
    with handle_errors(), open_store(ctx) as store:
        ServerEditor(store).remove(url)
    success(f"Removed server {url}")
