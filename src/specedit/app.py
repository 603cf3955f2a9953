"""Typer application and CLI entry point for specedit.

This module wires together the top-level Typer application and registers
the built-in sub-commands. The :func:`main` function is the console-script
entry point declared in ``pyproject.toml``. It installs signal handlers and
invokes the Typer app; unhandled exceptions are written to a crash log under
the data directory.

See Also:
    :mod:`specedit.config`: Configuration resolution.
    :mod:`specedit.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from specedit import __version__
from specedit.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="specedit",
    help="Edit, inspect, and try out OpenAPI 3.x documents.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Sub-commands
# ------------------------------------------------------------------ #

from specedit.commands.components import components_app  # noqa: E402
from specedit.commands.document import (  # noqa: E402
    clear_command,
    export_command,
    import_command,
)
from specedit.commands.info import info_app  # noqa: E402
from specedit.commands.paths import paths_app  # noqa: E402
from specedit.commands.run import run_command  # noqa: E402
from specedit.commands.security import security_app  # noqa: E402
from specedit.commands.servers import servers_app  # noqa: E402
from specedit.commands.tags import tags_app  # noqa: E402
from specedit.commands.theme import theme_command  # noqa: E402

app.command("import")(import_command)
app.command("export")(export_command)
app.command("clear")(clear_command)
app.command("run")(run_command)
app.command("theme")(theme_command)
app.add_typer(info_app, name="info", help="View and edit the info section.")
app.add_typer(servers_app, name="servers", help="Manage servers.")
app.add_typer(paths_app, name="paths", help="Manage paths and operations.")
app.add_typer(components_app, name="components", help="Manage reusable components.")
app.add_typer(tags_app, name="tags", help="Manage tags.")
app.add_typer(security_app, name="security", help="Manage security schemes.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"specedit {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Resolves the effective configuration, initialises the global
    :class:`~specedit.output.OutputManager` from CLI flags and the stored
    theme, and keeps the configuration in ``ctx.obj`` for sub-commands.
    """
    from specedit.commands import open_storage
    from specedit.config import resolve_config
    from specedit.exceptions import ConfigError
    from specedit.output import OutputFormat, OutputManager, error, set_output
    from specedit.store import ThemeStore

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    try:
        config = resolve_config(cli_format=cli_format)
        fmt = OutputFormat(config.output.format)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    except ValueError:
        error(f"Unknown output format: {config.output.format}")
        raise typer.Exit(code=2) from None

    with open_storage(config.persist) as storage:
        theme = ThemeStore(storage).get()

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
            theme=theme,
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from specedit.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``specedit`` console script.

    Unhandled :class:`~specedit.exceptions.SpecEditError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from specedit.exceptions import SpecEditError
        from specedit.output import error

        if isinstance(exc, SpecEditError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
