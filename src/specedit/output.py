"""Terminal output for specedit commands.

Data (tables, exported documents, response bodies) is written to stdout so
it can be piped; everything else (status lines, warnings, errors, hints)
goes to stderr. The data format is one of:

* ``rich`` -- tables and syntax-highlighted JSON/YAML, used by default when
  stdout is a terminal and colour is allowed;
* ``plain`` -- tab-separated rows and raw text;
* ``json`` -- machine-readable JSON.

Colour is disabled by ``--no-color``, ``NO_COLOR`` (any value) or
``TERM=dumb``. The highlighting style follows the stored light/dark theme.

Commands use the module-level functions (:func:`info`, :func:`print_table`,
...), which forward to the :class:`OutputManager` installed by
:func:`~specedit.app.main_callback`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from specedit.models import Theme

SYNTAX_THEMES: dict[Theme, str] = {
    Theme.LIGHT: "friendly",
    Theme.DARK: "monokai",
}


class OutputFormat(str, Enum):
    """Data formats; ``AUTO`` picks ``RICH`` or ``PLAIN`` from the terminal."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set to anything or ``TERM`` is ``dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


def _dumps(data: Any, indent: Optional[int] = 2) -> str:
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


def _maybe_json(data: Any) -> tuple[Any, bool]:
    """Parse *data* when it is a JSON string; report whether it is structured."""
    if isinstance(data, str):
        try:
            return json.loads(data), True
        except ValueError:
            return data, False
    return data, True


class OutputManager:
    """Routes command output to stdout or stderr in the resolved format.

    Args:
        format: Requested data format.
        no_color: Turn off colour and markup on both streams.
        quiet: Hide ``info``, ``success`` and ``suggest`` messages.
        verbose: Show ``debug`` messages.
        theme: Light or dark; selects the highlighting style.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        theme: Theme = Theme.LIGHT,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._theme = theme

        if format != OutputFormat.AUTO:
            self._format = format
        elif _is_tty() and not self._no_color:
            self._format = OutputFormat.RICH
        else:
            self._format = OutputFormat.PLAIN

        rich = self._format == OutputFormat.RICH
        self._stdout = Console(file=sys.stdout, no_color=self._no_color, force_terminal=rich)
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def theme(self) -> Theme:
        return self._theme

    @property
    def syntax_theme(self) -> str:
        """Pygments style used for highlighted output."""
        return SYNTAX_THEMES[self._theme]

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def _highlight(self, text: str, language: str) -> None:
        self._stdout.print(
            Syntax(text, language, theme=self.syntax_theme, word_wrap=True)
        )

    def format_response(self, data: Any) -> None:
        """Write a structured value (a response body, a document section).

        JSON strings are re-parsed first so they are pretty-printed like
        any other value. In plain mode a mapping becomes ``key<TAB>value``
        lines and a list of mappings becomes one tab-joined line per item.
        """
        data, structured = _maybe_json(data)

        if self._format == OutputFormat.JSON:
            self.print_data(_dumps(data) if structured else data)
            return

        if self._format == OutputFormat.RICH:
            if structured:
                self._highlight(_dumps(data), "json")
            else:
                self._stdout.print(data)
            return

        if isinstance(data, dict):
            for key, value in data.items():
                if isinstance(value, (dict, list)):
                    value = _dumps(value, indent=None)
                self.print_data(f"{key}\t{value}")
        elif isinstance(data, list):
            for item in data:
                if isinstance(item, dict):
                    item = "\t".join(str(v) for v in item.values())
                self.print_data(str(item))
        else:
            self.print_data(str(data))

    def print_document(self, text: str, language: str) -> None:
        """Write exported document text; highlighted as *language* in rich mode."""
        text = text.rstrip("\n")
        if self._format == OutputFormat.RICH:
            self._highlight(text, language)
        else:
            self.print_data(text)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows as a Rich table, TSV with a header line, or JSON records.

        *title* is only shown in rich mode.
        """
        if self._format == OutputFormat.JSON:
            self.print_data(_dumps([dict(zip(headers, row)) for row in rows]))
            return

        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def _emit(self, text: str, style: Optional[str] = None, prefix: str = "") -> None:
        """Write one diagnostic line; *style* covers the prefix, or the whole
        line when there is no prefix."""
        if self._no_color:
            print(f"{prefix}{text}", file=sys.stderr, flush=True)
            return
        text = escape(text)
        if style and prefix:
            self._stderr.print(f"[{style}]{prefix}[/{style}]{text}")
        elif style:
            self._stderr.print(f"[{style}]{text}[/{style}]")
        else:
            self._stderr.print(text)

    def info(self, message: str) -> None:
        if not self._quiet:
            self._emit(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._emit(message, "green")

    def warning(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._emit(message, "yellow", "Warning: ")

    def error(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._emit(message, "bold red", "Error: ")

    def suggest(self, message: str) -> None:
        """A next step for the user, e.g. ``specedit import openapi.yaml``."""
        if not self._quiet:
            self._emit(f"→ {message}", "dim")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._emit(f"[debug] {message}", "dim")


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (used between tests)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_document(text: str, language: str) -> None:
    get_output().print_document(text, language)


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
