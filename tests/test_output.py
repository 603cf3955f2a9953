"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- format_response, print_document and print_table in each format
- Theme to syntax style mapping
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from specedit import output as output_module
from specedit.models import Theme
from specedit.output import (
    SYNTAX_THEMES,
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture(autouse=True)
def _reset_global_output():
    """Ensure the global output instance is reset between tests."""
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("specedit.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("specedit.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager(format=OutputFormat.AUTO).format == OutputFormat.RICH

    def test_no_color_flag_forces_plain(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.AUTO, no_color=True)
        assert mgr.format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDisabling:
    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    @pytest.mark.parametrize("method", ["info", "success", "warning", "error", "suggest"])
    def test_diagnostics_go_to_stderr(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        getattr(mgr, method)("diagnostic text")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "diagnostic text" in captured.err

    def test_prefixes(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
        mgr.warning("w")
        mgr.error("e")
        mgr.suggest("s")
        mgr.debug("d")
        err = capfd.readouterr().err.splitlines()
        assert err == ["Warning: w", "Error: e", "→ s", "[debug] d"]

    def test_data_goes_to_stdout(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.info("loading...")
        mgr.format_response({"result": "ok"})
        captured = capfd.readouterr()
        assert json.loads(captured.out) == {"result": "ok"}
        assert "loading..." in captured.err


class TestQuietAndVerbose:
    @pytest.mark.parametrize("method", ["info", "success", "suggest"])
    def test_quiet_suppresses(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        getattr(mgr, method)("hidden")
        assert capfd.readouterr().err == ""

    @pytest.mark.parametrize("method", ["warning", "error"])
    def test_quiet_keeps_problems(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
        getattr(mgr, method)("shown")
        assert "shown" in capfd.readouterr().err

    def test_debug_hidden_by_default(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN, no_color=True).debug("hidden")
        assert capfd.readouterr().err == ""


# ------------------------------------------------------------------ #
# Data renderers
# ------------------------------------------------------------------ #


class TestFormatResponse:
    def test_json_string_is_reparsed(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.format_response('{"key": "value"}')
        assert json.loads(capfd.readouterr().out) == {"key": "value"}

    def test_plain_dict_rows(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response({"title": "Petstore", "contact": {"name": "A"}})
        lines = capfd.readouterr().out.strip().split("\n")
        assert lines == ["title\tPetstore", 'contact\t{"name": "A"}']

    def test_plain_list(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response([{"id": 1, "name": "Rex"}, "x"])
        assert capfd.readouterr().out == "1\tRex\nx\n"


class TestPrintDocument:
    def test_plain_prints_text(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_document("openapi: 3.0.0\n", "yaml")
        assert capfd.readouterr().out == "openapi: 3.0.0\n"

    def test_rich_highlights(self, capfd, non_tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        mgr = OutputManager(format=OutputFormat.RICH, theme=Theme.DARK)
        mgr.print_document('{"openapi": "3.0.0"}', "json")
        out = capfd.readouterr().out
        assert "openapi" in out
        assert "\x1b[" in out


class TestPrintTable:
    def test_json_records(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.print_table(["Name", "Type"], [["bearerAuth", "http"]])
        assert json.loads(capfd.readouterr().out) == [{"Name": "bearerAuth", "Type": "http"}]

    def test_plain_tsv(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_table(["Name", "Type"], [["bearerAuth", "http"]])
        assert capfd.readouterr().out == "Name\tType\nbearerAuth\thttp\n"


# ------------------------------------------------------------------ #
# Theme
# ------------------------------------------------------------------ #


class TestTheme:
    def test_default_light(self, non_tty):
        mgr = OutputManager()
        assert mgr.theme == Theme.LIGHT
        assert mgr.syntax_theme == SYNTAX_THEMES[Theme.LIGHT]

    def test_dark(self, non_tty):
        assert OutputManager(theme=Theme.DARK).syntax_theme == "monokai"


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_lazy_default(self, non_tty):
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_and_reset(self, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert get_output() is not mgr

    def test_convenience_functions_delegate(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.print_data("data")
        output_module.info("note")
        captured = capfd.readouterr()
        assert captured.out == "data\n"
        assert captured.err == "note\n"
