"""Shared test fixtures for specedit.

Provides reusable fixtures for loading document fixtures, building stores,
creating isolated config environments, managing output state, and running
CLI commands. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from specedit.models import Document
from specedit.output import OutputFormat, OutputManager, reset_output, set_output
from specedit.store import DocumentStore


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Raw document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_text() -> str:
    """Petstore 3.0 document as JSON text."""
    return (FIXTURES_DIR / "petstore_3.0.json").read_text(encoding="utf-8")


@pytest.fixture
def petstore_raw(petstore_text: str) -> dict[str, Any]:
    """Petstore 3.0 document as a plain dict."""
    return json.loads(petstore_text)


@pytest.fixture
def petstore_yaml_text() -> str:
    """Small YAML document with unquoted integer response codes."""
    return (FIXTURES_DIR / "petstore_3.0.yaml").read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Document and store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_document(petstore_raw: dict[str, Any]) -> Document:
    """The petstore fixture validated into a Document."""
    return Document.model_validate(petstore_raw)


@pytest.fixture
def store(petstore_document: Document) -> DocumentStore:
    """An in-memory store (no persistence) holding the petstore document."""
    document_store = DocumentStore()
    document_store.set(petstore_document)
    return document_store


@pytest.fixture
def empty_store() -> DocumentStore:
    """An in-memory store with nothing loaded."""
    return DocumentStore()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration and storage to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user
    config or the real stored document. Clears all SPECEDIT_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    config_dir = tmp_path / "config"
    data_dir = tmp_path / "data"

    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    monkeypatch.setenv("XDG_DATA_HOME", str(data_dir))

    for var in ["SPECEDIT_FORMAT", "SPECEDIT_MISSING_REQUIRED", "NO_COLOR"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True, no_color=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
