"""Configuration for specedit: directories, config files and precedence.

Two JSON files feed the effective :class:`~specedit.models.EditorConfig`:

* the global ``config.json`` in :func:`get_config_dir`;
* an optional ``./specedit.json`` in the working directory, holding any
  subset of the same keys.

:func:`resolve_config` layers them under ``SPECEDIT_*`` environment
variables and CLI flags. Directories follow the XDG base-directory layout on
Linux and BSD and live under ``~/.specedit/`` elsewhere.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from specedit.exceptions import ConfigError
from specedit.models import EditorConfig

_APP_NAME = "specedit"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specedit.json"

ENV_FORMAT = "SPECEDIT_FORMAT"
ENV_MISSING_REQUIRED = "SPECEDIT_MISSING_REQUIRED"

# kind -> (XDG variable, default under $HOME, subdirectory of ~/.specedit)
_DIRS: dict[str, tuple[str, tuple[str, ...], Optional[str]]] = {
    "config": ("XDG_CONFIG_HOME", (".config",), None),
    "data": ("XDG_DATA_HOME", (".local", "share"), "data"),
}


# --- Directories ---


def _app_dir(kind: str) -> Path:
    env_var, home_default, fallback_sub = _DIRS[kind]
    system = platform.system()
    if system == "Linux" or system.endswith("BSD"):
        base = Path(os.environ.get(env_var) or Path.home().joinpath(*home_default))
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
        if fallback_sub:
            path = path / fallback_sub
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding ``config.json``; created on first use.

    ``$XDG_CONFIG_HOME/specedit`` (default ``~/.config/specedit``) on
    Linux/BSD, ``~/.specedit`` elsewhere.
    """
    return _app_dir("config")


def get_data_dir() -> Path:
    """Directory for the persisted document, theme and crash logs.

    ``$XDG_DATA_HOME/specedit`` (default ``~/.local/share/specedit``) on
    Linux/BSD, ``~/.specedit/data`` elsewhere.
    """
    return _app_dir("data")


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* through a sibling temp file and ``os.replace``.

    The temp file is removed again if anything fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


# --- Config files ---


def _global_config_path() -> Path:
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> EditorConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~specedit.models.EditorConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return EditorConfig()
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
        return EditorConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: EditorConfig) -> None:
    """Persist the global configuration atomically to disk.

    Args:
        config: The configuration to save.
    """
    data = config.model_dump(mode="json")
    atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./specedit.json``.

    Project-local config sits between global config and environment variables
    in the precedence chain. It uses the same shape as the global config,
    and any subset of keys may be given.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Precedence resolution ---


def resolve_config(
    cli_format: Optional[str] = None,
    cli_missing_required: Optional[str] = None,
) -> EditorConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_format``, ``cli_missing_required``)
        2. Environment variables (``SPECEDIT_FORMAT``,
           ``SPECEDIT_MISSING_REQUIRED``)
        3. Project config (``./specedit.json``)
        4. User config (``~/.config/specedit/config.json``)
        5. Defaults

    Returns:
        The effective :class:`~specedit.models.EditorConfig`.

    Raises:
        ConfigError: If any layer holds an invalid value.
    """
    data = load_global_config().model_dump(mode="json")

    project = load_project_config()
    if project is not None:
        data = _deep_merge(data, project)

    env_format = os.environ.get(ENV_FORMAT)
    if env_format:
        data["output"]["format"] = env_format
    env_policy = os.environ.get(ENV_MISSING_REQUIRED)
    if env_policy:
        data["request"]["missing_required"] = env_policy

    if cli_format is not None:
        data["output"]["format"] = cli_format
    if cli_missing_required is not None:
        data["request"]["missing_required"] = cli_missing_required

    try:
        return EditorConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
