"""Classify raw text by markup language and parsed content by standard.

Both functions are pure: they never raise on bad input, they report
``None`` instead. The import pipeline in :mod:`specedit.parser.loader`
turns a ``None`` into the matching error.

JSON is tried first because it is the stricter grammar: every JSON text is
also valid YAML, so trying YAML first would report JSON input as ``yaml``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Optional

import yaml

from specedit.exceptions import SpecParseError

JSON = "json"
YAML = "yaml"

OPENAPI = "openapi"
ARAZZO = "arazzo"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _loads_json(text: str) -> Any:
    """``json.loads`` without the ``NaN`` / ``Infinity`` extensions."""
    return json.loads(text, parse_constant=_reject_constant)


def detect_language(text: str) -> Optional[str]:
    """Return ``"json"`` or ``"yaml"`` for *text*, or ``None`` if neither parses.

    Blank text is reported as unrecognised.
    """
    if not text or not text.strip():
        return None

    try:
        _loads_json(text)
        return JSON
    except ValueError:
        pass

    try:
        yaml.safe_load(text)
        return YAML
    except yaml.YAMLError:
        return None


def detect_standard(obj: Any) -> Optional[str]:
    """Return ``"arazzo"``, ``"openapi"`` or ``None`` for a parsed object.

    Only the literal presence of a top-level key is checked; ``arazzo`` is
    tested first. Non-mapping values are never a recognised standard.
    """
    if not isinstance(obj, Mapping):
        return None
    if ARAZZO in obj:
        return ARAZZO
    if OPENAPI in obj:
        return OPENAPI
    return None


def parse_text(text: str, language: str) -> Any:
    """Parse *text* as *language* (``"json"`` or ``"yaml"``).

    Raises:
        SpecParseError: If the text is not valid in that language, or the
            language is unknown.
    """
    if language == JSON:
        try:
            return _loads_json(text)
        except ValueError as exc:
            raise SpecParseError(f"Invalid JSON: {exc}") from exc
    if language == YAML:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise SpecParseError(f"Invalid YAML: {exc}") from exc
    raise SpecParseError(f"Unknown markup language: {language}")
