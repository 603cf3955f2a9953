"""Structural predicates telling reference nodes apart from inline objects.

OpenAPI documents carry no explicit type tag on parameter, request body or
security scheme entries: a ``{"$ref": ...}`` pointer and an inline object
can sit in the same list. These predicates classify a node by field presence.
They accept raw mappings (before validation) as well as the pydantic models
of :mod:`specedit.models` (after validation), and are used as the callable
discriminators of the typed unions, so the untyped tree is converted once at
the import boundary.

``$ref`` is always tested first: a reference must never be read as inline
content, even when it happens to carry a ``name`` or ``content`` key.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

REFERENCE = "reference"
PARAMETER = "parameter"
REQUEST_BODY = "request_body"


def _has(node: Any, key: str, attr: Optional[str] = None) -> bool:
    if isinstance(node, Mapping):
        return key in node
    return getattr(node, attr or key, None) is not None


def is_reference(node: Any) -> bool:
    """Return ``True`` if *node* has a string ``$ref`` field."""
    if isinstance(node, Mapping):
        return isinstance(node.get("$ref"), str)
    return isinstance(getattr(node, "ref", None), str)


def is_inline_parameter(node: Any) -> bool:
    """Return ``True`` if *node* is an inline parameter object (has ``name``)."""
    return not is_reference(node) and _has(node, "name")


def is_inline_request_body(node: Any) -> bool:
    """Return ``True`` if *node* is an inline request body object (has ``content``)."""
    return not is_reference(node) and _has(node, "content")


def parameter_tag(node: Any) -> Optional[str]:
    """Discriminator for ``Reference | Parameter`` unions."""
    if is_reference(node):
        return REFERENCE
    if is_inline_parameter(node):
        return PARAMETER
    return None


def request_body_tag(node: Any) -> Optional[str]:
    """Discriminator for ``Reference | RequestBody`` unions."""
    if is_reference(node):
        return REFERENCE
    if is_inline_request_body(node):
        return REQUEST_BODY
    return None


def security_scheme_tag(node: Any) -> Optional[str]:
    """Discriminator for ``Reference | <security scheme>`` unions.

    Inline schemes are tagged by their ``type`` value (``http``,
    ``apiKey``, ``oauth2``, ``openIdConnect``, ``mutualTLS``).
    """
    if is_reference(node):
        return REFERENCE
    if isinstance(node, Mapping):
        scheme_type = node.get("type")
    else:
        scheme_type = getattr(node, "type", None)
    return scheme_type if isinstance(scheme_type, str) else None
