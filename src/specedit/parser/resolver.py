"""Resolve ``$ref`` pointers against the loaded document.

Unlike a whole-document inliner, resolution here is on demand: the stored
document keeps its references (they must survive export unchanged), and the
request runner asks for the target of one reference at a time.

Only **internal** references (those starting with ``#/``) are supported.
External file or URL references raise
:class:`~specedit.exceptions.SpecParseError`. Chains of references are
followed; a chain that loops back on itself is reported as an error instead
of recursing forever.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from specedit.exceptions import SpecParseError
from specedit.models import Document, Parameter, Reference, RequestBody
from specedit.parser.discriminators import is_reference


def resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Resolve a single ``$ref`` string against the dumped document.

    Parses JSON Pointer references like ``#/components/parameters/PageSize``
    and walks *root* to the referenced value, handling RFC 6901 escaping
    (``~0`` for ``~``, ``~1`` for ``/``).

    Args:
        ref: The ``$ref`` string.
        root: The document as a plain dict (see :meth:`Document.to_dict`).

    Returns:
        The raw value found at the referenced path.

    Raises:
        SpecParseError: If the reference is external, or if any segment
            of the pointer does not exist.
    """
    if not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': "
                    f"key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': "
                    f"invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current


def _follow(ref: str, root: dict[str, Any]) -> Any:
    """Follow *ref* through any chain of references to a non-reference node."""
    seen: set[str] = set()
    target: Any = {"$ref": ref}
    while is_reference(target):
        pointer = target["$ref"]
        if pointer in seen:
            raise SpecParseError(f"Circular $ref chain at '{pointer}'")
        seen.add(pointer)
        target = resolve_pointer(pointer, root)
    return target


def resolve_parameter(
    document: Document,
    node: Parameter | Reference,
    root: Optional[dict[str, Any]] = None,
) -> Parameter:
    """Return the inline :class:`Parameter` for an inline or referenced entry.

    Args:
        document: The document the reference points into.
        node: An operation or path-level parameter entry.
        root: Optional pre-dumped document, to avoid dumping once per call
            when resolving many parameters.

    Raises:
        SpecParseError: If the reference cannot be followed or its target
            is not a parameter object.
    """
    if isinstance(node, Parameter):
        return node
    root = root if root is not None else document.to_dict()
    target = _follow(node.ref, root)
    try:
        return Parameter.model_validate(target)
    except ValidationError as exc:
        raise SpecParseError(
            f"$ref '{node.ref}' does not point to a parameter: {exc}"
        ) from exc


def resolve_request_body(
    document: Document,
    node: RequestBody | Reference,
    root: Optional[dict[str, Any]] = None,
) -> RequestBody:
    """Return the inline :class:`RequestBody` for an inline or referenced entry.

    Raises:
        SpecParseError: If the reference cannot be followed or its target
            is not a request body object.
    """
    if isinstance(node, RequestBody):
        return node
    root = root if root is not None else document.to_dict()
    target = _follow(node.ref, root)
    try:
        return RequestBody.model_validate(target)
    except ValidationError as exc:
        raise SpecParseError(
            f"$ref '{node.ref}' does not point to a request body: {exc}"
        ) from exc
