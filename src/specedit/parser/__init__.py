"""Document parser -- classify, load, and resolve OpenAPI documents.

This sub-package turns raw text (JSON or YAML, local file, remote URL or
stdin) into a validated :class:`~specedit.models.Document`.

Typical usage::

    from specedit.parser.loader import import_document
    from specedit.store import DocumentStore

    store = DocumentStore()
    import_document(store, "https://petstore3.swagger.io/api/v3/openapi.json")

Sub-modules:

* :mod:`~specedit.parser.discriminators` -- Reference vs. inline node
  predicates, also used as the typed unions' discriminators.
* :mod:`~specedit.parser.detect` -- Markup language and standard detection.
* :mod:`~specedit.parser.loader` -- I/O layer and the import pipeline.
* :mod:`~specedit.parser.resolver` -- On-demand ``$ref`` resolution.

Only the model-independent helpers are re-exported here, because
:mod:`specedit.models` itself imports the discriminators.
"""

from specedit.parser.detect import detect_language, detect_standard
from specedit.parser.discriminators import (
    is_inline_parameter,
    is_inline_request_body,
    is_reference,
)

__all__ = [
    "detect_language",
    "detect_standard",
    "is_reference",
    "is_inline_parameter",
    "is_inline_request_body",
]
