"""Shared plumbing for the section editors."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from specedit.exceptions import InvalidUsageError, NoDocumentError
from specedit.models import Document, SpecModel
from specedit.store import DocumentStore


def matches_query(query: Optional[str], *fields: Optional[str]) -> bool:
    """Case-insensitive substring match of *query* against any of *fields*.

    An empty query matches everything; ``None`` fields never match.
    """
    if not query:
        return True
    needle = query.lower()
    return any(field is not None and needle in field.lower() for field in fields)


def clean(**fields: Any) -> dict[str, Any]:
    """Drop ``None`` values so they do not end up as explicit nulls."""
    return {name: value for name, value in fields.items() if value is not None}


def edit_changes(**fields: Optional[str]) -> dict[str, Optional[str]]:
    """Map CLI-style field edits onto :meth:`SpecModel.evolve` changes.

    ``None`` means "leave unchanged" and is dropped; an empty string means
    "remove the key" and becomes ``None``.
    """
    return {
        name: (value if value != "" else None)
        for name, value in fields.items()
        if value is not None
    }


def evolve_or_reject(model: SpecModel, **changes: Any) -> Any:
    """:meth:`SpecModel.evolve` that reports invalid results as usage errors."""
    try:
        return model.evolve(**changes)
    except ValidationError as exc:
        raise InvalidUsageError(
            f"Invalid {type(model).__name__.lower()} fields: {exc}"
        ) from exc


class SectionEditor:
    """Base class for editors that own one slice of the stored document.

    Editors never modify a document in place. Every change builds a new
    :class:`Document` and hands it to :meth:`DocumentStore.set`.

    Args:
        store: The store holding the document being edited.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def document(self) -> Document:
        """The current document.

        Raises:
            NoDocumentError: If nothing has been imported yet.
        """
        document = self._store.get()
        if document is None:
            raise NoDocumentError(
                "No document loaded. Import one with 'specedit import <source>'."
            )
        return document

    def _commit(self, **update: Any) -> Document:
        """Store a copy of the document with the given top-level fields replaced.

        A ``None`` value removes that section from the document.
        """
        if any(value is None for value in update.values()):
            document = self.document.evolve(**update)
        else:
            document = self.document.model_copy(update=update)
        self._store.set(document)
        return document
