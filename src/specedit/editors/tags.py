"""Editor for the document's ``tags`` list. Tag names are unique."""

from __future__ import annotations

from typing import Optional

from specedit.editors.base import SectionEditor, matches_query
from specedit.exceptions import InvalidUsageError, NotFoundError
from specedit.models import Tag


class TagEditor(SectionEditor):
    def list(self, query: Optional[str] = None) -> list[Tag]:
        return [
            tag
            for tag in self.document.tags or []
            if matches_query(query, tag.name, tag.description)
        ]

    def names(self) -> list[str]:
        return [tag.name for tag in self.document.tags or []]

    def add(self, tag: Tag) -> Tag:
        """Append *tag*.

        Raises:
            InvalidUsageError: If the name is empty or already used.
        """
        if not tag.name:
            raise InvalidUsageError("Tag name must not be empty")
        if tag.name in self.names():
            raise InvalidUsageError(f"Tag '{tag.name}' already exists")
        self._commit(tags=[*(self.document.tags or []), tag])
        return tag

    def update(self, name: str, tag: Tag) -> Tag:
        """Replace the tag called *name*, keeping its position."""
        if name not in self.names():
            raise NotFoundError(f"Tag '{name}' not found")
        if tag.name != name and tag.name in self.names():
            raise InvalidUsageError(f"Tag '{tag.name}' already exists")
        tags = [tag if existing.name == name else existing for existing in self.document.tags or []]
        self._commit(tags=tags)
        return tag

    def remove(self, name: str) -> None:
        tags = self.document.tags or []
        remaining = [tag for tag in tags if tag.name != name]
        if len(remaining) == len(tags):
            raise NotFoundError(f"Tag '{name}' not found")
        self._commit(tags=remaining)
