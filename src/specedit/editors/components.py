"""Editor for the nine reusable-definition collections under ``components``.

Component keys may carry a ``group/`` prefix (``users/Address``). The
prefix is kept verbatim in the document; grouping is a view computed by
:func:`component_groups` whenever a listing is needed, with ungrouped keys
collected under :data:`ROOT_GROUP`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from specedit.editors.base import SectionEditor, matches_query
from specedit.exceptions import InvalidUsageError, NotFoundError
from specedit.models import Components, ComponentType, validate_component

ROOT_GROUP = "Root"


@dataclass(frozen=True)
class ComponentEntry:
    """One component as shown in a grouped listing."""

    key: str
    group: str
    name: str
    definition: Any

    @property
    def description(self) -> Optional[str]:
        if isinstance(self.definition, Mapping):
            value = self.definition.get("description")
        else:
            value = getattr(self.definition, "description", None)
        return value if isinstance(value, str) else None


def split_component_key(key: str) -> tuple[str, str]:
    """Split ``group/name`` at the first slash; plain keys belong to ``Root``."""
    group, sep, name = key.partition("/")
    if not sep:
        return ROOT_GROUP, key
    return group, name


def component_key(name: str, group: Optional[str] = None) -> str:
    if group and group != ROOT_GROUP:
        return f"{group}/{name}"
    return name


def component_groups(collection: Mapping[str, Any]) -> dict[str, list[ComponentEntry]]:
    """Index *collection* by group: ``Root`` first, then groups in key order."""
    groups: dict[str, list[ComponentEntry]] = {ROOT_GROUP: []}
    for key, definition in collection.items():
        group, name = split_component_key(key)
        groups.setdefault(group, []).append(ComponentEntry(key, group, name, definition))
    return groups


def parse_definition(text: str, previous: Any = None) -> Any:
    """Parse a JSON definition typed by the user.

    Malformed JSON is not an error: the last valid value, *previous*, is
    returned instead so an edit in progress never wipes the definition.
    """
    try:
        return json.loads(text)
    except ValueError:
        return previous


class ComponentEditor(SectionEditor):
    def _components(self) -> Components:
        return self.document.components or Components()

    def collection(self, kind: ComponentType) -> dict[str, Any]:
        return self._components().collection(kind)

    def list(
        self,
        kind: ComponentType,
        query: Optional[str] = None,
    ) -> dict[str, list[ComponentEntry]]:
        """Grouped components of *kind* matching *query*; empty groups are left out.

        The query is matched against the component name and its description.
        """
        grouped = component_groups(self.collection(kind))
        result: dict[str, list[ComponentEntry]] = {}
        for group, entries in grouped.items():
            kept = [e for e in entries if matches_query(query, e.name, e.description)]
            if kept:
                result[group] = kept
        return result

    def get(self, kind: ComponentType, key: str) -> Any:
        """Return the definition stored under *key*.

        Raises:
            NotFoundError: If there is no such component.
        """
        items = self.collection(kind)
        if key not in items:
            raise NotFoundError(f"Component '{key}' not found in {kind.value}")
        return items[key]

    def add(
        self,
        kind: ComponentType,
        name: str,
        definition: Any,
        group: Optional[str] = None,
    ) -> str:
        """Store *definition* under ``group/name`` (or ``name``) and return the key.

        Raises:
            InvalidUsageError: If the name is empty, the key is taken, or a
                typed definition (parameter, request body, security scheme)
                has the wrong shape.
        """
        if not name:
            raise InvalidUsageError("Component name must not be empty")
        key = component_key(name, group)
        items = self.collection(kind)
        if key in items:
            raise InvalidUsageError(f"Component '{key}' already exists in {kind.value}")

        try:
            items[key] = validate_component(kind, definition)
        except ValidationError as exc:
            raise InvalidUsageError(
                f"Invalid definition for {kind.value} '{key}': {exc}"
            ) from exc

        self._commit(components=self._components().with_collection(kind, items))
        return key

    def remove(self, kind: ComponentType, key: str) -> None:
        """Delete the component stored under *key*.

        Raises:
            NotFoundError: If there is no such component.
        """
        items = self.collection(kind)
        if key not in items:
            raise NotFoundError(f"Component '{key}' not found in {kind.value}")
        del items[key]
        self._commit(components=self._components().with_collection(kind, items))
