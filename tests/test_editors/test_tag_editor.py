"""Tests for the tags editor."""

from __future__ import annotations

import pytest

from specedit.editors.tags import TagEditor
from specedit.exceptions import InvalidUsageError, NotFoundError
from specedit.models import Tag
from specedit.store import DocumentStore


class TestTagEditor:
    def test_list(self, store: DocumentStore) -> None:
        assert TagEditor(store).names() == ["pets", "store"]

    def test_list_query(self, store: DocumentStore) -> None:
        assert [t.name for t in TagEditor(store).list("everything")] == ["pets"]

    def test_add(self, store: DocumentStore) -> None:
        TagEditor(store).add(Tag(name="users", description="User accounts"))
        assert store.get().to_dict()["tags"][-1] == {
            "name": "users",
            "description": "User accounts",
        }

    def test_add_duplicate(self, store: DocumentStore) -> None:
        with pytest.raises(InvalidUsageError):
            TagEditor(store).add(Tag(name="pets"))

    def test_update_keeps_position(self, store: DocumentStore) -> None:
        TagEditor(store).update("pets", Tag(name="animals"))
        assert TagEditor(store).names() == ["animals", "store"]

    def test_update_missing(self, store: DocumentStore) -> None:
        with pytest.raises(NotFoundError):
            TagEditor(store).update("users", Tag(name="people"))

    def test_update_collision(self, store: DocumentStore) -> None:
        with pytest.raises(InvalidUsageError):
            TagEditor(store).update("pets", Tag(name="store"))

    def test_remove(self, store: DocumentStore) -> None:
        TagEditor(store).remove("store")
        assert TagEditor(store).names() == ["pets"]

    def test_remove_missing(self, store: DocumentStore) -> None:
        with pytest.raises(NotFoundError):
            TagEditor(store).remove("users")
