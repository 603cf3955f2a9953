"""Tests for the paths / operations editor."""

from __future__ import annotations

import pytest

from specedit.editors.paths import DEFAULT_RESPONSES, PathEditor, normalize_method
from specedit.exceptions import InvalidUsageError, NoDocumentError, NotFoundError
from specedit.models import Document
from specedit.store import DocumentStore


class TestNormalizeMethod:
    def test_lowercases(self) -> None:
        assert normalize_method("PATCH") == "patch"

    def test_rejects_unknown(self) -> None:
        with pytest.raises(InvalidUsageError, match="Unknown HTTP method"):
            normalize_method("fetch")


class TestPathEditorQueries:
    def test_list_all(self, store: DocumentStore) -> None:
        assert len(PathEditor(store).list()) == 5

    def test_list_by_method(self, store: DocumentStore) -> None:
        ops = PathEditor(store).list(method="DELETE")
        assert [(path, method) for path, method, _ in ops] == [("/pets/{petId}", "delete")]

    def test_list_query_matches_summary(self, store: DocumentStore) -> None:
        ops = PathEditor(store).list(query="inventor")
        assert [path for path, _, _ in ops] == ["/store/inventory"]

    def test_list_query_matches_path(self, store: DocumentStore) -> None:
        ops = PathEditor(store).list(query="{petId}")
        assert {method for _, method, _ in ops} == {"get", "delete"}

    def test_get_operation(self, store: DocumentStore) -> None:
        assert PathEditor(store).get_operation("/pets", "GET").operation_id == "listPets"

    def test_get_missing_operation(self, store: DocumentStore) -> None:
        with pytest.raises(NotFoundError, match="PUT /pets not found"):
            PathEditor(store).get_operation("/pets", "put")

    def test_get_missing_path(self, store: DocumentStore) -> None:
        with pytest.raises(NotFoundError):
            PathEditor(store).get_operation("/owners", "get")

    def test_no_document(self, empty_store: DocumentStore) -> None:
        with pytest.raises(NoDocumentError):
            PathEditor(empty_store).list()


class TestPathEditorChanges:
    def test_add_to_existing_path(self, store: DocumentStore) -> None:
        editor = PathEditor(store)
        editor.add("/pets", "put", "Replace pets")
        data = store.get().to_dict()["paths"]["/pets"]
        assert data["put"] == {"summary": "Replace pets", "responses": DEFAULT_RESPONSES}
        assert "get" in data and "post" in data

    def test_add_new_path(self, store: DocumentStore) -> None:
        PathEditor(store).add("/owners", "get")
        assert store.get().to_dict()["paths"]["/owners"] == {
            "get": {"summary": "", "responses": {"200": {"description": "Successful operation"}}}
        }

    def test_add_duplicate(self, store: DocumentStore) -> None:
        with pytest.raises(InvalidUsageError, match="already exists"):
            PathEditor(store).add("/pets", "get")

    def test_add_relative_path(self, store: DocumentStore) -> None:
        with pytest.raises(InvalidUsageError, match="must start with '/'"):
            PathEditor(store).add("pets", "get")

    def test_update_operation(self, store: DocumentStore) -> None:
        PathEditor(store).update_operation(
            "/pets", "get", summary="List pets", deprecated=True
        )
        operation = PathEditor(store).get_operation("/pets", "get")
        assert operation.summary == "List pets"
        assert operation.deprecated is True
        assert operation.operation_id == "listPets"

    def test_update_operation_removes_field(self, store: DocumentStore) -> None:
        PathEditor(store).update_operation("/pets", "get", operation_id=None)
        assert "operationId" not in store.get().to_dict()["paths"]["/pets"]["get"]

    def test_update_operation_invalid(self, store: DocumentStore) -> None:
        with pytest.raises(InvalidUsageError):
            PathEditor(store).update_operation("/pets", "get", parameters="nope")

    def test_remove_keeps_path_with_other_operations(self, store: DocumentStore) -> None:
        PathEditor(store).remove("/pets", "post")
        assert list(store.get().paths["/pets"].operations()) == ["get"]

    def test_remove_last_operation_drops_path(self, store: DocumentStore) -> None:
        PathEditor(store).remove("/store/inventory", "get")
        assert "/store/inventory" not in store.get().paths

    def test_remove_keeps_path_level_parameters_while_operations_remain(
        self, store: DocumentStore
    ) -> None:
        PathEditor(store).remove("/pets/{petId}", "delete")
        item = store.get().to_dict()["paths"]["/pets/{petId}"]
        assert item["parameters"][0]["name"] == "petId"

    def test_remove_missing(self, store: DocumentStore) -> None:
        with pytest.raises(NotFoundError):
            PathEditor(store).remove("/pets", "patch")


class TestPathExtensionsSurviveEdits:
    @pytest.fixture
    def extended_store(self) -> DocumentStore:
        document_store = DocumentStore()
        document_store.set(
            Document.model_validate(
                {
                    "openapi": "3.1.0",
                    "paths": {
                        "x-internal": True,
                        "/a": {"get": {"responses": {"200": {"description": "ok"}}}},
                    },
                }
            )
        )
        return document_store

    def test_add_and_remove(self, extended_store: DocumentStore) -> None:
        editor = PathEditor(extended_store)
        editor.add("/b", "post")
        editor.remove("/a", "get")
        paths = extended_store.get().to_dict()["paths"]
        assert list(paths) == ["x-internal", "/b"]
        assert paths["x-internal"] is True

    def test_extension_is_not_an_operation(self, extended_store: DocumentStore) -> None:
        assert [path for path, _, _ in PathEditor(extended_store).list()] == ["/a"]
        with pytest.raises(NotFoundError):
            PathEditor(extended_store).get_operation("x-internal", "get")
