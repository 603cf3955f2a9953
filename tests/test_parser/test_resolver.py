"""Tests for on-demand $ref resolution."""

from __future__ import annotations

from typing import Any

import pytest

from specedit.exceptions import SpecParseError
from specedit.models import Document, Parameter, Reference, RequestBody
from specedit.parser.resolver import (
    resolve_parameter,
    resolve_pointer,
    resolve_request_body,
)


def _ref(pointer: str) -> Reference:
    return Reference.model_validate({"$ref": pointer})


# ---------------------------------------------------------------------------
# resolve_pointer
# ---------------------------------------------------------------------------


class TestResolvePointer:
    def test_simple_path(self) -> None:
        root = {"components": {"schemas": {"Pet": {"type": "object"}}}}
        assert resolve_pointer("#/components/schemas/Pet", root) == {"type": "object"}

    def test_escaped_segments(self) -> None:
        root = {"paths": {"/pets/{id}": {"get": {"x": 1}}, "a~b": 2}}
        assert resolve_pointer("#/paths/~1pets~1{id}/get", root) == {"x": 1}
        assert resolve_pointer("#/paths/a~0b", root) == 2

    def test_array_index(self) -> None:
        root = {"servers": [{"url": "a"}, {"url": "b"}]}
        assert resolve_pointer("#/servers/1/url", root) == "b"

    def test_bad_array_index(self) -> None:
        with pytest.raises(SpecParseError, match="invalid array index"):
            resolve_pointer("#/servers/9", {"servers": []})

    def test_missing_key(self) -> None:
        with pytest.raises(SpecParseError, match="key 'Nope' not found"):
            resolve_pointer("#/components/schemas/Nope", {"components": {"schemas": {}}})

    def test_external_ref(self) -> None:
        with pytest.raises(SpecParseError, match="External"):
            resolve_pointer("other.yaml#/Pet", {})

    def test_navigate_into_scalar(self) -> None:
        with pytest.raises(SpecParseError, match="cannot navigate into str"):
            resolve_pointer("#/openapi/x", {"openapi": "3.0.0"})


# ---------------------------------------------------------------------------
# resolve_parameter / resolve_request_body
# ---------------------------------------------------------------------------


class TestResolveParameter:
    def test_inline_returned_as_is(self, petstore_document: Document) -> None:
        param = Parameter.model_validate({"name": "q", "in": "query"})
        assert resolve_parameter(petstore_document, param) is param

    def test_component_reference(self, petstore_document: Document) -> None:
        param = resolve_parameter(
            petstore_document, _ref("#/components/parameters/PageSize")
        )
        assert param.name == "limit"
        assert param.location.value == "query"
        assert param.required is False

    def test_reference_chain(self, petstore_document: Document) -> None:
        param = resolve_parameter(petstore_document, _ref("#/components/parameters/Limit"))
        assert param.name == "limit"

    def test_pre_dumped_root(self, petstore_document: Document) -> None:
        root = petstore_document.to_dict()
        param = resolve_parameter(
            petstore_document, _ref("#/components/parameters/PageSize"), root
        )
        assert param.description == "Maximum number of items to return"

    def test_circular_chain(self, petstore_raw: dict[str, Any]) -> None:
        petstore_raw["components"]["parameters"]["A"] = {"$ref": "#/components/parameters/B"}
        petstore_raw["components"]["parameters"]["B"] = {"$ref": "#/components/parameters/A"}
        document = Document.model_validate(petstore_raw)
        with pytest.raises(SpecParseError, match="Circular"):
            resolve_parameter(document, _ref("#/components/parameters/A"))

    def test_target_is_not_a_parameter(self, petstore_document: Document) -> None:
        with pytest.raises(SpecParseError, match="does not point to a parameter"):
            resolve_parameter(petstore_document, _ref("#/components/schemas/Pet"))

    def test_dangling_reference(self, petstore_document: Document) -> None:
        with pytest.raises(SpecParseError, match="Cannot resolve"):
            resolve_parameter(petstore_document, _ref("#/components/parameters/Gone"))


class TestResolveRequestBody:
    def test_component_reference(self, petstore_document: Document) -> None:
        body = resolve_request_body(
            petstore_document, _ref("#/components/requestBodies/PetBody")
        )
        assert body.required is True
        assert "application/json" in body.content

    def test_inline(self, petstore_document: Document) -> None:
        body = RequestBody.model_validate({"content": {"text/plain": {}}})
        assert resolve_request_body(petstore_document, body) is body

    def test_target_is_not_a_body(self, petstore_document: Document) -> None:
        with pytest.raises(SpecParseError, match="does not point to a request body"):
            resolve_request_body(
                petstore_document, _ref("#/components/securitySchemes/bearerAuth")
            )
