"""Tests for markup-language and standard detection."""

from __future__ import annotations

import pytest

from specedit.exceptions import SpecParseError
from specedit.parser.detect import (
    detect_language,
    detect_standard,
    parse_text,
)


class TestDetectLanguage:
    def test_json_object(self) -> None:
        assert detect_language('{"openapi": "3.0.0"}') == "json"

    def test_json_wins_over_yaml(self) -> None:
        # Every JSON text also parses as YAML.
        assert detect_language("[1, 2, 3]") == "json"

    def test_yaml_mapping(self) -> None:
        assert detect_language("openapi: 3.0.0\ninfo:\n  title: x\n") == "yaml"

    def test_yaml_fixture(self, petstore_yaml_text: str) -> None:
        assert detect_language(petstore_yaml_text) == "yaml"

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_numbers_are_not_json(self, constant: str) -> None:
        assert detect_language(f'{{"a": {constant}}}') == "yaml"

    def test_neither(self) -> None:
        assert detect_language("{a: [1, 2") is None

    @pytest.mark.parametrize("text", ["", "   ", "\n\t\n"])
    def test_blank_text_is_unrecognised(self, text: str) -> None:
        assert detect_language(text) is None


class TestDetectStandard:
    def test_openapi(self) -> None:
        assert detect_standard({"openapi": "3.1.0"}) == "openapi"

    def test_arazzo(self) -> None:
        assert detect_standard({"arazzo": "1.0.0"}) == "arazzo"

    def test_arazzo_checked_first(self) -> None:
        assert detect_standard({"openapi": "3.1.0", "arazzo": "1.0.0"}) == "arazzo"

    def test_swagger_is_not_recognised(self) -> None:
        assert detect_standard({"swagger": "2.0"}) is None

    def test_key_presence_only(self) -> None:
        assert detect_standard({"openapi": None}) == "openapi"

    @pytest.mark.parametrize("value", [None, "openapi", ["openapi"], 42])
    def test_non_mapping(self, value: object) -> None:
        assert detect_standard(value) is None


class TestParseText:
    def test_json(self) -> None:
        assert parse_text('{"a": 1}', "json") == {"a": 1}

    def test_yaml(self) -> None:
        assert parse_text("a: 1\n", "yaml") == {"a": 1}

    def test_invalid_json(self) -> None:
        with pytest.raises(SpecParseError, match="Invalid JSON"):
            parse_text("{not json", "json")

    def test_unknown_language(self) -> None:
        with pytest.raises(SpecParseError, match="Unknown markup language"):
            parse_text("a", "toml")

    def test_json_rejects_non_finite_numbers(self) -> None:
        with pytest.raises(SpecParseError, match="Infinity is not valid JSON"):
            parse_text('{"a": Infinity}', "json")

    def test_yaml_reads_nan_as_text(self) -> None:
        assert parse_text('{"a": NaN}', "yaml") == {"a": "NaN"}
