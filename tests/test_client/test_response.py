"""Tests for the response handling bridge."""

from __future__ import annotations

import pytest
import httpx

from specedit.client.response import extract_response_data, format_result
from specedit.client.runner import RequestResult
from specedit.output import OutputFormat, OutputManager, set_output


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_response(
    status_code: int = 200,
    content: bytes = b"",
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    return httpx.Response(
        status_code=status_code,
        content=content,
        headers=headers or {},
        request=httpx.Request("GET", "https://api.example.com/test"),
    )


@pytest.fixture
def plain_output() -> OutputManager:
    output = OutputManager(format=OutputFormat.JSON, no_color=True, verbose=True)
    set_output(output)
    return output


# ---------------------------------------------------------------------------
# extract_response_data
# ---------------------------------------------------------------------------


class TestExtractResponseData:
    def test_json_object(self) -> None:
        response = _make_response(content=b'{"id": 1}')
        assert extract_response_data(response) == {"id": 1}

    def test_json_regardless_of_content_type(self) -> None:
        response = _make_response(content=b"[1, 2]", headers={"content-type": "text/plain"})
        assert extract_response_data(response) == [1, 2]

    def test_empty_body(self) -> None:
        assert extract_response_data(_make_response(204)) is None

    def test_not_json(self) -> None:
        with pytest.raises(ValueError):
            extract_response_data(_make_response(content=b"<html></html>"))


# ---------------------------------------------------------------------------
# format_result
# ---------------------------------------------------------------------------


class TestFormatResult:
    def test_success(self, plain_output: OutputManager, capsys: pytest.CaptureFixture) -> None:
        format_result(
            RequestResult(status=201, headers={"x-id": "7"}, data={"id": 7})
        )
        captured = capsys.readouterr()
        assert '"id": 7' in captured.out
        assert "HTTP 201 Created" in captured.err
        assert "[debug] x-id: 7" in captured.err

    def test_error_status_is_still_a_result(
        self, plain_output: OutputManager, capsys: pytest.CaptureFixture
    ) -> None:
        format_result(RequestResult(status=404, data={"message": "nope"}))
        captured = capsys.readouterr()
        assert "HTTP 404 Not Found" in captured.err
        assert "nope" in captured.out

    def test_empty_body(self, plain_output: OutputManager, capsys: pytest.CaptureFixture) -> None:
        format_result(RequestResult(status=204))
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "HTTP 204 No Content" in captured.err

    def test_error(self, plain_output: OutputManager, capsys: pytest.CaptureFixture) -> None:
        format_result(RequestResult(error="Request failed: boom"))
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error: Request failed: boom" in captured.err
