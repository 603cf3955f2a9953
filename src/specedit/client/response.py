"""Response handling bridge -- turns :class:`httpx.Response` into stored results.

After the request runner receives a response, :func:`extract_response_data`
decodes the body and :func:`format_result` later renders a stored
:class:`~specedit.client.runner.RequestResult` through the output system:
the status line goes to stderr, the body to stdout.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from specedit.output import get_output

if TYPE_CHECKING:
    from specedit.client.runner import RequestResult


def extract_response_data(response: httpx.Response) -> Any:
    """Decode the body of *response* as JSON.

    Returns:
        The decoded value, or ``None`` when the body is empty.

    Raises:
        ValueError: If the body is not empty and not valid JSON.
    """
    if not response.content:
        return None
    return response.json()


def format_result(result: RequestResult) -> None:
    """Print a stored request result using the global output system.

    Errors are reported on stderr; successful results print ``HTTP <status>``
    to stderr and the decoded body to stdout.
    """
    output = get_output()

    if result.error is not None:
        output.error(result.error)
        return

    phrase = httpx.codes.get_reason_phrase(result.status) if result.status else ""
    output.info(f"HTTP {result.status} {phrase}".rstrip())
    for name, value in result.headers.items():
        output.debug(f"{name}: {value}")

    if result.data is not None:
        output.format_response(result.data)
