"""Request runner -- try an operation of the stored document against a live server.

The runner keeps a :class:`RequestState` per ``(path, method)`` pair: the
parameter values the user typed, an optional server override, an optional
body, captured credentials, a ``loading`` flag and the last
:class:`RequestResult`. This working state is never written into the
document.

Sending a request goes through two steps:

1. :meth:`RequestRunner.prepare` resolves the operation's parameters
   (following ``$ref`` entries into ``components.parameters``), fills path
   placeholders, builds the query string, header set and ``Cookie`` header,
   and joins everything onto the base URL with :func:`construct_full_url`.
2. :meth:`RequestRunner.send` issues the call with :class:`httpx.AsyncClient`
   and stores the outcome. Every failure (unresolvable reference, bad URL,
   network error, undecodable body) is stored as the result's ``error``;
   nothing propagates to the caller. Non-2xx statuses are ordinary results.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import quote, urlencode, urljoin

import httpx

from specedit.client.response import extract_response_data
from specedit.editors.security import CredentialBag
from specedit.exceptions import NoDocumentError, NotFoundError
from specedit.models import (
    HTTP_METHODS,
    MissingParameterPolicy,
    Operation,
    Parameter,
    ParameterLocation,
    RequestConfig,
)
from specedit.output import get_output
from specedit.parser.resolver import resolve_parameter
from specedit.store import DocumentStore

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/json"


@dataclass
class RequestResult:
    """Outcome of one sent request: a response, or an error message."""

    status: Optional[int] = None
    headers: dict[str, str] = field(default_factory=dict)
    data: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RequestState:
    """User input and last result for one ``(path, method)`` pair."""

    values: dict[str, Any] = field(default_factory=dict)
    server: Optional[str] = None
    body: Any = None
    credentials: CredentialBag = field(default_factory=CredentialBag)
    loading: bool = False
    result: Optional[RequestResult] = None


@dataclass
class PreparedRequest:
    """A fully resolved request, ready to hand to the transport."""

    method: str
    url: str
    headers: dict[str, str]
    content: Optional[str] = None
    missing: list[str] = field(default_factory=list)


def request_key(path: str, method: str) -> str:
    return f"{path}-{method.lower()}"


def construct_full_url(base: str, relative: str) -> str:
    """Join *relative* onto *base* without doubling or dropping slashes.

    ``https://api.example.com/v1`` + ``/users`` gives
    ``https://api.example.com/v1/users``. An empty base leaves *relative*
    unchanged.
    """
    if not base:
        return relative
    if not base.endswith("/"):
        base += "/"
    if relative.startswith("/"):
        relative = relative[1:]
    return urljoin(base, relative)


def _is_absent(value: Any) -> bool:
    return value is None or value == ""


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_body(body: Any) -> Optional[str]:
    """Serialise a request body as JSON text.

    A string is parsed as JSON when it can be and otherwise sent as a JSON
    string. An absent body gives ``None``.
    """
    if _is_absent(body):
        return None
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except ValueError:
            pass
    return json.dumps(body)


class RequestRunner:
    """Build and send requests for operations of the stored document.

    Args:
        store: Store holding the document whose operations are run.
        config: Timeout, SSL verification and missing-parameter policy.
        transport: Optional :class:`httpx.AsyncBaseTransport`, mainly for
            tests (``httpx.MockTransport``).
    """

    def __init__(
        self,
        store: DocumentStore,
        config: Optional[RequestConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._store = store
        self._config = config or RequestConfig()
        self._transport = transport
        self._states: dict[str, RequestState] = {}

    # ------------------------------------------------------------------ #
    # Working state
    # ------------------------------------------------------------------ #

    def state(self, path: str, method: str) -> RequestState:
        """Return the working state for *path* / *method*, creating it on first use."""
        key = request_key(path, method)
        if key not in self._states:
            self._states[key] = RequestState()
        return self._states[key]

    def update_value(self, path: str, method: str, name: str, value: Any) -> None:
        """Set the value typed for parameter *name*; empty values are omitted on send."""
        self.state(path, method).values[name] = value

    def set_server(self, path: str, method: str, server: Optional[str]) -> None:
        self.state(path, method).server = server or None

    def set_body(self, path: str, method: str, body: Any) -> None:
        self.state(path, method).body = body

    def result(self, path: str, method: str) -> Optional[RequestResult]:
        state = self._states.get(request_key(path, method))
        return state.result if state is not None else None

    def is_loading(self, path: str, method: str) -> bool:
        state = self._states.get(request_key(path, method))
        return state.loading if state is not None else False

    def reset(self, path: Optional[str] = None, method: Optional[str] = None) -> None:
        """Discard the working state of one operation, or of all of them."""
        if path is None or method is None:
            self._states.clear()
        else:
            self._states.pop(request_key(path, method), None)

    # ------------------------------------------------------------------ #
    # Request building
    # ------------------------------------------------------------------ #

    def _operation(self, path: str, method: str) -> Operation:
        document = self._store.get()
        if document is None:
            raise NoDocumentError("No document loaded")
        item = document.path_item(path)
        operation = None
        if item is not None and method.lower() in HTTP_METHODS:
            operation = getattr(item, method.lower())
        if operation is None:
            raise NotFoundError(f"Operation {method.upper()} {path} not found")
        return operation

    def _parameters(self, path: str, operation: Operation) -> list[Parameter]:
        """Resolved parameters: path-level ones, overridden by operation-level ones."""
        document = self._store.get()
        if document is None:
            raise NoDocumentError("No document loaded")
        root = document.to_dict()

        item = document.path_item(path)
        nodes = [
            *((item.parameters if item is not None else None) or []),
            *(operation.parameters or []),
        ]
        merged: dict[tuple[str, str], Parameter] = {}
        for node in nodes:
            parameter = resolve_parameter(document, node, root)
            merged[(parameter.name, parameter.location.value)] = parameter
        return list(merged.values())

    def prepare(
        self,
        path: str,
        method: str,
        operation: Optional[Operation] = None,
    ) -> PreparedRequest:
        """Resolve parameters and build the request for *path* / *method*.

        Args:
            path: Path template, e.g. ``/pets/{petId}``.
            method: HTTP method, any case.
            operation: The operation to use; looked up in the document when
                omitted.

        Raises:
            SpecEditError: If the operation or one of its references cannot
                be resolved.
        """
        method = method.lower()
        operation = operation or self._operation(path, method)
        state = self.state(path, method)
        document = self._store.get()

        relative = path
        query: list[tuple[str, str]] = []
        headers: dict[str, str] = {"Content-Type": DEFAULT_CONTENT_TYPE}
        cookies: list[str] = []
        missing: list[str] = []

        for parameter in self._parameters(path, operation):
            value = state.values.get(parameter.name)
            if _is_absent(value):
                if parameter.required:
                    missing.append(parameter.name)
                continue

            if parameter.location == ParameterLocation.PATH:
                relative = relative.replace(
                    "{" + parameter.name + "}", quote(_stringify(value), safe="")
                )
            elif parameter.location == ParameterLocation.QUERY:
                if isinstance(value, (list, tuple)):
                    query.extend((parameter.name, _stringify(v)) for v in value)
                else:
                    query.append((parameter.name, _stringify(value)))
            elif parameter.location == ParameterLocation.HEADER:
                headers[parameter.name] = _stringify(value)
            elif parameter.location == ParameterLocation.COOKIE:
                cookies.append(f"{parameter.name}={_stringify(value)}")

        if cookies:
            headers["Cookie"] = "; ".join(cookies)
        if query:
            separator = "&" if "?" in relative else "?"
            relative = f"{relative}{separator}{urlencode(query)}"

        base = state.server or (document.first_server_url() if document else None) or ""
        content = encode_body(state.body) if method != "get" else None

        return PreparedRequest(
            method=method.upper(),
            url=construct_full_url(base, relative),
            headers=headers,
            content=content,
            missing=missing,
        )

    # ------------------------------------------------------------------ #
    # Sending
    # ------------------------------------------------------------------ #

    def _client(self) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {
            "verify": self._config.verify_ssl,
            "follow_redirects": True,
        }
        if self._config.timeout is not None:
            kwargs["timeout"] = self._config.timeout
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    async def send(
        self,
        path: str,
        method: str,
        operation: Optional[Operation] = None,
    ) -> RequestResult:
        """Send the request for *path* / *method* and store the result.

        The result replaces any previous one for the same pair. This method
        never raises for request failures; they are stored as
        :attr:`RequestResult.error`.
        """
        state = self.state(path, method)
        state.loading = True
        try:
            state.result = await self._send(path, method, operation)
        finally:
            state.loading = False
        return state.result

    async def _send(
        self,
        path: str,
        method: str,
        operation: Optional[Operation],
    ) -> RequestResult:
        try:
            prepared = self.prepare(path, method, operation)
        except Exception as exc:
            return RequestResult(error=str(exc))

        if prepared.missing:
            names = ", ".join(prepared.missing)
            policy = self._config.missing_required
            if policy == MissingParameterPolicy.BLOCK:
                return RequestResult(error=f"Missing required parameters: {names}")
            if policy == MissingParameterPolicy.WARN:
                get_output().warning(f"Sending without required parameters: {names}")

        logger.debug("%s %s", prepared.method, prepared.url)
        try:
            async with self._client() as client:
                response = await client.request(
                    prepared.method,
                    prepared.url,
                    headers=prepared.headers,
                    content=prepared.content,
                )
        except Exception as exc:
            logger.debug("%s %s failed: %r", prepared.method, prepared.url, exc)
            return RequestResult(error=f"Request failed: {exc}")

        try:
            data = extract_response_data(response)
        except ValueError as exc:
            return RequestResult(
                status=response.status_code,
                headers=dict(response.headers),
                error=f"Response is not valid JSON: {exc}",
            )

        return RequestResult(
            status=response.status_code,
            headers=dict(response.headers),
            data=data,
        )
