"""Canonical Pydantic models shared across all specedit modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`RequestConfig`, :class:`ProbeConfig` and
    :class:`EditorConfig`.

**Document models** -- the typed, immutable in-memory form of an OpenAPI
document: :class:`Document` and everything below it (:class:`Info`,
:class:`Server`, :class:`PathItem`, :class:`Operation`, :class:`Parameter`,
:class:`RequestBody`, :class:`Reference`, :class:`Components`, the security
scheme variants and :class:`Tag`).

Document models are frozen and keep unknown keys (``extra="allow"``), so a
document survives import followed by export unchanged, vendor extensions
included. Fields use snake_case names with the OpenAPI spelling as alias;
:meth:`SpecModel.to_dict` always dumps by alias and only the keys that were
actually present. Edits never mutate a model: they produce a new one through
``model_copy(update=...)`` or :meth:`SpecModel.evolve`.

Reference-or-inline positions are explicit tagged unions. Their callable
discriminators (:mod:`specedit.parser.discriminators`) run once, while the
raw tree is validated, so later code never re-tests node shapes.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator, Mapping
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    TypeAdapter,
    field_serializer,
    field_validator,
)
from pydantic import Tag as UnionTag

from specedit.parser.discriminators import (
    PARAMETER,
    REFERENCE,
    REQUEST_BODY,
    parameter_tag,
    request_body_tag,
    security_scheme_tag,
)


# --- Enumerations ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised as operation keys of a path item."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


HTTP_METHODS: tuple[str, ...] = tuple(m.value for m in HTTPMethod)


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


class ComponentType(str, enum.Enum):
    """The nine reusable-definition collections under ``components``."""

    SCHEMAS = "schemas"
    RESPONSES = "responses"
    PARAMETERS = "parameters"
    EXAMPLES = "examples"
    REQUEST_BODIES = "requestBodies"
    HEADERS = "headers"
    SECURITY_SCHEMES = "securitySchemes"
    LINKS = "links"
    CALLBACKS = "callbacks"

    @property
    def field_name(self) -> str:
        """Attribute name of this collection on :class:`Components`."""
        return _COMPONENT_FIELDS.get(self, self.value)


_COMPONENT_FIELDS = {
    ComponentType.REQUEST_BODIES: "request_bodies",
    ComponentType.SECURITY_SCHEMES: "security_schemes",
}


class MissingParameterPolicy(str, enum.Enum):
    """What the request runner does when a required parameter has no value.

    ``IGNORE`` sends the request anyway without a word, ``WARN`` sends it
    and prints a warning, ``BLOCK`` stores an error result and sends nothing.
    """

    IGNORE = "ignore"
    WARN = "warn"
    BLOCK = "block"


class ServerStatus(str, enum.Enum):
    """Reachability of a server base URL as reported by the connectivity prober."""

    CHECKING = "checking"
    LIVE = "live"
    UNREACHABLE = "unreachable"


class Theme(str, enum.Enum):
    """Display theme preference, persisted under the ``theme-store`` key."""

    LIGHT = "light"
    DARK = "dark"


# --- Configuration models ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`EditorConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class RequestConfig(BaseModel):
    """Settings for requests sent by the request runner."""

    timeout: Optional[float] = Field(
        default=None,
        description="Request timeout in seconds; unset keeps the transport default",
    )
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    missing_required: MissingParameterPolicy = Field(
        default=MissingParameterPolicy.IGNORE,
        description="Policy for required parameters left empty: ignore, warn, block",
    )


class ProbeConfig(BaseModel):
    """Settings for the connectivity prober."""

    timeout: Optional[float] = Field(
        default=None,
        description="Probe timeout in seconds; unset keeps the transport default",
    )


class EditorConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specedit/config.json``.

    Loaded and saved by :func:`~specedit.config.load_global_config` and
    :func:`~specedit.config.save_global_config`. See
    :func:`~specedit.config.resolve_config` for the precedence chain.
    """

    output: OutputConfig = Field(default_factory=OutputConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    persist: bool = Field(
        default=True, description="Mirror the loaded document to local storage"
    )


# --- Document models ---


class SpecModel(BaseModel):
    """Base class for every node of the document tree."""

    model_config = ConfigDict(
        extra="allow",
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Dump to a plain JSON-compatible dict using OpenAPI key names.

        Only keys present on input (or explicitly set) are emitted.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    def evolve(self, **changes: Any) -> Any:
        """Return a validated copy with *changes* applied.

        Keys are field names (``terms_of_service``) or extra keys. A value of
        ``None`` removes the key; model values are dumped first.
        """
        data = self.to_dict()
        fields = type(self).model_fields
        for name, value in changes.items():
            field = fields.get(name)
            key = field.alias if field is not None and field.alias else name
            if value is None:
                data.pop(key, None)
            elif isinstance(value, SpecModel):
                data[key] = value.to_dict()
            else:
                data[key] = value
        return type(self).model_validate(data)


class Reference(SpecModel):
    """A ``{"$ref": "#/components/..."}`` pointer to a reusable definition."""

    ref: str = Field(alias="$ref")
    summary: Optional[str] = None
    description: Optional[str] = None


class Parameter(SpecModel):
    """An inline OpenAPI *Parameter Object*."""

    name: str
    location: ParameterLocation = Field(alias="in")
    description: Optional[str] = None
    required: bool = False
    deprecated: bool = False
    schema_: Optional[dict[str, Any]] = Field(default=None, alias="schema")
    content: Optional[dict[str, Any]] = None
    example: Any = None


class RequestBody(SpecModel):
    """An inline OpenAPI *Request Body Object*."""

    content: dict[str, Any]
    description: Optional[str] = None
    required: bool = False


ParameterOrReference = Annotated[
    Union[
        Annotated[Reference, UnionTag(REFERENCE)],
        Annotated[Parameter, UnionTag(PARAMETER)],
    ],
    Discriminator(parameter_tag),
]

RequestBodyOrReference = Annotated[
    Union[
        Annotated[Reference, UnionTag(REFERENCE)],
        Annotated[RequestBody, UnionTag(REQUEST_BODY)],
    ],
    Discriminator(request_body_tag),
]


class HttpSecurityScheme(SpecModel):
    """``type: http`` -- bearer or basic authentication."""

    type: Literal["http"]
    scheme: str
    bearer_format: Optional[str] = Field(default=None, alias="bearerFormat")
    description: Optional[str] = None


class ApiKeySecurityScheme(SpecModel):
    """``type: apiKey`` -- a key sent in a header, query parameter or cookie."""

    type: Literal["apiKey"]
    name: str
    location: Literal["header", "query", "cookie"] = Field(alias="in")
    description: Optional[str] = None


class OAuthFlow(SpecModel):
    """A single OAuth2 flow: its endpoints and the scopes it grants."""

    authorization_url: Optional[str] = Field(default=None, alias="authorizationUrl")
    token_url: Optional[str] = Field(default=None, alias="tokenUrl")
    refresh_url: Optional[str] = Field(default=None, alias="refreshUrl")
    scopes: dict[str, str] = Field(default_factory=dict)


class OAuthFlows(SpecModel):
    """The four OAuth2 flow kinds; any subset may be declared."""

    implicit: Optional[OAuthFlow] = None
    password: Optional[OAuthFlow] = None
    client_credentials: Optional[OAuthFlow] = Field(
        default=None, alias="clientCredentials"
    )
    authorization_code: Optional[OAuthFlow] = Field(
        default=None, alias="authorizationCode"
    )


class OAuth2SecurityScheme(SpecModel):
    """``type: oauth2``."""

    type: Literal["oauth2"]
    flows: OAuthFlows
    description: Optional[str] = None


class OpenIdConnectSecurityScheme(SpecModel):
    """``type: openIdConnect``."""

    type: Literal["openIdConnect"]
    open_id_connect_url: str = Field(alias="openIdConnectUrl")
    description: Optional[str] = None


class MutualTLSSecurityScheme(SpecModel):
    """``type: mutualTLS`` (OpenAPI 3.1) -- a client certificate; no other fields."""

    type: Literal["mutualTLS"]
    description: Optional[str] = None


SecurityScheme = Union[
    HttpSecurityScheme,
    ApiKeySecurityScheme,
    OAuth2SecurityScheme,
    OpenIdConnectSecurityScheme,
    MutualTLSSecurityScheme,
]

SecuritySchemeOrReference = Annotated[
    Union[
        Annotated[Reference, UnionTag(REFERENCE)],
        Annotated[HttpSecurityScheme, UnionTag("http")],
        Annotated[ApiKeySecurityScheme, UnionTag("apiKey")],
        Annotated[OAuth2SecurityScheme, UnionTag("oauth2")],
        Annotated[OpenIdConnectSecurityScheme, UnionTag("openIdConnect")],
        Annotated[MutualTLSSecurityScheme, UnionTag("mutualTLS")],
    ],
    Discriminator(security_scheme_tag),
]


class Contact(SpecModel):
    name: Optional[str] = None
    email: Optional[str] = None
    url: Optional[str] = None


class License(SpecModel):
    name: str
    url: Optional[str] = None


class Info(SpecModel):
    """The document's *Info Object*: at least a title and a version."""

    title: str
    version: str
    description: Optional[str] = None
    terms_of_service: Optional[str] = Field(default=None, alias="termsOfService")
    contact: Optional[Contact] = None
    license: Optional[License] = None


class ServerVariable(SpecModel):
    default: str
    enum: Optional[list[str]] = None
    description: Optional[str] = None


class Server(SpecModel):
    """A server entry. Its ``url`` is its identity within the server list."""

    url: str
    description: Optional[str] = None
    variables: Optional[dict[str, ServerVariable]] = None


class Tag(SpecModel):
    name: str
    description: Optional[str] = None
    external_docs: Optional[dict[str, Any]] = Field(default=None, alias="externalDocs")


class Operation(SpecModel):
    """A single OpenAPI *Operation Object* (one method under one path)."""

    tags: Optional[list[str]] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    parameters: Optional[list[ParameterOrReference]] = None
    request_body: Optional[RequestBodyOrReference] = Field(
        default=None, alias="requestBody"
    )
    responses: dict[str, Any] = Field(default_factory=dict)
    security: Optional[list[dict[str, list[str]]]] = None
    deprecated: Optional[bool] = None

    @field_validator("responses", mode="before")
    @classmethod
    def _stringify_status_codes(cls, value: Any) -> Any:
        # YAML reads an unquoted 200 as an integer key.
        if isinstance(value, Mapping):
            return {str(code): response for code, response in value.items()}
        return value


class PathItem(SpecModel):
    """The operations available under one path template."""

    summary: Optional[str] = None
    description: Optional[str] = None
    get: Optional[Operation] = None
    put: Optional[Operation] = None
    post: Optional[Operation] = None
    delete: Optional[Operation] = None
    options: Optional[Operation] = None
    head: Optional[Operation] = None
    patch: Optional[Operation] = None
    trace: Optional[Operation] = None
    parameters: Optional[list[ParameterOrReference]] = None
    servers: Optional[list[Server]] = None

    def operations(self) -> dict[str, Operation]:
        """Return the declared operations keyed by lowercase method, in method order."""
        result: dict[str, Operation] = {}
        for method in HTTP_METHODS:
            operation = getattr(self, method)
            if operation is not None:
                result[method] = operation
        return result

    def with_operation(self, method: str, operation: Operation) -> PathItem:
        return self.model_copy(update={method: operation})

    def without_operation(self, method: str) -> PathItem:
        return self.evolve(**{method: None})


class Components(SpecModel):
    """The nine component collections. Keys may carry a ``group/`` prefix."""

    schemas: Optional[dict[str, Any]] = None
    responses: Optional[dict[str, Any]] = None
    parameters: Optional[dict[str, ParameterOrReference]] = None
    examples: Optional[dict[str, Any]] = None
    request_bodies: Optional[dict[str, RequestBodyOrReference]] = Field(
        default=None, alias="requestBodies"
    )
    headers: Optional[dict[str, Any]] = None
    security_schemes: Optional[dict[str, SecuritySchemeOrReference]] = Field(
        default=None, alias="securitySchemes"
    )
    links: Optional[dict[str, Any]] = None
    callbacks: Optional[dict[str, Any]] = None

    def collection(self, kind: ComponentType) -> dict[str, Any]:
        """Return a copy of the *kind* collection (empty when absent)."""
        return dict(getattr(self, kind.field_name) or {})

    def with_collection(self, kind: ComponentType, items: dict[str, Any]) -> Components:
        return self.model_copy(update={kind.field_name: items})


def _is_extension(key: Any) -> bool:
    return isinstance(key, str) and key.startswith("x-")


def _around_extensions(value: Any, handler: Any) -> Any:
    """Run *handler* on the non-extension entries of a mapping, then put the
    extension entries back unchanged and in place."""
    if not isinstance(value, Mapping):
        return handler(value)
    items = handler({k: v for k, v in value.items() if not _is_extension(k)})
    return {
        key: entry if _is_extension(key) else items[key]
        for key, entry in value.items()
    }


class Document(SpecModel):
    """Root of an OpenAPI 3.x document.

    Every section is optional so that partially-written documents can be
    edited; editors must not assume ``info`` is present.

    ``x-`` keys of the *Paths Object* are vendor extensions, not path
    templates: they are kept as raw values in ``paths``, in their original
    position. Use :meth:`path_items` or :meth:`path_item` to see only the
    :class:`PathItem` entries.
    """

    openapi: Optional[str] = None
    info: Optional[Info] = None
    servers: Optional[list[Server]] = None
    paths: Optional[dict[str, PathItem]] = None
    components: Optional[Components] = None
    tags: Optional[list[Tag]] = None
    security: Optional[list[dict[str, list[str]]]] = None

    @field_validator("paths", mode="wrap")
    @classmethod
    def _keep_path_extensions(cls, value: Any, handler: Any) -> Any:
        return _around_extensions(value, handler)

    @field_serializer("paths", mode="wrap")
    def _dump_path_extensions(self, value: Any, handler: Any) -> Any:
        return _around_extensions(value, handler)

    def path_items(self) -> dict[str, PathItem]:
        """The path templates of ``paths``, without extension keys."""
        return {
            path: item
            for path, item in (self.paths or {}).items()
            if not _is_extension(path)
        }

    def path_item(self, path: str) -> Optional[PathItem]:
        return None if _is_extension(path) else (self.paths or {}).get(path)

    def first_server_url(self) -> Optional[str]:
        """URL of the first declared server, used as the default request base."""
        if self.servers:
            return self.servers[0].url
        return None

    def iter_operations(self) -> Iterator[tuple[str, str, Operation]]:
        """Yield ``(path, method, operation)`` for every operation in the document."""
        for path, item in self.path_items().items():
            for method, operation in item.operations().items():
                yield path, method, operation


_COMPONENT_ADAPTERS: dict[ComponentType, TypeAdapter] = {
    ComponentType.PARAMETERS: TypeAdapter(ParameterOrReference),
    ComponentType.REQUEST_BODIES: TypeAdapter(RequestBodyOrReference),
    ComponentType.SECURITY_SCHEMES: TypeAdapter(SecuritySchemeOrReference),
}


def validate_component(kind: ComponentType, definition: Any) -> Any:
    """Convert a raw component definition into the value stored for *kind*.

    Typed collections (parameters, request bodies, security schemes) go
    through their tagged union; the others are kept as plain JSON values.

    Raises:
        pydantic.ValidationError: If a typed definition has the wrong shape.
    """
    adapter = _COMPONENT_ADAPTERS.get(kind)
    if adapter is None:
        return definition
    return adapter.validate_python(definition)
