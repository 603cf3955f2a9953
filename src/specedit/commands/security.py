"""Security commands -- security schemes and document-level requirements."""

from __future__ import annotations

from typing import Any, Optional

import typer

from specedit.commands import handle_errors, open_store
from specedit.editors.security import (
    SCHEME_TYPES,
    SecurityEditor,
    available_flows,
    default_scheme,
)
from specedit.exceptions import InvalidUsageError
from specedit.models import (
    ApiKeySecurityScheme,
    HttpSecurityScheme,
    OpenIdConnectSecurityScheme,
    Reference,
)
from specedit.output import info, print_table, success

security_app = typer.Typer(no_args_is_help=True)


def _details(scheme: Any) -> str:
    if isinstance(scheme, Reference):
        return scheme.ref
    if isinstance(scheme, HttpSecurityScheme):
        return scheme.scheme + (f" ({scheme.bearer_format})" if scheme.bearer_format else "")
    if isinstance(scheme, ApiKeySecurityScheme):
        return f"{scheme.name} in {scheme.location}"
    if isinstance(scheme, OpenIdConnectSecurityScheme):
        return scheme.open_id_connect_url
    return ""


@security_app.command("list")
def security_list(
    ctx: typer.Context,
    query: Optional[str] = typer.Option(
        None, "--query", help="Filter by name or description."
    ),
) -> None:
    """List security schemes and the flows each OAuth2 scheme can start.

    Example::

        specedit security list
    """
    with handle_errors(), open_store(ctx) as store:
        editor = SecurityEditor(store)
        schemes = editor.list(query)
        required = {name for requirement in editor.requirements() for name in requirement}

    if not schemes:
        info("No security schemes defined.")
        return

    rows = [
        [
            name,
            getattr(scheme, "type", "$ref"),
            _details(scheme),
            ", ".join(available_flows(scheme)),
            "Yes" if name in required else "",
        ]
        for name, scheme in schemes
    ]
    print_table(["Name", "Type", "Details", "Flows", "Required"], rows)


def _build_scheme(
    scheme_type: str,
    http_scheme: Optional[str],
    bearer_format: Optional[str],
    key_name: Optional[str],
    location: Optional[str],
    url: Optional[str],
    authorization_url: Optional[str],
    token_url: Optional[str],
    flows: Optional[list[str]],
    description: Optional[str],
) -> dict[str, Any]:
    if scheme_type not in SCHEME_TYPES:
        raise InvalidUsageError(
            f"Unknown scheme type '{scheme_type}'. Expected one of: {', '.join(SCHEME_TYPES)}"
        )
    scheme = default_scheme(scheme_type)

    if scheme_type == "http":
        if http_scheme:
            scheme["scheme"] = http_scheme
        if bearer_format:
            scheme["bearerFormat"] = bearer_format
    elif scheme_type == "apiKey":
        if not key_name:
            raise InvalidUsageError("apiKey schemes need --key-name")
        scheme["name"] = key_name
        if location:
            scheme["in"] = location
    elif scheme_type == "openIdConnect":
        if not url:
            raise InvalidUsageError("openIdConnect schemes need --url")
        scheme["openIdConnectUrl"] = url
    elif scheme_type == "oauth2":
        if flows:
            unknown = set(flows) - set(scheme["flows"])
            if unknown:
                raise InvalidUsageError(f"Unknown OAuth2 flow(s): {', '.join(sorted(unknown))}")
            scheme["flows"] = {k: v for k, v in scheme["flows"].items() if k in flows}
        for flow in scheme["flows"].values():
            if "authorizationUrl" in flow and authorization_url:
                flow["authorizationUrl"] = authorization_url
            if "tokenUrl" in flow and token_url:
                flow["tokenUrl"] = token_url

    if description:
        scheme["description"] = description
    return scheme


@security_app.command("add")
def security_add(
    ctx: typer.Context,
    name: str = typer.Argument(help="Scheme name."),
    scheme_type: str = typer.Option(
        "http", "--type", "-t", help="http, apiKey, oauth2, openIdConnect or mutualTLS."
    ),
    http_scheme: Optional[str] = typer.Option(
        None, "--scheme", help="HTTP auth scheme (bearer, basic)."
    ),
    bearer_format: Optional[str] = typer.Option(None, "--bearer-format"),
    key_name: Optional[str] = typer.Option(
        None, "--key-name", help="Header, query or cookie name of an API key."
    ),
    location: Optional[str] = typer.Option(
        None, "--in", help="API key location: header, query or cookie."
    ),
    url: Optional[str] = typer.Option(None, "--url", help="OpenID Connect discovery URL."),
    authorization_url: Optional[str] = typer.Option(None, "--authorization-url"),
    token_url: Optional[str] = typer.Option(None, "--token-url"),
    flows: Optional[list[str]] = typer.Option(
        None, "--flow", help="OAuth2 flow to declare (repeatable)."
    ),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
) -> None:
    """Add a security scheme, starting from the template for its type.

    Example::

        specedit security add bearerAuth --type http --scheme bearer --bearer-format JWT
        specedit security add apiKey --type apiKey --key-name X-API-Key --in header
        specedit security add oauth --type oauth2 --flow authorizationCode \\
            --authorization-url https://example.com/authorize \\
            --token-url https://example.com/token
    """
    with handle_errors(), open_store(ctx) as store:
        scheme = _build_scheme(
            scheme_type,
            http_scheme,
            bearer_format,
            key_name,
            location,
            url,
            authorization_url,
            token_url,
            flows,
            description,
        )
        SecurityEditor(store).add(name, scheme)
    success(f"Added security scheme '{name}'")


@security_app.command("remove")
def security_remove(
    ctx: typer.Context,
    name: str = typer.Argument(help="Scheme name."),
) -> None:
    """Remove a security scheme and any requirement naming it."""
    with handle_errors(), open_store(ctx) as store:
        SecurityEditor(store).remove(name)
    success(f"Removed security scheme '{name}'")


@security_app.command("require")
def security_require(
    ctx: typer.Context,
    name: str = typer.Argument(help="Scheme name."),
    scopes: Optional[list[str]] = typer.Option(None, "--scope", help="Required scope (repeatable)."),
) -> None:
    """Require a scheme for the whole document."""
    with handle_errors(), open_store(ctx) as store:
        SecurityEditor(store).add_requirement(name, scopes)
    success(f"'{name}' is now required")


@security_app.command("unrequire")
def security_unrequire(
    ctx: typer.Context,
    name: str = typer.Argument(help="Scheme name."),
) -> None:
    """Drop document-level requirements naming a scheme."""
    with handle_errors(), open_store(ctx) as store:
        SecurityEditor(store).remove_requirement(name)
    success(f"'{name}' is no longer required")
