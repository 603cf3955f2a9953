"""Editor for ``components.securitySchemes`` and document-level requirements.

Also holds :class:`CredentialBag`, the per-scheme credential values a user
types in before trying an operation. Credentials are only captured; no
authentication flow is ever performed and nothing is sent anywhere.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError

from specedit.editors.base import SectionEditor, matches_query
from specedit.exceptions import InvalidUsageError, NotFoundError
from specedit.models import (
    Components,
    ComponentType,
    OAuth2SecurityScheme,
    validate_component,
)

SCHEME_TYPES = ("http", "apiKey", "oauth2", "openIdConnect", "mutualTLS")

_TEMPLATES: dict[str, dict[str, Any]] = {
    "http": {"type": "http", "scheme": "bearer"},
    "apiKey": {"type": "apiKey", "name": "", "in": "header"},
    "oauth2": {
        "type": "oauth2",
        "flows": {
            "implicit": {"authorizationUrl": "", "scopes": {}},
            "password": {"tokenUrl": "", "scopes": {}},
            "clientCredentials": {"tokenUrl": "", "scopes": {}},
            "authorizationCode": {
                "authorizationUrl": "",
                "tokenUrl": "",
                "scopes": {},
            },
        },
    },
    "openIdConnect": {"type": "openIdConnect", "openIdConnectUrl": ""},
    "mutualTLS": {"type": "mutualTLS"},
}


def default_scheme(scheme_type: str) -> dict[str, Any]:
    """Starting definition for a new scheme of *scheme_type*.

    Unknown types fall back to an HTTP bearer scheme.
    """
    return copy.deepcopy(_TEMPLATES.get(scheme_type, _TEMPLATES["http"]))


def available_flows(scheme: Any) -> list[str]:
    """OAuth2 flows of *scheme* that have the URL needed to start them.

    Implicit and authorization-code flows need an authorization URL;
    password and client-credentials flows need a token URL. Anything that
    is not an OAuth2 scheme has no flows.
    """
    if not isinstance(scheme, OAuth2SecurityScheme):
        return []
    flows = scheme.flows
    result = []
    if flows.implicit and flows.implicit.authorization_url:
        result.append("implicit")
    if flows.password and flows.password.token_url:
        result.append("password")
    if flows.client_credentials and flows.client_credentials.token_url:
        result.append("clientCredentials")
    if flows.authorization_code and flows.authorization_code.authorization_url:
        result.append("authorizationCode")
    return result


@dataclass
class CredentialBag:
    """Credential values keyed by security scheme name.

    Bearer tokens and API keys are stored as-is; HTTP basic credentials as
    ``user:password``.
    """

    values: dict[str, str] = field(default_factory=dict)

    def get(self, scheme: str) -> str:
        return self.values.get(scheme, "")

    def set(self, scheme: str, value: str) -> None:
        self.values[scheme] = value

    def set_basic(
        self,
        scheme: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> str:
        """Update either half of a basic credential, keeping the other half."""
        current_user, current_password = self.basic(scheme)
        value = (
            f"{current_user if username is None else username}:"
            f"{current_password if password is None else password}"
        )
        self.values[scheme] = value
        return value

    def basic(self, scheme: str) -> tuple[str, str]:
        """Split a stored basic credential into ``(username, password)``."""
        username, _, password = self.get(scheme).partition(":")
        return username, password


class SecurityEditor(SectionEditor):
    def _components(self) -> Components:
        return self.document.components or Components()

    def schemes(self) -> dict[str, Any]:
        return self._components().collection(ComponentType.SECURITY_SCHEMES)

    def list(self, query: Optional[str] = None) -> list[tuple[str, Any]]:
        """``(name, scheme)`` pairs whose name or description contains *query*."""
        return [
            (name, scheme)
            for name, scheme in self.schemes().items()
            if matches_query(query, name, getattr(scheme, "description", None))
        ]

    def get(self, name: str) -> Any:
        schemes = self.schemes()
        if name not in schemes:
            raise NotFoundError(f"Security scheme '{name}' not found")
        return schemes[name]

    def add(self, name: str, scheme: Any) -> Any:
        """Declare a security scheme.

        Args:
            name: Scheme name, unique within the document.
            scheme: A raw definition (see :func:`default_scheme`) or a
                scheme model.

        Raises:
            InvalidUsageError: If the name is empty or taken, or the
                definition is not a valid scheme.
        """
        if not name:
            raise InvalidUsageError("Security scheme name must not be empty")
        schemes = self.schemes()
        if name in schemes:
            raise InvalidUsageError(f"Security scheme '{name}' already exists")

        raw = scheme.to_dict() if hasattr(scheme, "to_dict") else scheme
        try:
            schemes[name] = validate_component(ComponentType.SECURITY_SCHEMES, raw)
        except ValidationError as exc:
            raise InvalidUsageError(
                f"Invalid security scheme '{name}': {exc}"
            ) from exc

        components = self._components().with_collection(
            ComponentType.SECURITY_SCHEMES, schemes
        )
        self._commit(components=components)
        return schemes[name]

    def remove(self, name: str) -> None:
        """Delete a scheme and every requirement naming it.

        Requirements are dropped at document level and on each operation, so
        nothing in the exported document points at the deleted scheme.
        """
        schemes = self.schemes()
        if name not in schemes:
            raise NotFoundError(f"Security scheme '{name}' not found")
        del schemes[name]

        changes: dict[str, Any] = {
            "components": self._components().with_collection(
                ComponentType.SECURITY_SCHEMES, schemes
            )
        }
        if self.document.security is not None:
            changes["security"] = [r for r in self.document.security if name not in r]
        paths = self._paths_without_requirement(name)
        if paths is not None:
            changes["paths"] = paths
        self._commit(**changes)

    def _paths_without_requirement(self, name: str) -> Optional[dict[str, Any]]:
        """``paths`` with operation requirements naming *name* removed, or
        ``None`` when no operation names it."""
        paths = dict(self.document.paths or {})
        changed = False
        for path, item in self.document.path_items().items():
            for method, operation in item.operations().items():
                if not any(name in r for r in operation.security or []):
                    continue
                kept = [r for r in operation.security if name not in r]
                item = item.with_operation(
                    method, operation.model_copy(update={"security": kept})
                )
                changed = True
            paths[path] = item
        return paths if changed else None

    # Document-level requirements

    def requirements(self) -> list[dict[str, list[str]]]:
        return list(self.document.security or [])

    def add_requirement(self, name: str, scopes: Optional[list[str]] = None) -> None:
        """Require scheme *name* for every operation that does not override it.

        Raises:
            NotFoundError: If *name* is not a declared scheme.
            InvalidUsageError: If it is already required on its own.
        """
        self.get(name)
        requirement = {name: list(scopes or [])}
        current = self.requirements()
        if any(set(r) == {name} for r in current):
            raise InvalidUsageError(f"Security scheme '{name}' is already required")
        self._commit(security=[*current, requirement])

    def remove_requirement(self, name: str) -> None:
        current = self.requirements()
        remaining = [r for r in current if name not in r]
        if len(remaining) == len(current):
            raise NotFoundError(f"No security requirement names '{name}'")
        self._commit(security=remaining)
