"""Editor for ``paths`` and the operations under them."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from specedit.editors.base import SectionEditor, matches_query
from specedit.exceptions import InvalidUsageError, NotFoundError
from specedit.models import HTTP_METHODS, Operation, PathItem

DEFAULT_RESPONSES: dict[str, Any] = {"200": {"description": "Successful operation"}}


def normalize_method(method: str) -> str:
    """Lower-case *method* and check it is an OpenAPI operation key.

    Raises:
        InvalidUsageError: For anything that is not an HTTP method.
    """
    normalized = method.lower()
    if normalized not in HTTP_METHODS:
        raise InvalidUsageError(
            f"Unknown HTTP method '{method}'. Expected one of: {', '.join(HTTP_METHODS)}"
        )
    return normalized


class PathEditor(SectionEditor):
    def list(
        self,
        query: Optional[str] = None,
        method: Optional[str] = None,
    ) -> list[tuple[str, str, Operation]]:
        """Operations as ``(path, method, operation)`` in document order.

        Args:
            query: Matched against the path template and the operation
                summary.
            method: Only operations with this HTTP method.
        """
        wanted = normalize_method(method) if method else None
        return [
            (path, op_method, operation)
            for path, op_method, operation in self.document.iter_operations()
            if (wanted is None or op_method == wanted)
            and matches_query(query, path, operation.summary)
        ]

    def get_operation(self, path: str, method: str) -> Operation:
        """Return the operation under *path* / *method*.

        Raises:
            NotFoundError: If the path or the method is not declared.
        """
        method = normalize_method(method)
        item = self.document.path_item(path)
        operation = getattr(item, method) if item is not None else None
        if operation is None:
            raise NotFoundError(f"Operation {method.upper()} {path} not found")
        return operation

    def add(self, path: str, method: str, summary: Optional[str] = None) -> Operation:
        """Declare a new operation, creating the path entry if needed.

        The operation starts with a single ``200`` response.

        Raises:
            InvalidUsageError: If the path does not start with ``/`` or the
                operation already exists.
        """
        method = normalize_method(method)
        if not path.startswith("/"):
            raise InvalidUsageError(f"Path '{path}' must start with '/'")

        paths = dict(self.document.paths or {})
        item = paths.get(path) or PathItem()
        if getattr(item, method) is not None:
            raise InvalidUsageError(f"Operation {method.upper()} {path} already exists")

        operation = Operation.model_validate(
            {"summary": summary or "", "responses": DEFAULT_RESPONSES}
        )
        paths[path] = item.with_operation(method, operation)
        self._commit(paths=paths)
        return operation

    def update_operation(self, path: str, method: str, **changes: Any) -> Operation:
        """Apply field *changes* to an existing operation.

        Keys are :class:`Operation` field names (``summary``,
        ``operation_id``, ``parameters``...); ``None`` removes a field.

        Raises:
            NotFoundError: If the operation does not exist.
            InvalidUsageError: If the result is not a valid operation.
        """
        method = normalize_method(method)
        operation = self.get_operation(path, method)
        try:
            updated = operation.evolve(**changes)
        except ValidationError as exc:
            raise InvalidUsageError(f"Invalid operation fields: {exc}") from exc

        paths = dict(self.document.paths or {})
        paths[path] = paths[path].with_operation(method, updated)
        self._commit(paths=paths)
        return updated

    def remove(self, path: str, method: str) -> None:
        """Delete one operation; a path left without operations is dropped.

        Raises:
            NotFoundError: If the operation does not exist.
        """
        method = normalize_method(method)
        self.get_operation(path, method)

        paths = dict(self.document.paths or {})
        item = paths[path].without_operation(method)
        if item.operations():
            paths[path] = item
        else:
            del paths[path]
        self._commit(paths=paths)
