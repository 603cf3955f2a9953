"""The document store: the single holder of the current OpenAPI document.

Every editor reads the current :class:`~specedit.models.Document` from a
:class:`DocumentStore`, builds a modified copy, and writes the whole
document back with :meth:`DocumentStore.set`. Writes are last-write-wins;
subscribers are notified synchronously, in subscription order.

Optionally the store mirrors itself into a :class:`LocalStorage`, a small
:mod:`diskcache` key/value directory under the data directory. The document
is kept under the ``openapi-store`` key and the display theme under
``theme-store``, each as a JSON string of the form::

    {"state": {"openApi": {...}}, "version": 0}

so that the next CLI invocation starts from where the previous one left off.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional

import diskcache

from specedit.models import Document, Theme
from specedit.parser.loader import parse_document

logger = logging.getLogger(__name__)

DOCUMENT_KEY = "openapi-store"
THEME_KEY = "theme-store"
STORAGE_VERSION = 0

Listener = Callable[[Optional[Document]], None]


class LocalStorage:
    """String key/value persistence backed by a :class:`diskcache.Cache`.

    Args:
        directory: Directory holding the cache files.
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)
        self._cache = diskcache.Cache(str(self._directory))

    @property
    def directory(self) -> Path:
        return self._directory

    def get_item(self, key: str) -> Optional[str]:
        return self._cache.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._cache.set(key, value)

    def remove_item(self, key: str) -> None:
        self._cache.delete(key)

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        self._cache.close()


def _read_state(storage: LocalStorage, key: str) -> Optional[dict[str, Any]]:
    raw = storage.get_item(key)
    if raw is None:
        return None
    payload = json.loads(raw)
    state = payload["state"]
    if not isinstance(state, dict):
        raise TypeError(f"expected an object under 'state', got {type(state).__name__}")
    return state


def _write_state(storage: LocalStorage, key: str, state: dict[str, Any]) -> None:
    payload = {"state": state, "version": STORAGE_VERSION}
    storage.set_item(key, json.dumps(payload, ensure_ascii=False))


class DocumentStore:
    """Holds at most one :class:`Document` and notifies subscribers on change.

    Args:
        storage: Optional persistence. When given, the document saved there
            is restored on construction and every :meth:`set` is mirrored
            back. A corrupt entry is logged and ignored.
    """

    def __init__(self, storage: Optional[LocalStorage] = None) -> None:
        self._document: Optional[Document] = None
        self._listeners: list[Listener] = []
        self._storage = storage
        if storage is not None:
            self._restore(storage)

    def get(self) -> Optional[Document]:
        """Return the current document, or ``None`` when nothing is loaded."""
        return self._document

    def set(self, document: Optional[Document]) -> None:
        """Replace the stored document wholesale and notify subscribers."""
        self._document = document
        if self._storage is not None:
            self._persist(self._storage)
        for listener in list(self._listeners):
            listener(document)

    def clear(self) -> None:
        """Forget the current document."""
        self.set(None)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener* for change notifications.

        Returns:
            A function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def load_from_text(self, text: str, language: str) -> Document:
        """Parse *text* as *language*, validate it, and store the result.

        Raises:
            SpecParseError: If the text is rejected. The stored document is
                left as it was.
        """
        document = parse_document(text, language)
        self.set(document)
        return document

    def _persist(self, storage: LocalStorage) -> None:
        data = self._document.to_dict() if self._document is not None else None
        _write_state(storage, DOCUMENT_KEY, {"openApi": data})

    def _restore(self, storage: LocalStorage) -> None:
        try:
            state = _read_state(storage, DOCUMENT_KEY)
            if state is not None and state.get("openApi") is not None:
                self._document = Document.model_validate(state["openApi"])
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning(
                "Ignoring unreadable stored document in %s: %s", storage.directory, exc
            )
            self._document = None


class ThemeStore:
    """The persisted light/dark display preference (``light`` by default)."""

    def __init__(self, storage: Optional[LocalStorage] = None) -> None:
        self._storage = storage
        self._theme = Theme.LIGHT
        if storage is not None:
            try:
                state = _read_state(storage, THEME_KEY)
                if state is not None:
                    self._theme = Theme(state["theme"])
            except (ValueError, KeyError, TypeError) as exc:
                logger.warning("Ignoring unreadable theme preference: %s", exc)

    def get(self) -> Theme:
        return self._theme

    def set(self, theme: Theme) -> None:
        self._theme = theme
        if self._storage is not None:
            _write_state(self._storage, THEME_KEY, {"theme": theme.value})

    def toggle(self) -> Theme:
        """Switch between light and dark and return the new theme."""
        self.set(Theme.DARK if self._theme == Theme.LIGHT else Theme.LIGHT)
        return self._theme
