"""Editor for the document's ``servers`` list.

A server's URL is its identity: adding a second server with a URL that is
already listed is refused, and removal by URL removes every entry carrying
that URL (imported documents may contain duplicates).
"""

from __future__ import annotations

from typing import Optional

from specedit.editors.base import SectionEditor, matches_query
from specedit.exceptions import InvalidUsageError, NotFoundError
from specedit.models import Server


class ServerEditor(SectionEditor):
    def list(self, query: Optional[str] = None) -> list[Server]:
        """Servers whose URL or description contains *query*."""
        return [
            server
            for server in self.document.servers or []
            if matches_query(query, server.url, server.description)
        ]

    def urls(self) -> list[str]:
        return [server.url for server in self.document.servers or []]

    def add(self, server: Server) -> Server:
        """Append *server* to the list.

        Raises:
            InvalidUsageError: If a server with the same URL already exists.
        """
        if not server.url:
            raise InvalidUsageError("Server URL must not be empty")
        if server.url in self.urls():
            raise InvalidUsageError(f"Server '{server.url}' already exists")
        self._commit(servers=[*(self.document.servers or []), server])
        return server

    def update(self, url: str, server: Server) -> Server:
        """Replace the server(s) listed under *url* with *server*.

        Raises:
            NotFoundError: If no server has that URL.
            InvalidUsageError: If the new URL collides with another server.
        """
        servers = list(self.document.servers or [])
        if url not in self.urls():
            raise NotFoundError(f"Server '{url}' not found")
        if server.url != url and server.url in self.urls():
            raise InvalidUsageError(f"Server '{server.url}' already exists")

        updated: list[Server] = []
        replaced = False
        for existing in servers:
            if existing.url != url:
                updated.append(existing)
            elif not replaced:
                updated.append(server)
                replaced = True
        self._commit(servers=updated)
        return server

    def remove(self, url: str) -> None:
        """Remove every server whose URL is *url*.

        Raises:
            NotFoundError: If no server has that URL.
        """
        servers = self.document.servers or []
        remaining = [server for server in servers if server.url != url]
        if len(remaining) == len(servers):
            raise NotFoundError(f"Server '{url}' not found")
        self._commit(servers=remaining)
