"""Connectivity prober -- is each server base URL answering?

Every URL is marked ``checking``, then all of them are probed concurrently
with one GET each. A probe settles as ``live`` on any status other than
404, and as ``unreachable`` on a 404 or on any exception. Each status is
recorded, and reported through the optional callback, as soon as its own
probe settles; a slow server never holds back the others. There is no
retry.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any, Callable, Optional

import httpx

from specedit.models import ProbeConfig, ServerStatus

logger = logging.getLogger(__name__)

StatusCallback = Callable[[int, ServerStatus], None]


def classify_status(status_code: int) -> ServerStatus:
    """Map an HTTP status to a server status: only 404 counts as unreachable."""
    if status_code == 404:
        return ServerStatus.UNREACHABLE
    return ServerStatus.LIVE


class ConnectivityProber:
    """Probe server base URLs concurrently.

    Args:
        config: Probe settings; ``timeout=None`` keeps the httpx default.
        transport: Optional :class:`httpx.AsyncBaseTransport`, mainly for
            tests (``httpx.MockTransport``).
    """

    def __init__(
        self,
        config: Optional[ProbeConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or ProbeConfig()
        self._transport = transport
        self._statuses: list[ServerStatus] = []

    @property
    def statuses(self) -> list[ServerStatus]:
        """Statuses of the most recent :meth:`check`, by URL position."""
        return list(self._statuses)

    def _client(self) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {"follow_redirects": True}
        if self._config.timeout is not None:
            kwargs["timeout"] = self._config.timeout
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    async def _probe(self, client: httpx.AsyncClient, url: str) -> ServerStatus:
        try:
            response = await client.get(url)
        except Exception as exc:
            logger.debug("Probe of %s failed: %s", url, exc)
            return ServerStatus.UNREACHABLE
        return classify_status(response.status_code)

    async def check(
        self,
        urls: Sequence[str],
        on_update: Optional[StatusCallback] = None,
    ) -> list[ServerStatus]:
        """Probe every URL in *urls* and return their statuses in order.

        Args:
            urls: Server base URLs; duplicates are probed separately.
            on_update: Called with ``(index, status)`` as each probe settles.
        """
        self._statuses = [ServerStatus.CHECKING] * len(urls)

        async with self._client() as client:

            async def settle(index: int, url: str) -> ServerStatus:
                status = await self._probe(client, url)
                self._statuses[index] = status
                if on_update is not None:
                    on_update(index, status)
                return status

            results = await asyncio.gather(
                *(settle(index, url) for index, url in enumerate(urls))
            )
        return list(results)


def check_servers(
    urls: Sequence[str],
    config: Optional[ProbeConfig] = None,
    on_update: Optional[StatusCallback] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> list[ServerStatus]:
    """Blocking wrapper around :meth:`ConnectivityProber.check` for CLI use."""
    prober = ConnectivityProber(config, transport=transport)
    return asyncio.run(prober.check(urls, on_update))
