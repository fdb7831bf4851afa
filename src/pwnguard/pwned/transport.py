"""
HTTP transports for range queries.

The lookup client only needs a single ``fetch`` capability, so any object
implementing :class:`Transport` can be injected (tests use in-memory fakes).

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import logging
from typing import Protocol, runtime_checkable

import aiohttp

from pwnguard.pwned.exceptions import ConnectionFailedError

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Anything that can GET a URL and hand back the raw body."""

    async def fetch(
        self,
        url: str,
        headers: dict[str, str],
        connect_timeout: float | None,
        response_timeout: float | None,
    ) -> str | bytes:
        """Fetch ``url`` or raise ConnectionFailedError."""
        ...


class AiohttpTransport:
    """Transport backed by an aiohttp client session."""

    def __init__(self, session: aiohttp.ClientSession | None = None):
        """Initialize transport.

        Args:
            session: Existing session to reuse. It is left open on close().
        """
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure HTTP session exists."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "AiohttpTransport":
        """Async context manager entry."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def fetch(
        self,
        url: str,
        headers: dict[str, str],
        connect_timeout: float | None,
        response_timeout: float | None,
    ) -> bytes:
        """GET a URL and return the raw body.

        Args:
            url: Full URL
            headers: Request headers
            connect_timeout: Seconds allowed to establish the connection (None for no limit)
            response_timeout: Seconds allowed for the whole request (None for no limit)

        Returns:
            Response body bytes, decoded by the caller

        Raises:
            ConnectionFailedError: On network errors, timeouts and non-2xx statuses
        """
        session = await self._ensure_session()
        timeout = aiohttp.ClientTimeout(total=response_timeout, connect=connect_timeout)

        try:
            async with session.get(url, headers=headers, timeout=timeout) as response:
                status = response.status
                body = await response.read()

        except asyncio.TimeoutError as e:
            raise ConnectionFailedError("Request timeout") from e
        except aiohttp.ClientError as e:
            raise ConnectionFailedError(f"Request failed: {e}") from e
        except OSError as e:
            raise ConnectionFailedError(f"Request failed: {e}") from e

        logger.debug(f"GET {url} -> HTTP {status} ({len(body)} bytes)")

        if status == 429:
            retry_after = response.headers.get("Retry-After", "unknown")
            raise ConnectionFailedError(f"Rate limited. Retry after {retry_after}s")
        if not 200 <= status < 300:
            excerpt = body[:200].decode("utf-8", errors="replace")
            raise ConnectionFailedError(f"HTTP {status}: {excerpt}")

        return body
