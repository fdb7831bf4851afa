"""
Pwned Passwords range API client.

Implements the k-anonymity lookup:
- Hash the password with SHA-1 and split it into range key and selector
- Query the range endpoint with the range key only
- Match the selector locally against the returned candidates

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import logging
from typing import Any, Mapping

from pwnguard.pwned.config import PwnedConfig
from pwnguard.pwned.exceptions import MalformedResponseError
from pwnguard.pwned.hashing import split, split_hash
from pwnguard.pwned.models import PasswordCheckResult
from pwnguard.pwned.transport import AiohttpTransport, Transport

logger = logging.getLogger(__name__)


def parse_range_response(body: str | bytes) -> dict[str, int]:
    """Parse a range response into a selector -> count table.

    Response format is one ``SELECTOR:COUNT`` entry per line. An empty body
    means nothing is known for the range.

    Args:
        body: Raw response body

    Returns:
        Mapping of selector to occurrence count

    Raises:
        MalformedResponseError: If any line is not a SELECTOR:COUNT pair
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedResponseError(f"Response is not valid UTF-8: {e}") from e

    body = body.strip()
    if not body:
        return {}

    table: dict[str, int] = {}
    for line_number, line in enumerate(body.split("\n"), start=1):
        line = line.strip()
        if not line:
            continue

        fields = line.split(":")
        if len(fields) != 2:
            raise MalformedResponseError("Expected SELECTOR:COUNT", line_number, line)

        selector, count = fields[0].strip(), fields[1].strip()
        if not selector:
            raise MalformedResponseError("Empty selector", line_number, line)
        # isdigit() alone accepts non-ASCII digits that int() rejects
        if not (count.isascii() and count.isdigit()):
            raise MalformedResponseError("Count is not a non-negative integer", line_number, line)

        table[selector] = int(count)

    return table


class PwnedPasswordsClient:
    """Client for the Pwned Passwords range API.

    Every lookup is independent: one request per call, nothing cached and
    nothing but the range key leaves this process.
    """

    def __init__(
        self,
        config: PwnedConfig | Mapping[str, Any] | None = None,
        transport: Transport | None = None,
        **overrides: Any,
    ):
        """Initialize client.

        Args:
            config: PwnedConfig, or a mapping of overrides merged onto the defaults
            transport: Object providing ``fetch``; defaults to an aiohttp transport
            **overrides: Option values merged onto ``config``; unknown names are dropped
        """
        if not isinstance(config, PwnedConfig):
            config = PwnedConfig.from_mapping(config)
        config = config.merged(overrides)
        self.config = config
        self._owns_transport = transport is None
        self.transport: Transport = transport if transport is not None else AiohttpTransport()

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport and isinstance(self.transport, AiohttpTransport):
            await self.transport.close()

    async def __aenter__(self) -> "PwnedPasswordsClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def get_range(self, range_key: str) -> dict[str, int]:
        """Fetch and parse the candidates for a range key.

        Args:
            range_key: Leading characters of the SHA-1 hash

        Returns:
            Mapping of selector to occurrence count

        Raises:
            ConnectionFailedError: If the transport could not complete the request
            MalformedResponseError: If the response could not be parsed
        """
        url = f"{self.config.endpoint}{range_key}"
        headers = {"User-Agent": self.config.user_agent}

        logger.debug(f"Querying range {range_key}")
        body = await self.transport.fetch(
            url,
            headers,
            self.config.connect_timeout_seconds,
            self.config.response_timeout_seconds,
        )

        table = parse_range_response(body)
        logger.debug(f"Range {range_key} returned {len(table)} candidates")
        return table

    async def _count(self, range_key: str, selector: str) -> int:
        table = await self.get_range(range_key)
        return table.get(selector, 0)

    async def count_for(self, password: str | bytes) -> int:
        """Get the number of times a password has appeared in breaches.

        Args:
            password: Password to check (NOT stored or logged)

        Returns:
            Occurrence count, 0 if not found
        """
        range_key, selector = split(password)
        return await self._count(range_key, selector)

    async def count_for_hash(self, sha1_hash: str) -> int:
        """Get the breach count for a pre-computed SHA-1 hash.

        Raises:
            ValueError: If the hash is not 40 hex characters
        """
        range_key, selector = split_hash(sha1_hash)
        return await self._count(range_key, selector)

    async def check_password(self, password: str | bytes) -> PasswordCheckResult:
        """Check a password and wrap the count in a PasswordCheckResult."""
        range_key, selector = split(password)
        occurrences = await self._count(range_key, selector)
        return PasswordCheckResult(occurrences=occurrences, hash_prefix=range_key)

    async def check_password_hash(self, sha1_hash: str) -> PasswordCheckResult:
        """Check a pre-computed SHA-1 hash and wrap the count in a PasswordCheckResult."""
        range_key, selector = split_hash(sha1_hash)
        occurrences = await self._count(range_key, selector)
        return PasswordCheckResult(occurrences=occurrences, hash_prefix=range_key)


# Convenience function for synchronous usage
def count_for_sync(
    password: str | bytes,
    config: PwnedConfig | Mapping[str, Any] | None = None,
) -> int:
    """Synchronous wrapper for getting a password's breach count.

    Args:
        password: Password to check
        config: Optional configuration or overrides

    Returns:
        Occurrence count
    """
    async def _count():
        async with PwnedPasswordsClient(config) as client:
            return await client.count_for(password)

    return asyncio.run(_count())
