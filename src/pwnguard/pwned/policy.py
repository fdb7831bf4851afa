"""
Compromised-password policy on top of the range lookup.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
from typing import Any, Mapping

from pwnguard.pwned.client import PwnedPasswordsClient
from pwnguard.pwned.config import PwnedConfig


def _check_minimum(minimum_occurrences: int) -> int:
    if isinstance(minimum_occurrences, bool) or not isinstance(minimum_occurrences, int):
        raise ValueError("minimum_occurrences must be an integer")
    if minimum_occurrences < 0:
        raise ValueError("minimum_occurrences must not be negative")
    return minimum_occurrences


class BreachPolicy:
    """Decide whether a password is too exposed to accept.

    A password is compromised when it has been seen strictly more than
    ``minimum_occurrences`` times. Site owners can raise the threshold to
    allow passwords that only appear once or twice in the data while still
    blocking regularly compromised entries.

    Lookup errors are never turned into a verdict; they propagate.
    """

    def __init__(
        self,
        client: PwnedPasswordsClient | None = None,
        minimum_occurrences: int | None = None,
    ):
        self.client = client if client is not None else PwnedPasswordsClient()
        if minimum_occurrences is None:
            minimum_occurrences = self.client.config.minimum_occurrences
        self.minimum_occurrences = _check_minimum(minimum_occurrences)

    async def close(self) -> None:
        await self.client.close()

    async def __aenter__(self) -> "BreachPolicy":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _threshold(self, minimum_occurrences: int | None) -> int:
        if minimum_occurrences is None:
            return self.minimum_occurrences
        return _check_minimum(minimum_occurrences)

    async def is_compromised(
        self,
        password: str | bytes,
        minimum_occurrences: int | None = None,
    ) -> bool:
        """Has the password been seen more than ``minimum_occurrences`` times?

        Args:
            password: Password to check (NOT stored or logged)
            minimum_occurrences: Override for the policy threshold

        Raises:
            ConnectionFailedError: If the range query failed
            MalformedResponseError: If the range response could not be parsed
        """
        minimum = self._threshold(minimum_occurrences)
        count = await self.client.count_for(password)
        return count > minimum

    async def is_hash_compromised(
        self,
        sha1_hash: str,
        minimum_occurrences: int | None = None,
    ) -> bool:
        """Same as is_compromised() for a pre-computed SHA-1 hash."""
        minimum = self._threshold(minimum_occurrences)
        count = await self.client.count_for_hash(sha1_hash)
        return count > minimum


def is_compromised_sync(
    password: str | bytes,
    minimum_occurrences: int | None = None,
    config: PwnedConfig | Mapping[str, Any] | None = None,
) -> bool:
    """Synchronous wrapper for BreachPolicy.is_compromised().

    Args:
        password: Password to check
        minimum_occurrences: Threshold, defaults to the configured one
        config: Optional configuration or overrides

    Returns:
        True if the password is compromised
    """
    async def _check():
        async with BreachPolicy(PwnedPasswordsClient(config)) as policy:
            return await policy.is_compromised(password, minimum_occurrences)

    return asyncio.run(_check())
