"""
Pwned Passwords integration module.

Checks passwords against known breach datasets with the k-anonymity
range API: only the first 5 characters of the SHA-1 hash leave this system.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from pwnguard.pwned.config import PwnedConfig
from pwnguard.pwned.exceptions import (
    PwnedError,
    ConnectionFailedError,
    MalformedResponseError,
    InvalidConfigurationError,
)
from pwnguard.pwned.hashing import RANGE_SIZE, fingerprint, split, split_hash
from pwnguard.pwned.models import PasswordCheckResult, RiskLevel
from pwnguard.pwned.transport import AiohttpTransport, Transport
from pwnguard.pwned.client import PwnedPasswordsClient, parse_range_response, count_for_sync
from pwnguard.pwned.policy import BreachPolicy, is_compromised_sync

__all__ = [
    "PwnedConfig",
    "PwnedError",
    "ConnectionFailedError",
    "MalformedResponseError",
    "InvalidConfigurationError",
    "RANGE_SIZE",
    "fingerprint",
    "split",
    "split_hash",
    "PasswordCheckResult",
    "RiskLevel",
    "AiohttpTransport",
    "Transport",
    "PwnedPasswordsClient",
    "parse_range_response",
    "count_for_sync",
    "BreachPolicy",
    "is_compromised_sync",
]
