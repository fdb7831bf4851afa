"""
SHA-1 fingerprinting and range/selector splitting for k-anonymity lookups.

Only the range key (first 5 hex characters of the SHA-1 digest) is ever sent
to the remote service. The selector stays local and is matched against the
candidates the service returns.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import hashlib
import string

# First N chars of the hash supported by the range API
RANGE_SIZE = 5

SHA1_HEX_LENGTH = 40

_HEX_DIGITS = frozenset(string.hexdigits)


def fingerprint(password: str | bytes) -> str:
    """Return the uppercase, 40 character SHA-1 hex digest of a password.

    Args:
        password: Password as text (encoded UTF-8) or raw bytes

    Returns:
        Uppercase hexadecimal digest
    """
    if isinstance(password, str):
        password = password.encode("utf-8")
    return hashlib.sha1(password).hexdigest().upper()


def split(password: str | bytes, range_size: int = RANGE_SIZE) -> tuple[str, str]:
    """Hash a password and split it into (range_key, selector)."""
    digest = fingerprint(password)
    return digest[:range_size], digest[range_size:]


def split_hash(sha1_hash: str, range_size: int = RANGE_SIZE) -> tuple[str, str]:
    """Split a pre-computed SHA-1 hash into (range_key, selector).

    Args:
        sha1_hash: Full SHA-1 hash of the password, any case

    Returns:
        Tuple of (range_key, selector), both uppercase

    Raises:
        ValueError: If the value is not a 40 character hex string
    """
    digest = sha1_hash.strip().upper()
    if len(digest) != SHA1_HEX_LENGTH or not set(digest) <= _HEX_DIGITS:
        raise ValueError("Expected a 40 character hexadecimal SHA-1 hash")
    return digest[:range_size], digest[range_size:]
