"""
Exceptions raised by the Pwned Passwords range lookup.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""


class PwnedError(Exception):
    """Base class for all Pwned Passwords lookup errors."""


class ConnectionFailedError(PwnedError):
    """The range query could not be completed (DNS, TCP, TLS, timeout, HTTP status)."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Pwned Passwords connection failed - {detail}")


class MalformedResponseError(PwnedError):
    """The range response is not made of SELECTOR:COUNT lines."""

    def __init__(self, message: str, line_number: int | None = None, line: str | None = None):
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"{message} (line {line_number}: {line!r})"
        super().__init__(message)


class InvalidConfigurationError(PwnedError, ValueError):
    """A recognized configuration option carries an unusable value."""
