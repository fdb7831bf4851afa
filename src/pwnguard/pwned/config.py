"""
Configuration for the Pwned Passwords range lookup.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping

from pwnguard import __version__
from pwnguard.pwned.exceptions import InvalidConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.pwnedpasswords.com/range/"
DEFAULT_USER_AGENT = f"pwnguard-python/{__version__}"

ENV_PREFIX = "PWNGUARD_"


@dataclass(frozen=True)
class PwnedConfig:
    """Settings for range queries. Built once per client, never mutated."""

    endpoint: str = DEFAULT_ENDPOINT
    user_agent: str = DEFAULT_USER_AGENT

    # Initial connection limit in seconds (0 for off)
    connection_timeout: float = 0

    # Max time for the whole request in seconds (0 for off)
    remote_processing_timeout: float = 0

    # Occurrences tolerated before a password counts as compromised
    minimum_occurrences: int = 1

    @classmethod
    def option_names(cls) -> tuple[str, ...]:
        """Names of the recognized configuration options."""
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, overrides: Mapping[str, Any] | None = None) -> "PwnedConfig":
        """Merge overrides onto the defaults.

        Only recognized option names survive the merge; anything else is
        dropped without error.

        Raises:
            InvalidConfigurationError: If a recognized option has an unusable value
        """
        return cls().merged(overrides)

    @classmethod
    def from_env(cls) -> "PwnedConfig":
        """Load configuration from PWNGUARD_* environment variables."""
        overrides: dict[str, Any] = {}

        for name in cls.option_names():
            raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is None or raw == "":
                continue

            if name in ("endpoint", "user_agent"):
                overrides[name] = raw
                continue

            try:
                overrides[name] = int(raw) if name == "minimum_occurrences" else float(raw)
            except ValueError:
                raise InvalidConfigurationError(
                    f"{ENV_PREFIX}{name.upper()} must be a number, got {raw!r}"
                ) from None

        return cls.from_mapping(overrides)

    def merged(self, overrides: Mapping[str, Any] | None = None) -> "PwnedConfig":
        """Return a copy with the recognized overrides applied."""
        if not overrides:
            return self

        known = set(self.option_names())
        ignored = sorted(str(key) for key in overrides if key not in known)
        if ignored:
            logger.debug(f"Ignoring unknown configuration options: {', '.join(ignored)}")

        config = replace(self, **{k: v for k, v in overrides.items() if k in known})

        errors = config.validate()
        if errors:
            raise InvalidConfigurationError("; ".join(errors))

        return config

    def validate(self) -> list[str]:
        """Validate configuration. Returns list of errors."""
        errors = []

        if not isinstance(self.endpoint, str) or not self.endpoint:
            errors.append("endpoint must be a non-empty string")

        if not isinstance(self.user_agent, str):
            errors.append("user_agent must be a string")

        for name in ("connection_timeout", "remote_processing_timeout"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"{name} must be a number of seconds")
            elif value < 0:
                errors.append(f"{name} must be 0 (disabled) or positive")

        minimum = self.minimum_occurrences
        if isinstance(minimum, bool) or not isinstance(minimum, int):
            errors.append("minimum_occurrences must be an integer")
        elif minimum < 0:
            errors.append("minimum_occurrences must not be negative")

        return errors

    @property
    def connect_timeout_seconds(self) -> float | None:
        """Connection timeout for the transport, None when disabled."""
        return self.connection_timeout or None

    @property
    def response_timeout_seconds(self) -> float | None:
        """Request timeout for the transport, None when disabled."""
        return self.remote_processing_timeout or None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
