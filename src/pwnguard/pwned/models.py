"""
Result models for Pwned Passwords lookups.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class RiskLevel(str, Enum):
    """How widely a password circulates in breach datasets."""

    SAFE = "safe"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# (exclusive upper bound on occurrences, level); anything above is CRITICAL
RISK_BANDS = (
    (1, RiskLevel.SAFE),
    (10, RiskLevel.LOW),
    (100, RiskLevel.MEDIUM),
    (10000, RiskLevel.HIGH),
)


@dataclass
class PasswordCheckResult:
    """Result of checking a password against Pwned Passwords."""

    occurrences: int = 0
    # Never store the actual password or the selector!
    hash_prefix: str = ""  # Only the range key
    checked_at: datetime = field(default_factory=datetime.now)

    @property
    def is_pwned(self) -> bool:
        """Check if password was found in breaches."""
        return self.occurrences > 0

    def exceeds(self, minimum_occurrences: int) -> bool:
        """Check whether the exposure is above a tolerated minimum."""
        return self.occurrences > minimum_occurrences

    @property
    def risk_level(self) -> RiskLevel:
        """Classify the occurrence count."""
        for upper_bound, level in RISK_BANDS:
            if self.occurrences < upper_bound:
                return level
        return RiskLevel.CRITICAL

    @property
    def risk_description(self) -> str:
        """One-line explanation of the risk level."""
        seen = f"{self.occurrences:,}"
        descriptions = {
            RiskLevel.SAFE: "No known breach dataset contains this password.",
            RiskLevel.LOW: f"Found {seen} occurrence(s) across breach datasets. Rotating it is advisable.",
            RiskLevel.MEDIUM: f"Found {seen} occurrences across breach datasets. It should be replaced.",
            RiskLevel.HIGH: f"Found {seen} occurrences across breach datasets. Replace it now.",
            RiskLevel.CRITICAL: f"Found {seen} occurrences across breach datasets. It is on common cracking lists and must not be used.",
        }
        return descriptions[self.risk_level]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "is_pwned": self.is_pwned,
            "occurrences": self.occurrences,
            "hash_prefix": self.hash_prefix,
            "risk_level": self.risk_level.value,
            "risk_description": self.risk_description,
            "checked_at": self.checked_at.isoformat(),
        }
