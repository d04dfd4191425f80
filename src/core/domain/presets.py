"""Resolution and quality presets.

Kept in the domain layer so the estimation service, the compatibility scorer
and the outer surfaces (CLI/API) share a single source of truth.
"""

from __future__ import annotations

from enum import Enum


class Resolution(str, Enum):
    """Output resolutions with stored baseline data."""

    P1080 = "1080p"
    P1440 = "1440p"
    UHD_4K = "4k"


class Quality(str, Enum):
    """Graphics quality presets a caller may ask for."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    ULTRA = "ultra"

    def baseline_key(self) -> "Quality":
        """Stored tier for this preset; ultra has no data of its own and reads high."""

        return Quality.HIGH if self is Quality.ULTRA else self

    def uses_minimum_specs(self) -> bool:
        return self is Quality.LOW
