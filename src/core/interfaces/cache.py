"""Estimate cache contract.

Implementations must be safe to call from concurrent requests. `get` returns
None for unknown or expired keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class CacheEntry:
    fps: int
    timestamp: float


@runtime_checkable
class EstimateCache(Protocol):
    """Minimal contract for an estimate cache.

    Design rules:
    - `get` returns an entry only while it is younger than the store's TTL;
      stale entries read as a miss.
    - `set` always overwrites (value and timestamp).
    - Implementations must be safe for concurrent callers.
    """

    def get(self, key: str) -> CacheEntry | None:
        ...

    def set(self, key: str, fps: int) -> None:
        ...
