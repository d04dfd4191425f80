"""In-process estimate cache.

Keys are case-insensitive. Values are held with their write time and served
only within the TTL. Stale entries are not purged on read. Without `max_entries` the store grows
with the number of distinct keys.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

from core.domain.models import HardwareProfile
from core.domain.presets import Quality, Resolution
from core.interfaces.cache import CacheEntry

DEFAULT_TTL_SECONDS = 3600.0
KEY_SEPARATOR = "|"


def build_cache_key(
    *,
    hardware: HardwareProfile,
    game_name: str,
    resolution: Resolution,
    quality: Quality,
) -> str:
    """Join cpu, gpu, ram, game, resolution and quality (in that order), lower-cased."""

    parts = (
        hardware.cpu or "",
        hardware.gpu or "",
        hardware.ram or "",
        game_name,
        resolution.value,
        quality.value,
    )
    return KEY_SEPARATOR.join(parts).lower()


class InMemoryEstimateCache:
    """Lock-guarded dict implementing `EstimateCache`."""

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp < self._ttl:
            return entry
        return None

    def set(self, key: str, fps: int) -> None:
        entry = CacheEntry(fps=fps, timestamp=self._clock())
        with self._lock:
            # Re-insert so dict order tracks write order for eviction.
            self._entries.pop(key, None)
            self._entries[key] = entry
            if self._max_entries is not None:
                while len(self._entries) > self._max_entries:
                    oldest = next(iter(self._entries))
                    del self._entries[oldest]
