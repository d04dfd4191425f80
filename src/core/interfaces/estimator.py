"""Remote estimator contract."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import GameFpsProfile, HardwareProfile
from core.domain.presets import Quality, Resolution


@runtime_checkable
class ExternalEstimator(Protocol):
    """Adapter to a natural-language estimation provider.

    Design rules:
    - `estimate` is async because it does network I/O.
    - Returns the clamped FPS on success.
    - Raises `SoftFallback` for recoverable failures (rate limit, 5xx,
      timeout, unparseable answer) and `ProviderHardError` otherwise.
    """

    async def estimate(
        self,
        *,
        hardware: HardwareProfile,
        game: GameFpsProfile,
        resolution: Resolution,
        quality: Quality,
        base_fps: int,
    ) -> int:
        ...
