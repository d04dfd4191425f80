"""FPS estimation orchestration.

Flow per request:
validate -> resolve baseline -> cache lookup -> (hit | provider -> (ok |
soft fallback -> local) | hard error) -> cache write -> respond.

`estimate` raises domain errors; `respond` is the outermost boundary used by
the CLI and the HTTP app and never raises.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from pydantic import ValidationError

from adapters.estimate_cache import InMemoryEstimateCache, build_cache_key
from adapters.fps_provider import build_estimation_client
from core.config import AppSettings
from core.domain.errors import EstimationValidationError, ProviderHardError, SoftFallback
from core.domain.models import (
    EstimateSource,
    EstimationRequest,
    EstimationResponse,
    EstimationResult,
    GameFpsProfile,
    HardwareProfile,
)
from core.domain.presets import Quality, Resolution
from core.interfaces.cache import EstimateCache
from core.interfaces.estimator import ExternalEstimator
from core.services.local_estimator import estimate_local_fps

logger = logging.getLogger(__name__)


class FPSEstimationService:
    """Combines the cache, the remote provider and the local heuristic."""

    def __init__(
        self,
        *,
        cache: EstimateCache,
        provider: ExternalEstimator | None = None,
        coalesce_inflight: bool = False,
    ) -> None:
        self._cache = cache
        self._provider = provider
        self._coalesce = coalesce_inflight
        self._inflight: dict[str, asyncio.Future[EstimationResult]] = {}

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None) -> "FPSEstimationService":
        settings = settings or AppSettings()
        cache = InMemoryEstimateCache(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        )
        return cls(
            cache=cache,
            provider=build_estimation_client(settings),
            coalesce_inflight=settings.coalesce_inflight,
        )

    @property
    def has_provider(self) -> bool:
        return self._provider is not None

    async def estimate(self, request: EstimationRequest) -> EstimationResult:
        game = request.game
        if game is None or not game.name or request.resolution is None or request.quality is None:
            raise EstimationValidationError()

        base_fps = game.baseline_fps(request.resolution, request.quality)
        key = build_cache_key(
            hardware=request.hardware,
            game_name=game.name,
            resolution=request.resolution,
            quality=request.quality,
        )

        async def compute() -> EstimationResult:
            return await self._compute(
                key=key,
                hardware=request.hardware,
                game=game,
                resolution=request.resolution,
                quality=request.quality,
                base_fps=base_fps,
            )

        if self._coalesce:
            return await self._coalesced(key, compute)
        return await compute()

    async def _compute(
        self,
        *,
        key: str,
        hardware: HardwareProfile,
        game: GameFpsProfile,
        resolution: Resolution,
        quality: Quality,
        base_fps: int,
    ) -> EstimationResult:
        entry = self._cache.get(key)
        if entry is not None:
            logger.debug("Estimate cache hit for %s", key)
            result = EstimationResult(fps=entry.fps, source=EstimateSource.CACHED)
        elif self._provider is None:
            result = EstimationResult(fps=estimate_local_fps(hardware, base_fps), source=EstimateSource.ESTIMATED)
        else:
            try:
                fps = await self._provider.estimate(
                    hardware=hardware,
                    game=game,
                    resolution=resolution,
                    quality=quality,
                    base_fps=base_fps,
                )
                result = EstimationResult(fps=fps, source=EstimateSource.PROVIDER)
            except SoftFallback as exc:
                logger.info("Falling back to local estimate for %s (%s)", key, exc.reason)
                result = EstimationResult(fps=estimate_local_fps(hardware, base_fps), source=EstimateSource.FALLBACK)

        # Hits refresh the timestamp as well; fallbacks overwrite provider values.
        self._cache.set(key, result.fps)
        return result

    async def _coalesced(
        self,
        key: str,
        compute: Callable[[], Awaitable[EstimationResult]],
    ) -> EstimationResult:
        future = self._inflight.get(key)
        if future is None:
            future = asyncio.ensure_future(compute())
            self._inflight[key] = future
            future.add_done_callback(lambda _done: self._inflight.pop(key, None))
        return await asyncio.shield(future)

    async def respond(self, payload: EstimationRequest | dict[str, Any]) -> EstimationResponse:
        """Estimate and map the outcome to a status code plus wire payload."""

        try:
            request = (
                payload if isinstance(payload, EstimationRequest) else EstimationRequest.model_validate(payload)
            )
        except ValidationError as exc:
            return EstimationResponse(
                status_code=400,
                body={"error": "Invalid request", "detail": str(exc)},
            )

        try:
            result = await self.estimate(request)
        except EstimationValidationError as exc:
            return EstimationResponse(status_code=400, body={"error": exc.message})
        except ProviderHardError as exc:
            return EstimationResponse(
                status_code=502,
                body={
                    "error": "LLM request failed",
                    "providerStatus": exc.status_code,
                    "detail": exc.detail,
                },
            )
        except Exception as exc:
            logger.exception("Unexpected error while estimating FPS")
            return EstimationResponse(status_code=500, body={"error": "Server error", "detail": str(exc)})

        return EstimationResponse(status_code=200, body=result.to_payload())
