"""FastAPI application exposing the estimation and compatibility endpoints."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from core.config import AppSettings
from core.domain.models import GameRequirement, HardwareProfile
from core.domain.presets import Quality, Resolution
from core.services.compatibility import CompatibilityScorer
from core.services.fps_estimation import FPSEstimationService

logger = logging.getLogger(__name__)


class CompatibilityRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    hardware: HardwareProfile = Field(default_factory=HardwareProfile, alias="system")
    games: list[GameRequirement] = Field(default_factory=list)
    resolution: Resolution = Resolution.P1080
    quality: Quality = Quality.MEDIUM
    target_fps: int = Field(default=60, ge=1, alias="targetFps")


def create_app(
    settings: AppSettings | None = None,
    *,
    service: FPSEstimationService | None = None,
    scorer: CompatibilityScorer | None = None,
) -> FastAPI:
    settings = settings or AppSettings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="FPS Estimator API",
        description="FPS estimation and hardware/game compatibility scoring",
        version="0.1.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    app.state.estimation = service or FPSEstimationService.from_settings(settings)
    app.state.scorer = scorer or CompatibilityScorer()

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": "Invalid request", "detail": str(exc)})

    @app.get("/api/health")
    async def health() -> dict[str, object]:
        return {"status": "ok", "remoteProvider": app.state.estimation.has_provider}

    @app.post("/api/fps-estimate")
    async def fps_estimate(request: Request) -> JSONResponse:
        try:
            payload = await request.json()
        except ValueError:
            return JSONResponse(status_code=400, content={"error": "Invalid request", "detail": "body is not JSON"})
        if not isinstance(payload, dict):
            return JSONResponse(status_code=400, content={"error": "Invalid request", "detail": "expected an object"})

        response = await app.state.estimation.respond(payload)
        return JSONResponse(status_code=response.status_code, content=response.body)

    @app.post("/api/compatibility")
    async def compatibility(body: CompatibilityRequest) -> dict[str, object]:
        result = app.state.scorer.score(body.hardware, body.games, body.resolution, body.quality, body.target_fps)
        return result.model_dump(by_alias=True)

    return app
