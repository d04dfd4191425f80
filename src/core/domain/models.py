"""Domain models (Pydantic v2).

Marketplace payloads use camelCase keys; the models accept them through
aliases and expose snake_case attributes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from core.domain.presets import Quality, Resolution

DEFAULT_BASELINE_FPS = 60


class HardwareProfile(BaseModel):
    """Free-text hardware descriptors as they appear on a listing."""

    model_config = ConfigDict(extra="ignore")

    cpu: str | None = Field(default=None, description="CPU descriptor, e.g. 'Intel i9-13900K'.")
    gpu: str | None = Field(default=None, description="GPU descriptor, e.g. 'RTX 4090'.")
    ram: str | None = Field(default=None, description="RAM descriptor, e.g. '32GB DDR5'.")


class QualityFps(BaseModel):
    """Baseline FPS per stored quality tier for one resolution."""

    model_config = ConfigDict(extra="ignore")

    low: int | None = Field(default=None, ge=0)
    medium: int | None = Field(default=None, ge=0)
    high: int | None = Field(default=None, ge=0)

    def for_quality(self, quality: Quality) -> int | None:
        return getattr(self, quality.baseline_key().value)


class GameFpsProfile(BaseModel):
    """Baseline FPS of a game on a reference mid-tier build.

    Catalog-derived profiles always carry the three resolutions and tiers.
    Request payloads may be partial; a missing value reads as the default
    baseline.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str | None = Field(default=None, description="Game title.")
    fps_profiles: dict[Resolution, QualityFps] = Field(
        default_factory=dict,
        alias="fpsProfiles",
        description="Baseline FPS keyed by resolution, then quality tier.",
    )

    def baseline_fps(self, resolution: Resolution, quality: Quality) -> int:
        tiers = self.fps_profiles.get(resolution)
        value = tiers.for_quality(quality) if tiers is not None else None
        return DEFAULT_BASELINE_FPS if value is None else value


class EstimationRequest(BaseModel):
    """Inbound estimation request. Required fields are checked by the service."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    hardware: HardwareProfile = Field(
        default_factory=HardwareProfile,
        alias="system",
        description="Hardware being evaluated.",
    )
    game: GameFpsProfile | None = None
    resolution: Resolution | None = None
    quality: Quality | None = None

    @field_validator("game", "resolution", "quality", mode="before")
    @classmethod
    def _blank_is_missing(cls, value: Any) -> Any:
        # "" reads as an omitted field (reported as missing, not malformed).
        if isinstance(value, str) and not value.strip():
            return None
        return value


class EstimateSource(str, Enum):
    """Where an estimate came from; drives the response tag."""

    CACHED = "cached"
    ESTIMATED = "estimated"
    FALLBACK = "fallback"
    PROVIDER = "provider"


class EstimationResult(BaseModel):
    fps: int
    source: EstimateSource

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"fps": self.fps}
        if self.source is not EstimateSource.PROVIDER:
            payload[self.source.value] = True
        return payload


class EstimationResponse(BaseModel):
    """Reply produced at the outermost boundary: an HTTP-like status plus body."""

    status_code: int = 200
    body: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class GameRequirement(BaseModel):
    """Minimum/recommended specs plus the baseline FPS table for a game."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(..., min_length=1)
    min_ram: int = Field(..., ge=0, alias="minRam", description="Minimum RAM (GB).")
    recommended_ram: int = Field(..., ge=0, alias="recommendedRam", description="Recommended RAM (GB).")
    min_cpu: str = Field(default="", alias="minCpu")
    recommended_cpu: str = Field(default="", alias="recommendedCpu")
    min_gpu: str = Field(default="", alias="minGpu")
    recommended_gpu: str = Field(default="", alias="recommendedGpu")

    fps_1080p_low: int = Field(..., ge=0, alias="fps1080pLow")
    fps_1080p_medium: int = Field(..., ge=0, alias="fps1080pMedium")
    fps_1080p_high: int = Field(..., ge=0, alias="fps1080pHigh")
    fps_1440p_low: int = Field(..., ge=0, alias="fps1440pLow")
    fps_1440p_medium: int = Field(..., ge=0, alias="fps1440pMedium")
    fps_1440p_high: int = Field(..., ge=0, alias="fps1440pHigh")
    fps_4k_low: int = Field(..., ge=0, alias="fps4kLow")
    fps_4k_medium: int = Field(..., ge=0, alias="fps4kMedium")
    fps_4k_high: int = Field(..., ge=0, alias="fps4kHigh")

    def fps_table(self) -> dict[Resolution, QualityFps]:
        return {
            Resolution.P1080: QualityFps(
                low=self.fps_1080p_low, medium=self.fps_1080p_medium, high=self.fps_1080p_high
            ),
            Resolution.P1440: QualityFps(
                low=self.fps_1440p_low, medium=self.fps_1440p_medium, high=self.fps_1440p_high
            ),
            Resolution.UHD_4K: QualityFps(low=self.fps_4k_low, medium=self.fps_4k_medium, high=self.fps_4k_high),
        }

    def to_fps_profile(self) -> GameFpsProfile:
        return GameFpsProfile(name=self.name, fps_profiles=self.fps_table())

    def required_ram(self, quality: Quality) -> int:
        return self.min_ram if quality.uses_minimum_specs() else self.recommended_ram

    def required_cpu(self, quality: Quality) -> str:
        return self.min_cpu if quality.uses_minimum_specs() else self.recommended_cpu

    def required_gpu(self, quality: Quality) -> str:
        return self.min_gpu if quality.uses_minimum_specs() else self.recommended_gpu


class CompatibilityResult(BaseModel):
    """Verdict of scoring one hardware profile against a list of games."""

    model_config = ConfigDict(populate_by_name=True)

    is_compatible: bool = Field(..., alias="isCompatible")
    score: int = Field(..., ge=0, le=100, description="Average per-game score (0..100).")
    issues: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    label: str = Field(default="Poor", description="Excellent / Good / Fair / Poor.")
