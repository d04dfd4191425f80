"""Hardware vs. game requirement scoring.

Each game starts at 100 and loses points per failed check (RAM -30, CPU -20,
GPU -25, expected FPS below target -15). The verdict requires an average of
at least 70 *and* no issues at all, so any single issue fails it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from core.domain.models import (
    DEFAULT_BASELINE_FPS,
    CompatibilityResult,
    GameRequirement,
    HardwareProfile,
)
from core.domain.presets import Quality, Resolution
from core.services.local_estimator import round_half_up

COMPATIBLE_SCORE = 70

RAM_PENALTY = 30
CPU_PENALTY = 20
GPU_PENALTY = 25
FPS_PENALTY = 15

# First family extractable from both descriptors decides.
CPU_GENERATION_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("intel", re.compile(r"i[3579]-(\d+)")),
    ("amd", re.compile(r"ryzen\s*(\d+)")),
)

_GPU_MODEL_RE = re.compile(r"(gtx|rtx|rx)\s*(\d+)")
_NON_DIGITS_RE = re.compile(r"\D")

RECOMMENDATIONS: tuple[tuple[str, str], ...] = (
    ("RAM", "Upgrade RAM for better multitasking and gaming"),
    ("CPU", "Consider upgrading CPU for better overall performance"),
    ("GPU", "Consider upgrading GPU for better gaming performance"),
)

LABELS: tuple[tuple[int, str], ...] = (
    (90, "Excellent"),
    (70, "Good"),
    (50, "Fair"),
)


@dataclass(frozen=True)
class GpuModel:
    brand: str
    number: int


def parse_ram_gb(descriptor: str | None) -> int:
    digits = _NON_DIGITS_RE.sub("", descriptor or "")
    if not digits:
        return 0
    try:
        return int(digits)
    except ValueError:
        return 0


def cpu_generation(descriptor: str, pattern: re.Pattern[str]) -> int | None:
    match = pattern.search(descriptor.lower())
    return int(match.group(1)) if match else None


def is_cpu_compatible(system_cpu: str, required_cpu: str) -> bool:
    for _family, pattern in CPU_GENERATION_PATTERNS:
        system_gen = cpu_generation(system_cpu, pattern)
        required_gen = cpu_generation(required_cpu, pattern)
        if system_gen is not None and required_gen is not None:
            return system_gen >= required_gen
    # Indeterminate: assume compatible.
    return True


def parse_gpu_model(descriptor: str) -> GpuModel | None:
    match = _GPU_MODEL_RE.search(descriptor.lower())
    if not match:
        return None
    return GpuModel(brand=match.group(1), number=int(match.group(2)))


def is_gpu_compatible(system_gpu: str, required_gpu: str) -> bool:
    system = parse_gpu_model(system_gpu)
    required = parse_gpu_model(required_gpu)
    if system is None or required is None:
        return True
    if system.brand == "rtx" and required.brand == "gtx":
        return True
    if system.brand == "gtx" and required.brand == "rtx":
        return False
    return system.number >= required.number


def expected_fps(game: GameRequirement, resolution: Resolution, quality: Quality) -> int:
    tiers = game.fps_table()[resolution]
    return tiers.for_quality(quality) or DEFAULT_BASELINE_FPS


def compatibility_label(score: int) -> str:
    for threshold, label in LABELS:
        if score >= threshold:
            return label
    return "Poor"


class CompatibilityScorer:
    """Scores one hardware profile against a list of game requirements."""

    def score(
        self,
        hardware: HardwareProfile,
        games: Sequence[GameRequirement],
        resolution: Resolution,
        quality: Quality,
        target_fps: int,
    ) -> CompatibilityResult:
        issues: list[str] = []
        total = 0

        system_ram = parse_ram_gb(hardware.ram)
        system_cpu = hardware.cpu or ""
        system_gpu = hardware.gpu or ""

        for game in games:
            game_score = 100

            required_ram = game.required_ram(quality)
            if system_ram < required_ram:
                issues.append(f"{game.name}: Insufficient RAM ({system_ram}GB < {required_ram}GB required)")
                game_score -= RAM_PENALTY

            if not is_cpu_compatible(system_cpu, game.required_cpu(quality)):
                issues.append(f"{game.name}: CPU may not meet requirements")
                game_score -= CPU_PENALTY

            if not is_gpu_compatible(system_gpu, game.required_gpu(quality)):
                issues.append(f"{game.name}: GPU may not meet requirements")
                game_score -= GPU_PENALTY

            expected = expected_fps(game, resolution, quality)
            if expected < target_fps:
                issues.append(f"{game.name}: Expected {expected} FPS < {target_fps} FPS target")
                game_score -= FPS_PENALTY

            total += max(0, game_score)

        average = total / len(games) if games else 0.0
        score = round_half_up(average)

        return CompatibilityResult(
            is_compatible=average >= COMPATIBLE_SCORE and not issues,
            score=score,
            issues=issues,
            recommendations=[text for category, text in RECOMMENDATIONS if any(category in i for i in issues)],
            label=compatibility_label(score),
        )
