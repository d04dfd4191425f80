"""Deterministic FPS heuristic.

Scales a game's baseline FPS by tier multipliers matched against the GPU and
CPU descriptors. Both tables are ordered and evaluated first-match-wins: a
descriptor matching several rows (e.g. "rx 7900 xt / 6800") takes the
earliest one. The GPU and CPU factors compound.
"""

from __future__ import annotations

import math

from core.domain.models import HardwareProfile

MIN_LOCAL_FPS = 15
MAX_BASELINE_FACTOR = 2

TierRule = tuple[tuple[str, ...], float]

GPU_TIER_RULES: tuple[TierRule, ...] = (
    (("4090", "4080"), 1.8),
    (("4070", "3090", "3080"), 1.5),
    (("4060", "3070", "7900"), 1.3),
    (("3060", "7800", "6800"), 1.1),
    (("3050", "6700", "7600"), 0.9),
    (("1660", "1650", "6600"), 0.7),
    (("1050", "1030"), 0.4),
)

CPU_TIER_RULES: tuple[TierRule, ...] = (
    (("i9", "9900", "7950", "7900"), 1.1),
    (("i3", "3100", "5600"), 0.95),
)


def match_tier(descriptor: str | None, rules: tuple[TierRule, ...], default: float = 1.0) -> float:
    """Return the outcome of the first rule with a substring found in `descriptor`."""

    text = (descriptor or "").lower()
    if not text:
        return default
    for needles, outcome in rules:
        if any(needle in text for needle in needles):
            return outcome
    return default


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_local_fps(value: float, base_fps: int) -> float:
    # Lower bound wins when 2x baseline is itself below it.
    return max(MIN_LOCAL_FPS, min(value, base_fps * MAX_BASELINE_FACTOR))


def hardware_multiplier(hardware: HardwareProfile) -> float:
    multiplier = 1.0
    multiplier *= match_tier(hardware.gpu, GPU_TIER_RULES)
    multiplier *= match_tier(hardware.cpu, CPU_TIER_RULES)
    return multiplier


def estimate_local_fps(hardware: HardwareProfile, base_fps: int) -> int:
    """Local estimate: `round(clamp(base * multiplier, 15, 2 * base))`."""

    return round_half_up(clamp_local_fps(base_fps * hardware_multiplier(hardware), base_fps))
