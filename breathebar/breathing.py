from __future__ import annotations

import math
from dataclasses import dataclass

from .models import MAX_CADENCE_SECONDS, MIN_CADENCE_SECONDS


@dataclass(frozen=True)
class BreathFrame:
    expansion: float  # 0 = fully exhaled, 1 = fully inhaled
    inhale_opacity: float
    exhale_opacity: float

    @property
    def prompt(self) -> str:
        if self.inhale_opacity > 0:
            return "Breathe in…"
        if self.exhale_opacity > 0:
            return "Breathe out…"
        return ""


def clamp_cadence(cadence_seconds: float) -> float:
    return max(MIN_CADENCE_SECONDS, min(MAX_CADENCE_SECONDS, float(cadence_seconds)))


def breath_frame(elapsed_seconds: float, cadence_seconds: float) -> BreathFrame:
    """
    One inhale plus one exhale make a cycle of ``2 * cadence`` seconds.
    Expansion follows -cos so a session starts contracted; the prompts fade
    through zero around each turn of the breath.
    """
    cycle = clamp_cadence(cadence_seconds) * 2.0
    angle = max(0.0, elapsed_seconds) * math.pi * 2.0 / cycle
    expansion = -math.cos(angle) * 0.5 + 0.5
    s = math.sin(angle)
    return BreathFrame(
        expansion=expansion,
        inhale_opacity=_unit((s - 0.15) * 5.0),
        exhale_opacity=_unit((-s - 0.15) * 5.0),
    )


def _unit(value: float) -> float:
    return max(0.0, min(1.0, value))
