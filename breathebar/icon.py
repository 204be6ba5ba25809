"""
Tray icon artwork for BreatheBar
"""

from __future__ import annotations

import math

from PIL import Image, ImageDraw

from .models import ReminderSnapshot

ICON_SIZE = 64
PETAL_COUNT = 6

IDLE_COLOR = (64, 150, 130, 255)
PAUSED_COLOR = (140, 140, 140, 255)


def render_icon(
    snapshot: ReminderSnapshot,
    expansion: float = 0.0,
    elapsed: float = 0.0,
    size: int = ICON_SIZE,
) -> Image.Image:
    """Draw the petal glyph; colour and spread follow the reminder state."""
    if snapshot.is_breathing_active:
        return _draw_flower(size, _warm_color(elapsed), spread=0.55 + 0.45 * expansion, rotation=elapsed * 12.0)
    if snapshot.is_primed:
        return _draw_flower(size, IDLE_COLOR, spread=0.75, rotation=0.0)
    return _draw_flower(size, PAUSED_COLOR, spread=0.75, rotation=0.0, hollow=True)


def _draw_flower(
    size: int,
    color: tuple[int, int, int, int],
    spread: float,
    rotation: float,
    hollow: bool = False,
) -> Image.Image:
    image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    center = size / 2
    petal_radius = size * 0.18
    orbit = size * 0.22 * max(0.0, min(1.0, spread))
    outline_width = max(1, size // 20)

    for index in range(PETAL_COUNT):
        angle = math.radians(rotation + index * 360.0 / PETAL_COUNT)
        cx = center + orbit * math.cos(angle)
        cy = center + orbit * math.sin(angle)
        box = [cx - petal_radius, cy - petal_radius, cx + petal_radius, cy + petal_radius]
        if hollow:
            draw.ellipse(box, outline=color, width=outline_width)
        else:
            draw.ellipse(box, fill=color[:3] + (170,), outline=color, width=outline_width)

    core = size * 0.08
    draw.ellipse([center - core, center - core, center + core, center + core], fill=color)
    return image


def _warm_color(t: float) -> tuple[int, int, int, int]:
    # Warm flicker around an orange base.
    r = 0.95 + 0.05 * math.sin(t * 2.2)
    g = 0.35 + 0.25 * math.sin(t * 1.7 + 1.0)
    b = 0.20 + 0.20 * math.sin(t * 2.9 + 2.0)
    return (_channel(r), _channel(g), _channel(b), 255)


def _channel(value: float) -> int:
    return max(0, min(255, int(round(value * 255))))
