#!/usr/bin/env python3
"""
Density to color mapping for waterfall cells.

Empty cells are a deep blue. Low densities brighten that blue up to the
knee, after which the hue sweeps from blue (236 degrees) down to red
(0 degrees) at the global maximum.
"""

import colorsys
from dataclasses import dataclass
from typing import Tuple

Color = Tuple[int, int, int]

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)

KNEE = 0.20
BASE_HUE = 236.0
BASE_SATURATION = 1.0
BASE_LIGHTNESS = 0.25
HOT_LIGHTNESS = 0.50


@dataclass(frozen=True)
class HSL:
    """Hue in degrees, saturation and lightness in [0, 1]"""
    h: float
    s: float
    l: float

    def to_rgb(self) -> Color:
        return hsl_to_rgb(self)


BASELINE = HSL(BASE_HUE, BASE_SATURATION, BASE_LIGHTNESS)


def hsl_to_rgb(hsl: HSL) -> Color:
    """Convert an HSL triple to 8-bit RGB (colorsys takes h, l, s in [0, 1])"""
    r, g, b = colorsys.hls_to_rgb(hsl.h / 360.0, hsl.l, hsl.s)
    return (round(r * 255), round(g * 255), round(b * 255))


def density(count: int, max_count: int) -> float:
    """Normalized density in [0, 1]; an empty store (max 0) has density 0"""
    if max_count <= 0 or count <= 0:
        return 0.0
    return min(1.0, count / max_count)


def hsl_for_count(count: int, max_count: int) -> HSL:
    n = density(count, max_count)

    if n == 0.0:
        return BASELINE

    if n < KNEE:
        lightness = BASE_LIGHTNESS + (HOT_LIGHTNESS - BASE_LIGHTNESS) * (n / KNEE)
        return HSL(BASE_HUE, BASE_SATURATION, lightness)

    hue = BASE_HUE - (n - KNEE) * (BASE_HUE / (1.0 - KNEE))
    return HSL(max(0.0, hue), BASE_SATURATION, HOT_LIGHTNESS)


def color_for_count(count: int, max_count: int) -> Color:
    """Map an observation count to the RGB color of its cell"""
    return hsl_to_rgb(hsl_for_count(count, max_count))
