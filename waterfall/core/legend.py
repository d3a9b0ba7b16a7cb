#!/usr/bin/env python3
"""
Terminal legend for the waterfall color ramp.
"""

from rich.text import Text

from .color import color_for_count

LEGEND_STEPS = 25


def color_scale(steps: int = LEGEND_STEPS, swatch: str = "  ") -> Text:
    """Rich Text with one background-colored swatch per density step"""
    text = Text("Color scale: ")
    for step in range(steps + 1):
        r, g, b = color_for_count(step, steps)
        text.append(swatch, style=f"on rgb({r},{g},{b})")
    text.append(" (0 → max)")
    return text
